"""
Solr schema deployer - push Solr configsets to a managed or local Solr core.

This package loads a configset (schema.xml, solrconfig.xml, ...) from disk and
uploads it either as one JSON document of base64 encoded files or as a zip
archive, depending on the environment it runs in. It can also be driven as an
MCP server.
"""

__version__ = "1.0.0"

from .config import Config, get_config
from .endpoint import Endpoint
from .exceptions import (
    ArchiveError,
    ConfigRetrievalError,
    NonSuccessStatusError,
    SchemaDeployError,
    ServerNotFoundError,
    TransportError,
)
from .schema_poster import DeploymentResult, DeploymentStrategy, SchemaPoster
from .server import SchemaDeployerMCPServer
from .viewer import SchemaViewer

__all__ = [
    "Config",
    "get_config",
    "Endpoint",
    "ArchiveError",
    "ConfigRetrievalError",
    "NonSuccessStatusError",
    "SchemaDeployError",
    "ServerNotFoundError",
    "TransportError",
    "DeploymentResult",
    "DeploymentStrategy",
    "SchemaPoster",
    "SchemaDeployerMCPServer",
    "SchemaViewer",
]
