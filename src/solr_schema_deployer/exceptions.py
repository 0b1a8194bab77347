"""Exceptions raised while deploying a configset to Solr."""


class SchemaDeployError(Exception):
    """Base exception for schema deployment errors."""

    pass


class ConfigFileError(SchemaDeployError):
    """Base exception for failures loading the configset files."""

    pass


class ServerNotFoundError(ConfigFileError):
    """Raised when no configuration exists for the requested server id."""

    pass


class ConfigRetrievalError(ConfigFileError):
    """Raised when the configset files exist but cannot be read."""

    pass


class TransportError(SchemaDeployError):
    """Raised when no HTTP response could be obtained."""

    pass


class NonSuccessStatusError(SchemaDeployError):
    """Raised on request by callers that treat a non-2xx upload as fatal."""

    def __init__(self, message: str, status_code: int = 0, reason: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class ArchiveError(SchemaDeployError):
    """Raised when the configset zip archive cannot be built."""

    pass
