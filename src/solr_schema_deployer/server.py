"""
MCP Server exposing the Solr schema deployer.

This module provides an MCP server with tools to post a configset to the
configured Solr core, upload it file by file, read deployed files back and check
that the core answers.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from mcp import McpError
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    INVALID_PARAMS,
    INTERNAL_ERROR,
    ErrorData,
    TextContent,
    Tool as ToolDefinition,
)

from .config import Config
from .endpoint import Endpoint
from .exceptions import SchemaDeployError
from .files import ConfigFileProvider
from .schema_poster import SchemaPoster
from .solr_client import SOLRClient
from .transport import create_session
from .viewer import SchemaViewer

logger = logging.getLogger(__name__)


class SchemaDeployerMCPServer:
    """
    MCP Server that deploys Solr configsets.

    The HTTP session, poster, viewer and Solr client are built from the
    configuration unless they are passed in.
    """

    def __init__(
        self,
        config: Config,
        poster: Optional[SchemaPoster] = None,
        viewer: Optional[SchemaViewer] = None,
        solr_client: Optional[SOLRClient] = None,
    ):
        """
        Initialize the schema deployer MCP server.

        Args:
            config: Configuration object containing Solr and deployment settings.
            poster: Optional pre-built schema poster.
            viewer: Optional pre-built schema viewer.
            solr_client: Optional pre-built Solr client.
        """
        self.config = config
        endpoint = Endpoint.from_config(config.solr)
        session = None
        if poster is None or viewer is None or solr_client is None:
            session = create_session(config.solr)

        self.poster = poster or SchemaPoster(
            session,
            endpoint,
            ConfigFileProvider(config.deploy.configsets_dir),
            managed_platform=config.deploy.managed_platform,
            local_development=config.deploy.local_development,
            timeout=config.solr.timeout,
        )
        self.viewer = viewer or SchemaViewer(
            session, endpoint, timeout=config.solr.timeout
        )
        self.solr_client = solr_client or SOLRClient(
            endpoint, session=session, timeout=config.solr.timeout
        )
        self.server = Server("solr-schema-deployer")
        self._setup_tools()

    def _setup_tools(self) -> None:
        """Set up all available tools for the MCP server."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[ToolDefinition]:
            """List all available tools."""
            return [
                ToolDefinition(
                    name="post_schema",
                    description="Deploy the configset of a server to the Solr core",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "server_id": {
                                "type": "string",
                                "description": "Server id whose configset is deployed",
                            },
                        },
                    },
                ),
                ToolDefinition(
                    name="upload_files_one_at_a_time",
                    description="Upload the configset of a server one file per request",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "server_id": {
                                "type": "string",
                                "description": "Server id whose configset is uploaded",
                            },
                        },
                    },
                ),
                ToolDefinition(
                    name="view_schema",
                    description="Show a configset file as deployed on the Solr core",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "filename": {
                                "type": "string",
                                "description": "File to show",
                                "default": "schema.xml",
                            },
                        },
                    },
                ),
                ToolDefinition(
                    name="ping_solr",
                    description="Test the Solr core connection",
                    inputSchema={"type": "object", "properties": {}},
                ),
            ]

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: Dict[str, Any]
        ) -> List[TextContent]:
            """Handle tool calls."""
            return await self.dispatch(name, arguments or {})

    async def dispatch(self, name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        """Route a tool call to its handler, mapping errors to MCP errors."""
        handlers = {
            "post_schema": self._handle_post_schema,
            "upload_files_one_at_a_time": self._handle_upload_one_at_a_time,
            "view_schema": self._handle_view_schema,
            "ping_solr": self._handle_ping_solr,
        }
        handler = handlers.get(name)
        if handler is None:
            raise McpError(
                ErrorData(code=INVALID_PARAMS, message=f"Unknown tool: {name}")
            )
        try:
            return await handler(arguments)
        except McpError:
            raise
        except SchemaDeployError as e:
            logger.error(f"Deployment error in tool {name}: {e}")
            raise McpError(
                ErrorData(code=INTERNAL_ERROR, message=f"Deployment error: {str(e)}")
            )
        except Exception as e:
            logger.error(f"Unexpected error in tool {name}: {e}")
            raise McpError(
                ErrorData(code=INTERNAL_ERROR, message=f"Internal error: {str(e)}")
            )

    def _server_id(self, arguments: Dict[str, Any]) -> str:
        server_id = arguments.get("server_id") or self.config.deploy.default_server_id
        if not isinstance(server_id, str):
            raise McpError(
                ErrorData(code=INVALID_PARAMS, message="server_id must be a string")
            )
        return server_id

    async def _handle_post_schema(self, arguments: Dict[str, Any]) -> List[TextContent]:
        """Handle configset deployment requests."""
        server_id = self._server_id(arguments)
        result = self.poster.post_schema(server_id)

        payload = {
            "server_id": server_id,
            "strategy": result.strategy.value,
            "success": result.success,
            "status_code": result.status_code,
            "reason": result.reason,
            "messages": result.messages,
        }
        return [TextContent(type="text", text=json.dumps(payload, indent=2))]

    async def _handle_upload_one_at_a_time(
        self, arguments: Dict[str, Any]
    ) -> List[TextContent]:
        """Handle per-file upload requests."""
        server_id = self._server_id(arguments)
        result = self.poster.upload_server_one_at_a_time(server_id)

        payload = {
            "server_id": server_id,
            "strategy": result.strategy.value,
            "success": result.success,
            "files": [
                {
                    "filename": outcome.target,
                    "status_code": outcome.status_code,
                    "reason": outcome.reason,
                    "success": outcome.success,
                }
                for outcome in result.outcomes
            ],
            "messages": result.messages,
        }
        return [TextContent(type="text", text=json.dumps(payload, indent=2))]

    async def _handle_view_schema(self, arguments: Dict[str, Any]) -> List[TextContent]:
        """Handle file view requests."""
        filename = arguments.get("filename") or "schema.xml"
        contents = self.viewer.view_schema(filename)

        if contents is None:
            return [
                TextContent(
                    type="text",
                    text=f"Could not retrieve {filename} from the Solr core",
                )
            ]
        return [TextContent(type="text", text=contents)]

    async def _handle_ping_solr(self, arguments: Dict[str, Any]) -> List[TextContent]:
        """Handle Solr ping requests."""
        is_healthy = self.solr_client.ping()

        result = {
            "status": "healthy" if is_healthy else "unhealthy",
            "core": self.config.solr.core,
            "solr_url": self.config.solr.base_url,
        }

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    async def run(self) -> None:
        """Run the MCP server."""
        logger.info(f"Starting Solr schema deployer for core: {self.config.solr.core}")

        import sys

        if sys.stdin.isatty():
            raise RuntimeError(
                "This MCP server requires STDIN for communication.\n"
                "It should be started by an MCP client, not run directly.\n"
                "\n"
                "Use --post-schema or --view-schema for one-shot commands."
            )

        async with stdio_server() as (read_stream, write_stream):
            logger.info("Solr schema deployer MCP server is running...")

            initialization_options = self.server.create_initialization_options(
                notification_options=None,
                experimental_capabilities=None,
            )

            await self.server.run(
                read_stream, write_stream, initialization_options, False, True
            )

    def cleanup(self) -> None:
        """Clean up resources."""
        if self.solr_client:
            self.solr_client.close()
        logger.info("Solr schema deployer cleanup completed")


async def run_server(config: Config) -> None:
    """
    Run the schema deployer MCP server.

    Args:
        config: Configuration object.
    """
    server = SchemaDeployerMCPServer(config)
    try:
        await server.run()
    finally:
        server.cleanup()
