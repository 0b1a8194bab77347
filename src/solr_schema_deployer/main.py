"""
Main entry point for the Solr schema deployer.

This module provides the command-line interface: one-shot deployment commands,
and the MCP server when no command is given.
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import argparse

from .config import Config, get_config
from .exceptions import SchemaDeployError
from .server import SchemaDeployerMCPServer, run_server


def setup_logging(log_level: str) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: The logging level to use.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('pysolr').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)


def create_arg_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description="Solr schema deployer - push configsets to a Solr core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --post-schema default             # Deploy configsets/default
  %(prog)s --one-at-a-time default           # Upload it one file per request
  %(prog)s --view-schema solrconfig.xml      # Show a deployed file
  %(prog)s --ping                            # Check the core answers
  %(prog)s                                   # Run the MCP server on stdio

Environment Variables:
  SOLR_BASE_URL          - Solr base URL (default: http://localhost:8983/solr)
  SOLR_CORE              - Solr core name (required)
  SOLR_SCHEMA_UPLOAD_URL - Schema upload URL (default: derived from the core)
  SOLR_USERNAME          - Solr username (optional)
  SOLR_PASSWORD          - Solr password (optional)
  SOLR_TIMEOUT           - Request timeout in seconds (default: 30)
  SOLR_VERIFY_SSL        - Verify SSL certificates (default: true)
  SOLR_MAX_RETRIES       - Transport retries (default: 3)
  SOLR_CONFIGSETS_DIR    - Configset root directory (default: configsets)
  SOLR_DEFAULT_SERVER_ID - Server id used by default (default: default)
  PANTHEON_ENVIRONMENT   - Set on the managed platform: direct upload
  ENV                    - "local" for a local Solr: zip upload
  LOG_LEVEL              - Logging level (default: INFO)
        """
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        help="Path to .env file (default: .env in current directory)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration"
    )

    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration and exit"
    )

    commands = parser.add_mutually_exclusive_group()
    commands.add_argument(
        "--post-schema",
        metavar="SERVER_ID",
        nargs="?",
        const="",
        help="Deploy the configset of SERVER_ID and exit"
    )
    commands.add_argument(
        "--one-at-a-time",
        metavar="SERVER_ID",
        nargs="?",
        const="",
        help="Upload the configset of SERVER_ID one file per request and exit"
    )
    commands.add_argument(
        "--view-schema",
        metavar="FILE",
        nargs="?",
        const="schema.xml",
        help="Print a deployed configset file (default: schema.xml) and exit"
    )
    commands.add_argument(
        "--ping",
        action="store_true",
        help="Check that the Solr core answers and exit"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    return parser


def run_command(config: Config, args: argparse.Namespace) -> Optional[int]:
    """
    Run a one-shot command.

    Returns:
        The exit code, or None when no command was requested.
    """
    if args.post_schema is None and args.one_at_a_time is None \
            and args.view_schema is None and not args.ping:
        return None

    logger = logging.getLogger(__name__)
    server = SchemaDeployerMCPServer(config)
    try:
        if args.post_schema is not None:
            server_id = args.post_schema or config.deploy.default_server_id
            result = server.poster.post_schema(server_id)
            for message in result.messages:
                print(message)
            return 0 if result.success else 1

        if args.one_at_a_time is not None:
            server_id = args.one_at_a_time or config.deploy.default_server_id
            result = server.poster.upload_server_one_at_a_time(server_id)
            for message in result.messages:
                print(message)
            return 0 if result.success else 1

        if args.view_schema is not None:
            contents = server.viewer.view_schema(args.view_schema)
            if contents is None:
                logger.error(f"Could not retrieve {args.view_schema}")
                return 1
            print(contents)
            return 0

        healthy = server.solr_client.ping()
        print(f"{config.solr.core}: {'healthy' if healthy else 'unhealthy'}")
        return 0 if healthy else 1
    except SchemaDeployError as e:
        logger.error(f"Deployment failed: {e}")
        return 1
    finally:
        server.cleanup()


def validate_config(config: Config) -> int:
    """Log the loaded configuration and return a success exit code."""
    logger = logging.getLogger(__name__)
    logger.info("Configuration validation successful!")
    logger.info(f"Solr core: {config.solr.core}")
    logger.info(f"Solr URL: {config.solr.base_url}")
    logger.info(f"Configsets: {config.deploy.configsets_dir}")
    return 0


async def main_async(config: Config) -> int:
    """
    Async main function running the MCP server.

    Args:
        config: Loaded configuration.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    logger = logging.getLogger(__name__)
    try:
        logger.info("Starting Solr schema deployer MCP server...")

        shutdown_event = asyncio.Event()

        def signal_handler(signum: int, frame) -> None:
            logger.info(f"Received signal {signum}, initiating graceful shutdown...")
            shutdown_event.set()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        server_task = asyncio.create_task(run_server(config))
        shutdown_task = asyncio.create_task(shutdown_event.wait())

        done, pending = await asyncio.wait(
            [server_task, shutdown_task],
            return_when=asyncio.FIRST_COMPLETED
        )

        for task in pending:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if server_task in done:
            try:
                await server_task
            except Exception as e:
                logger.error(f"Server error: {e}")
                return 1

        logger.info("Solr schema deployer shutdown completed")
        return 0

    except KeyboardInterrupt:
        print("\nShutdown requested by user")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point for the command-line interface."""
    parser = create_arg_parser()
    args = parser.parse_args()

    try:
        config = get_config(args.env_file)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.log_level:
        config.mcp.log_level = args.log_level
    setup_logging(config.mcp.log_level)

    if args.validate_config:
        sys.exit(validate_config(config))

    exit_code = run_command(config, args)
    if exit_code is None:
        exit_code = asyncio.run(main_async(config))

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
