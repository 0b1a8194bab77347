"""
Unit tests for the command-line entry point.
"""

from unittest.mock import patch

import pytest

from solr_schema_deployer.exceptions import ServerNotFoundError
from solr_schema_deployer.main import create_arg_parser, main, run_command
from solr_schema_deployer.schema_poster import (
    DeploymentResult,
    DeploymentStrategy,
    UploadOutcome,
)


@pytest.fixture
def mock_server():
    with patch("solr_schema_deployer.main.SchemaDeployerMCPServer") as server_class:
        yield server_class.return_value


def parse(*argv):
    return create_arg_parser().parse_args(list(argv))


def deployment(success):
    return DeploymentResult(
        strategy=DeploymentStrategy.DIRECT_MULTI_FILE,
        outcomes=(
            UploadOutcome(
                target="default",
                status_code=200 if success else 500,
                reason="OK" if success else "Server Error",
                success=success,
                message="Result: UPLOADED Status code: 200 - OK"
                if success
                else "Result: NOT UPLOADED Status code: 500 - Server Error",
            ),
        ),
    )


class TestRunCommand:
    """Test cases for one-shot commands."""

    def test_no_command(self, test_config, mock_server):
        """Test that the MCP server path is taken without a command."""
        assert run_command(test_config, parse()) is None

    def test_post_schema(self, test_config, mock_server, capsys):
        mock_server.poster.post_schema.return_value = deployment(True)

        assert run_command(test_config, parse("--post-schema", "solr8")) == 0

        mock_server.poster.post_schema.assert_called_once_with("solr8")
        assert "Result: UPLOADED" in capsys.readouterr().out
        mock_server.cleanup.assert_called_once()

    def test_post_schema_default_server(self, test_config, mock_server):
        mock_server.poster.post_schema.return_value = deployment(False)

        assert run_command(test_config, parse("--post-schema")) == 1

        mock_server.poster.post_schema.assert_called_once_with("default")

    def test_post_schema_error(self, test_config, mock_server):
        mock_server.poster.post_schema.side_effect = ServerNotFoundError("missing")

        assert run_command(test_config, parse("--post-schema", "missing")) == 1
        mock_server.cleanup.assert_called_once()

    def test_one_at_a_time(self, test_config, mock_server, capsys):
        mock_server.poster.upload_server_one_at_a_time.return_value = DeploymentResult(
            strategy=DeploymentStrategy.PER_FILE_SEQUENTIAL,
            outcomes=(
                UploadOutcome(
                    target="a.xml",
                    status_code=200,
                    reason="OK",
                    success=True,
                    message="File: a.xml, Status code: 200 - OK",
                ),
            ),
        )

        assert run_command(test_config, parse("--one-at-a-time", "default")) == 0
        assert "File: a.xml" in capsys.readouterr().out

    def test_one_at_a_time_failure_exit_code(self, test_config, fake_session, response, capsys):
        """Test that failed per-file uploads give a non-zero exit code."""
        session = fake_session([response(500, "Server Error")] * 3)

        with patch("solr_schema_deployer.server.create_session", return_value=session):
            exit_code = run_command(test_config, parse("--one-at-a-time", "default"))

        assert len(session.sent) == 3
        assert exit_code == 1
        assert capsys.readouterr().out.count("Status code: 500 - Server Error") == 3

    def test_view_schema(self, test_config, mock_server, capsys):
        mock_server.viewer.view_schema.return_value = "<schema/>"

        assert run_command(test_config, parse("--view-schema")) == 0

        mock_server.viewer.view_schema.assert_called_once_with("schema.xml")
        assert "<schema/>" in capsys.readouterr().out

    def test_view_schema_missing(self, test_config, mock_server):
        mock_server.viewer.view_schema.return_value = None

        assert run_command(test_config, parse("--view-schema", "x.xml")) == 1

    def test_ping(self, test_config, mock_server, capsys):
        mock_server.solr_client.ping.return_value = True

        assert run_command(test_config, parse("--ping")) == 0
        assert "test_core: healthy" in capsys.readouterr().out

    def test_commands_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse("--ping", "--view-schema")


class TestMain:
    """Test cases for the entry point."""

    def test_validate_config_wins_over_command(self, test_config):
        """Test that --validate-config exits before running a command."""
        argv = ["solr-schema-deployer", "--validate-config", "--post-schema", "default"]
        with patch("sys.argv", argv), patch(
            "solr_schema_deployer.main.get_config", return_value=test_config
        ) as get_config, patch("solr_schema_deployer.main.setup_logging") as setup_logging, patch(
            "solr_schema_deployer.main.run_command"
        ) as run_command_mock:
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 0
        get_config.assert_called_once()
        setup_logging.assert_called_once()
        run_command_mock.assert_not_called()

    def test_command_exit_code(self, test_config):
        argv = ["solr-schema-deployer", "--one-at-a-time", "default"]
        with patch("sys.argv", argv), patch(
            "solr_schema_deployer.main.get_config", return_value=test_config
        ), patch("solr_schema_deployer.main.setup_logging"), patch(
            "solr_schema_deployer.main.run_command", return_value=1
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
