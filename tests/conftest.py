"""
Pytest configuration and fixtures for Solr schema deployer tests.
"""

import os
import tempfile
from pathlib import Path

import pytest
import requests

from solr_schema_deployer.config import Config, DeployConfig, MCPConfig, SOLRConfig
from solr_schema_deployer.endpoint import Endpoint


def make_response(status_code=200, reason="OK", content=b""):
    """Build a requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = content
    response.encoding = "utf-8"
    return response


class FakeSession(requests.Session):
    """Session that records prepared requests and replays canned responses."""

    def __init__(self, responses=None):
        super().__init__()
        self.sent = []
        self.send_kwargs = []
        self.responses = list(responses or [])

    def send(self, request, **kwargs):
        self.sent.append(request)
        self.send_kwargs.append(kwargs)
        item = self.responses.pop(0) if self.responses else make_response()
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def fake_session():
    """Factory for fake sessions preloaded with responses."""
    return FakeSession


@pytest.fixture
def response():
    """Factory for canned responses."""
    return make_response


@pytest.fixture
def endpoint():
    """Endpoint for a local core."""
    return Endpoint(base_url="http://localhost:8983/solr", core="test_core")


@pytest.fixture
def configset_files():
    """A small configset."""
    return {
        "schema.xml": b'<?xml version="1.0"?>\n<schema name="test" version="1.6"/>\n',
        "solrconfig.xml": b"<config><luceneMatchVersion>9.0</luceneMatchVersion></config>",
        "stopwords.txt": b"a\nan\nthe\n",
    }


@pytest.fixture
def configsets_dir(tmp_path, configset_files):
    """Configset root with a 'default' server on disk."""
    server_dir = tmp_path / "configsets" / "default"
    server_dir.mkdir(parents=True)
    for filename, contents in configset_files.items():
        (server_dir / filename).write_bytes(contents)
    return tmp_path / "configsets"


@pytest.fixture
def temp_env_file():
    """Create a temporary .env file for testing."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".env", delete=False) as f:
        env_content = """
SOLR_BASE_URL=http://localhost:8983/solr
SOLR_CORE=test_core
SOLR_USERNAME=test_user
SOLR_PASSWORD=test_pass
SOLR_TIMEOUT=30
SOLR_VERIFY_SSL=false
SOLR_CONFIGSETS_DIR=/srv/configsets
ENV=local
LOG_LEVEL=INFO
        """
        f.write(env_content.strip())
        temp_file = f.name

    yield Path(temp_file)

    os.unlink(temp_file)


@pytest.fixture
def test_config(configsets_dir):
    """Provide a test configuration."""
    solr_config = SOLRConfig(
        base_url="http://localhost:8983/solr",
        core="test_core",
        username="test_user",
        password="test_pass",
        timeout=30,
        verify_ssl=False,
    )
    deploy_config = DeployConfig(
        configsets_dir=configsets_dir,
        local_development=True,
    )
    mcp_config = MCPConfig(log_level="INFO")

    return Config(solr=solr_config, deploy=deploy_config, mcp=mcp_config)


@pytest.fixture(autouse=True)
def clean_env_vars():
    """Clean up environment variables before and after each test."""
    original_env = {}
    env_vars_to_clean = [
        "SOLR_BASE_URL",
        "SOLR_CORE",
        "SOLR_SCHEMA_UPLOAD_URL",
        "SOLR_USERNAME",
        "SOLR_PASSWORD",
        "SOLR_TIMEOUT",
        "SOLR_VERIFY_SSL",
        "SOLR_MAX_RETRIES",
        "SOLR_CONFIGSETS_DIR",
        "SOLR_DEFAULT_SERVER_ID",
        "PANTHEON_ENVIRONMENT",
        "ENV",
        "LOG_LEVEL",
    ]

    for var in env_vars_to_clean:
        if var in os.environ:
            original_env[var] = os.environ[var]
        os.environ.pop(var, None)

    yield

    for var in env_vars_to_clean:
        os.environ.pop(var, None)

    for var, value in original_env.items():
        os.environ[var] = value
