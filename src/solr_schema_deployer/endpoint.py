"""
Solr endpoint addressing.

Every URI the deployer talks to is derived here from the configured base URL and
core name, so the uploaders never concatenate paths themselves.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .config import SOLRConfig

CONFIGSET_NAME = "_default"


class Endpoint(BaseModel):
    """Read-only description of the core a configset is deployed to."""

    base_url: str
    core: str
    schema_upload_url: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_config(cls, config: SOLRConfig) -> "Endpoint":
        return cls(
            base_url=config.base_url,
            core=config.core,
            schema_upload_url=config.schema_upload_url,
        )

    @property
    def base_uri(self) -> str:
        """Solr base URL with a trailing slash."""
        return self.base_url.rstrip("/") + "/"

    @property
    def core_base_uri(self) -> str:
        """URL of the core, with a trailing slash."""
        return f"{self.base_uri}{self.core}/"

    @property
    def schema_upload_uri(self) -> str:
        if self.schema_upload_url:
            return self.schema_upload_url
        return f"{self.core_base_uri}schema/upload"

    @property
    def configset_upload_uri(self) -> str:
        return f"{self.base_uri}api/core/configs/{CONFIGSET_NAME}"

    @property
    def file_view_uri(self) -> str:
        return f"{self.core_base_uri}admin/file"
