"""Configuration for the scholar search aggregator."""

from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from scholar_search.core.identifiers import DEFAULT_PREFIXES


class SearchSettings(BaseSettings):  # type: ignore[misc]
    """Endpoints, labels and limits for both sources.

    Every field can be overridden with a ``SCHOLAR_SEARCH_``-prefixed
    environment variable or a ``.env`` file.
    """

    harvester_base_url: str = Field(
        "http://148.215.1.70/redalyc/oai", description="OAI-PMH endpoint of the repository"
    )
    harvester_label: str = Field("Redalyc", description="Provenance label for harvested records")
    harvester_metadata_prefix: str = Field("oai_dc", description="OAI-PMH metadataPrefix")
    harvester_set: Optional[str] = Field(None, description="Optional OAI-PMH setSpec")
    harvester_max_batches: int = Field(
        1, ge=1, description="Maximum ListRecords batches followed via resumptionToken"
    )
    proxy_prefix: Optional[str] = Field(
        None, description="Relay prefix placed in front of harvester URLs (None = direct)"
    )
    proxy_encode: bool = Field(True, description="Percent-encode the target URL for the relay")

    registry_base_url: str = Field("https://api.crossref.org", description="Crossref API root")
    registry_label: str = Field(
        "SciELO (via Crossref)", description="Provenance label for registry records"
    )
    registry_prefixes: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_PREFIXES),
        description="DOI registrant prefixes identifying the catalog",
    )
    registry_mailto: Optional[str] = Field(
        None, description="Contact address sent to Crossref for the polite pool"
    )

    page_size: int = Field(50, ge=1, description="Default harvester page size")
    registry_rows: int = Field(50, ge=1, description="Default registry result cap")
    timeout: float = Field(30.0, gt=0, description="Timeout (seconds) for outbound HTTP requests")
    user_agent: str = Field("scholar-search", description="User-Agent header for outbound requests")
    max_attempts: int = Field(
        1, ge=1, description="Attempts per request; 1 disables automatic retries"
    )
    max_workers: Optional[int] = Field(
        None, ge=1, description="Thread cap for the fan-out (None = one per source)"
    )

    model_config = SettingsConfigDict(
        env_prefix="SCHOLAR_SEARCH_", env_file=".env", extra="ignore"
    )

    @field_validator("harvester_base_url", "registry_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("proxy_prefix", "harvester_set", "registry_mailto")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("registry_prefixes", mode="before")
    @classmethod
    def split_prefixes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value
