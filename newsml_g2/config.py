"""Application configuration via environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", case_sensitive=False)

    app_port: int = Field(8000, alias="APP_PORT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    newsml_namespace: str = Field(
        "http://iptc.org/std/nar/2006-10-01/", alias="NEWSML_NAMESPACE"
    )
    apa_provider_qcode: str = Field("nprov:apa", alias="APA_PROVIDER_QCODE")
    innodata_provider: str = Field("innodata.com", alias="INNODATA_PROVIDER")
    innodata_standard: str = Field("NewsML-G2", alias="INNODATA_STANDARD")
    import_source: str = Field("", alias="NEWSML_SOURCE")
    import_use_rss: bool = Field(False, alias="NEWSML_USE_RSS")
    import_output_dir: Path = Field(
        default_factory=lambda: Path("data/newsml"), alias="NEWSML_OUTPUT_DIR"
    )
    fetch_rate_limit_seconds: float = Field(0.5, alias="FETCH_RATE_LIMIT_SECONDS")
    fetch_user_agent: str = Field("newsml-g2-import/0.1", alias="FETCH_USER_AGENT")
    mediatopic_url: str = Field(
        "https://cv.iptc.org/newscodes/mediatopic/", alias="MEDIATOPIC_URL"
    )
    mediatopic_languages: str = Field("en,de,fr,es,ar", alias="MEDIATOPIC_LANGUAGES")
    mediatopic_language: str = Field("en", alias="MEDIATOPIC_LANGUAGE")

    @property
    def output_dir_exists(self) -> bool:
        """Return True if the import output directory exists."""
        return self.import_output_dir.exists()

    @property
    def supported_languages(self) -> list[str]:
        return [lang.strip() for lang in self.mediatopic_languages.split(",") if lang.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
