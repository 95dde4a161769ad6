from __future__ import annotations
from typing import Any, Dict, List, Optional
from pathlib import Path
import os

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Annotated
from pydantic import Field
from dotenv import load_dotenv

load_dotenv()


class ProviderConfig(BaseModel):
    """One summarization backend (credential + model defaults)."""
    api_key: Annotated[Optional[str], Field(default=None)]
    api_key_env: Annotated[str, Field(default="")]
    model: Annotated[str, Field(default="")]
    models: Annotated[List[str], Field(default_factory=list)]
    api_base: Annotated[Optional[str], Field(default=None)]
    timeout_seconds: Annotated[float, Field(default=60.0)]
    max_retries: Annotated[int, Field(default=2)]
    max_tokens: Annotated[int, Field(default=2048)]

    def resolve_api_key(self) -> Optional[str]:
        """Inline key wins over the environment variable."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.getenv(self.api_key_env) or None
        return None


def _claude_defaults() -> ProviderConfig:
    return ProviderConfig(
        api_key_env="ANTHROPIC_API_KEY",
        model="claude-3-5-sonnet-20241022",
        models=["claude-3-5-sonnet-20241022", "claude-3-5-haiku-20241022"],
    )


def _openai_defaults() -> ProviderConfig:
    return ProviderConfig(
        api_key_env="OPENAI_API_KEY",
        model="gpt-4o-mini",
        models=["gpt-4o-mini", "gpt-4o"],
    )


def _gemini_defaults() -> ProviderConfig:
    return ProviderConfig(
        api_key_env="GEMINI_API_KEY",
        model="gemini-1.5-flash",
        models=["gemini-1.5-flash", "gemini-1.5-pro"],
    )


class ProvidersConfig(BaseModel):
    claude: ProviderConfig = Field(default_factory=_claude_defaults)
    openai: ProviderConfig = Field(default_factory=_openai_defaults)
    gemini: ProviderConfig = Field(default_factory=_gemini_defaults)


class FetchConfig(BaseModel):
    timeout_seconds: Annotated[float, Field(default=30.0)]
    retries: Annotated[int, Field(default=1)]
    user_agent: Annotated[str, Field(default="journalfeed/0.1 (+RSS aggregator for academic journals)")]
    max_workers: Annotated[int, Field(default=4)]
    max_bytes: Annotated[int, Field(default=10 * 1024 * 1024)]


class SchedulerConfig(BaseModel):
    enabled: Annotated[bool, Field(default=True)]
    timezone: Annotated[str, Field(default="Asia/Tokyo")]
    interval_minutes: Annotated[int, Field(default=60)]
    run_on_start: Annotated[bool, Field(default=False)]
    drain_timeout_seconds: Annotated[float, Field(default=30.0)]


class LoggingConfig(BaseModel):
    level: Annotated[str, Field(default="INFO")]
    log_dir: Annotated[str, Field(default="logs")]
    log_file: Annotated[str, Field(default="journalfeed.log")]
    max_bytes: Annotated[int, Field(default=20 * 1024 * 1024)]
    backup_count: Annotated[int, Field(default=5)]


class SourceSeed(BaseModel):
    """Journal entry seeded into the registry by init_db."""
    id: str
    name: str
    rss_url: str
    category: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True


class Settings(BaseSettings):
    database_url: Annotated[str, Field(default="sqlite:///cache/journalfeed.db")]

    ai_provider: Annotated[str, Field(default="claude")]
    admin_token: Annotated[Optional[str], Field(default=None)]

    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    sources: Annotated[List[SourceSeed], Field(default_factory=list)]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        def yaml_settings() -> Dict[str, Any]:
            path = Path(os.getenv("JOURNALFEED_SETTINGS", "settings.yaml"))
            if not path.exists():
                return {}
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )


Config = Settings()
