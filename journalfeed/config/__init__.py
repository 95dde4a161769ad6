from .config import (
    Config,
    Settings,
    ProviderConfig,
    ProvidersConfig,
    FetchConfig,
    SchedulerConfig,
    LoggingConfig,
    SourceSeed,
)

__all__ = [
    "Config",
    "Settings",
    "ProviderConfig",
    "ProvidersConfig",
    "FetchConfig",
    "SchedulerConfig",
    "LoggingConfig",
    "SourceSeed",
]
