from . import constants
from .environment_config import (
    EnvironmentConfig,
    NetworkConfig,
    EcsConfig,
    DomainConfig,
    DatabaseConfig,
    CacheConfig,
    ServiceDefaults,
)
