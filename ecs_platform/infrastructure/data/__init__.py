from .postgres import PostgresConstruct, PostgresConfig, PostgresSettings
from .redis import RedisConstruct, RedisConfig, RedisSettings
