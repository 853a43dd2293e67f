from aws_cdk import (
    Stack,
    aws_ec2 as ec2,
)
from constructs import Construct

from ecs_platform.config import DatabaseConfig, CacheConfig
from ecs_platform.infrastructure.data import (
    PostgresConstruct,
    PostgresConfig,
    PostgresSettings,
    RedisConstruct,
    RedisConfig,
    RedisSettings,
)


class DataStack(Stack):
    """
    Creates the Postgres database and the Redis cache used by the service
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        name: str,
        database_config: DatabaseConfig,
        cache_config: CacheConfig,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.postgres = None
        self.redis = None

        if database_config.enabled:
            self.postgres = PostgresConstruct(self, "Postgres", PostgresConfig(
                name=f"{name}-db",
                vpc=vpc,
                settings=PostgresSettings(
                    username=database_config.username,
                    engine_version=database_config.engine_version,
                    instance_type=database_config.instance_type,
                    allocated_storage=database_config.allocated_storage,
                    max_allocated_storage=database_config.max_allocated_storage
                )
            ))

        if cache_config.enabled:
            self.redis = RedisConstruct(self, "Redis", RedisConfig(
                name=f"{name}-cache",
                subnet=vpc.private_subnets[0],
                settings=RedisSettings(
                    node_type=cache_config.node_type,
                    engine_version=cache_config.engine_version,
                    num_cache_nodes=cache_config.num_cache_nodes
                )
            ))
