import logging
from dataclasses import dataclass, field
from typing import List, Optional

from aws_cdk import (
    aws_ec2 as ec2,
    aws_elasticache as elasticache
)
from constructs import Construct

from ecs_platform.errors import MissingFieldError, declaring

logger = logging.getLogger(__name__)


@dataclass
class RedisSettings:
    """Cache cluster settings"""
    node_type: str = "cache.t3.micro"
    engine_version: str = "7.1"
    num_cache_nodes: int = 1
    port: int = 6379
    parameter_group_name: Optional[str] = None
    security_group_ids: List[str] = field(default_factory=list)


@dataclass
class RedisConfig:
    """Everything needed to spin up a Redis cache in a single subnet"""
    name: str
    settings: Optional[RedisSettings] = None
    subnet: Optional[ec2.ISubnet] = None

    def validate(self) -> None:
        if not self.name:
            raise MissingFieldError("Redis.name")

        if self.settings is None:
            raise MissingFieldError("Redis.settings")

        if self.subnet is None:
            raise MissingFieldError("Redis.subnet")


class RedisConstruct(Construct):
    def __init__(self, scope: Construct, construct_id: str, config: RedisConfig, **kwargs) -> None:
        config.validate()
        super().__init__(scope, construct_id, **kwargs)

        name = config.name
        settings = config.settings

        with declaring(f"cache subnet group {name}"):
            self.subnet_group = elasticache.CfnSubnetGroup(
                self,
                "SubnetGroup",
                cache_subnet_group_name=f"{name}-subnet",
                description=f"Subnet for the {name} cache",
                subnet_ids=[config.subnet.subnet_id]
            )
        logger.info(f"Declared cache subnet group {name}-subnet")

        with declaring(f"Redis cluster {name}"):
            self.cache = elasticache.CfnCacheCluster(
                self,
                "Cache",
                cluster_name=name,
                engine="redis",
                engine_version=settings.engine_version,
                cache_node_type=settings.node_type,
                num_cache_nodes=settings.num_cache_nodes,
                port=settings.port,
                cache_parameter_group_name=settings.parameter_group_name,
                cache_subnet_group_name=self.subnet_group.ref,
                vpc_security_group_ids=settings.security_group_ids or None
            )
            self.cache.add_dependency(self.subnet_group)
        logger.info(f"Declared Redis {settings.engine_version} cluster {name}")

        self.endpoint = self.cache.attr_redis_endpoint_address
