"""
Environment-specific configuration for the ECS Fargate Platform
"""
from dataclasses import dataclass, field
from typing import List, Dict, Optional

from ecs_platform.config import constants


@dataclass
class NetworkConfig:
    """Network configuration for the environment"""
    vpc_cidr: str = "10.0.0.0/16"
    public_subnet_cidrs: List[str] = field(default_factory=lambda: ["10.0.0.0/24", "10.0.1.0/24"])
    private_subnet_cidrs: List[str] = field(default_factory=lambda: ["10.0.10.0/24", "10.0.11.0/24"])


@dataclass
class EcsConfig:
    """ECS cluster configuration"""
    cluster_name: str


@dataclass
class DomainConfig:
    """DNS zone and certificate configuration"""
    zone: str
    domain_name: str
    subject_alternative_names: List[str] = field(default_factory=list)
    private_zone: bool = False
    hosted_zone_id: Optional[str] = None


@dataclass
class DatabaseConfig:
    """Postgres configuration"""
    enabled: bool = True
    username: str = "platform"
    engine_version: str = "16.4"
    instance_type: str = "t3.micro"
    allocated_storage: int = 20
    max_allocated_storage: int = 100


@dataclass
class CacheConfig:
    """Redis configuration"""
    enabled: bool = True
    node_type: str = "cache.t3.micro"
    engine_version: str = "7.1"
    num_cache_nodes: int = 1


@dataclass
class ServiceDefaults:
    """Defaults for the Fargate application service"""
    name: str
    build_context: str
    cpu: str = "256"
    memory: str = "512"
    container_port: int = 80
    desired_count: int = 1
    log_retention_days: int = constants.DEFAULT_LOG_RETENTION_DAYS
    environment: Dict[str, str] = field(default_factory=dict)


@dataclass
class EnvironmentConfig:
    """Complete environment configuration"""
    environment_name: str
    account: str
    region: str
    network: NetworkConfig
    ecs: EcsConfig
    domain: DomainConfig
    database: DatabaseConfig
    cache: CacheConfig
    service: ServiceDefaults

    @classmethod
    def development(cls, account: str, region: str, build_context: str = "sample-app") -> 'EnvironmentConfig':
        """Development environment configuration"""
        return cls(
            environment_name="dev",
            account=account,
            region=region,
            network=NetworkConfig(),
            ecs=EcsConfig(cluster_name="dev-fargate"),
            domain=DomainConfig(
                zone="example.com.",
                domain_name="dev.example.com",
                subject_alternative_names=["api.dev.example.com"]
            ),
            database=DatabaseConfig(),
            cache=CacheConfig(),
            service=ServiceDefaults(
                name="dev-app",
                build_context=build_context,
                log_retention_days=7,
                environment={"APP_ENV": "dev"}
            )
        )

    @classmethod
    def production(cls, account: str, region: str, build_context: str = "sample-app") -> 'EnvironmentConfig':
        """Production environment configuration"""
        return cls(
            environment_name="prod",
            account=account,
            region=region,
            network=NetworkConfig(
                vpc_cidr="10.1.0.0/16",
                public_subnet_cidrs=["10.1.0.0/24", "10.1.1.0/24"],
                private_subnet_cidrs=["10.1.10.0/24", "10.1.11.0/24"]
            ),
            ecs=EcsConfig(cluster_name="prod-fargate"),
            domain=DomainConfig(
                zone="example.com.",
                domain_name="example.com",
                subject_alternative_names=["www.example.com", "api.example.com"]
            ),
            database=DatabaseConfig(
                instance_type="t3.medium",
                allocated_storage=50,
                max_allocated_storage=500
            ),
            cache=CacheConfig(node_type="cache.t3.small"),
            service=ServiceDefaults(
                name="prod-app",
                build_context=build_context,
                cpu="512",
                memory="1024",
                desired_count=2,
                log_retention_days=90,
                environment={"APP_ENV": "prod"}
            )
        )
