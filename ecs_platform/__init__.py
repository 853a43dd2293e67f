from .infrastructure import VpcConstruct, EcsClusterConstruct, DockerImage, PostgresConstruct, RedisConstruct, HttpsConstruct, LoadBalancerConstruct
from .applications import ContainerDefinition, FargateService
from .stacks import NetworkStack, PlatformStack, DataStack, ServiceStack
from .utilities import DockerLabelExtractor
from .config import EnvironmentConfig, NetworkConfig, EcsConfig, DomainConfig
