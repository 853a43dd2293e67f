from .network import VpcConstruct, VpcConfig
from .compute import EcsClusterConstruct, EcsClusterConfig
from .storage import DockerImage, DockerImageConfig, DockerBuildSpec
from .data import PostgresConstruct, PostgresConfig, RedisConstruct, RedisConfig
from .edge import HttpsConstruct, HttpsConfig, LoadBalancerConstruct, LoadBalancerConfig
