from .ecs_cluster import EcsClusterConstruct, EcsClusterConfig
