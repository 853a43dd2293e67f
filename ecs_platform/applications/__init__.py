from .containers import ContainerDefinition
from .workloads import FargateService, ServiceConfig, ServiceSpec, TaskSpec, LoadBalancerTarget
