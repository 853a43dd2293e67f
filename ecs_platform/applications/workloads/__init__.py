from .fargate_service import (
    FargateService,
    ServiceConfig,
    ServiceSpec,
    TaskSpec,
    LoadBalancerTarget,
)
