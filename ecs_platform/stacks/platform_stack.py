from aws_cdk import (
    Stack,
    aws_ec2 as ec2,
)
from constructs import Construct

from ecs_platform.config import EcsConfig, DomainConfig
from ecs_platform.infrastructure.compute import EcsClusterConstruct, EcsClusterConfig
from ecs_platform.infrastructure.edge import (
    HttpsConstruct,
    HttpsConfig,
    LoadBalancerConstruct,
    LoadBalancerConfig,
)


class PlatformStack(Stack):
    """
    Creates the ECS cluster, the certificate and the load balancer in front of it
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        ecs_config: EcsConfig,
        domain_config: DomainConfig,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.ecs = EcsClusterConstruct(self, "Cluster", EcsClusterConfig(name=ecs_config.cluster_name))

        self.https = HttpsConstruct(self, "Https", HttpsConfig(
            name=ecs_config.cluster_name,
            zone=domain_config.zone,
            domain_name=domain_config.domain_name,
            private_zone=domain_config.private_zone,
            subject_alternative_names=domain_config.subject_alternative_names,
            hosted_zone_id=domain_config.hosted_zone_id
        ))

        self.load_balancer = LoadBalancerConstruct(self, "LoadBalancer", LoadBalancerConfig(
            name=ecs_config.cluster_name,
            vpc=vpc,
            https=[self.https]
        ))
