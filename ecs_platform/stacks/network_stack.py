from aws_cdk import Stack
from constructs import Construct

from ecs_platform.config import NetworkConfig
from ecs_platform.infrastructure.network import VpcConstruct, VpcConfig


class NetworkStack(Stack):
    """
    Creates the VPC the platform runs in
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        network_config: NetworkConfig,
        region: str,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.network = VpcConstruct(self, "Network", VpcConfig(
            name=construct_id.lower(),
            cidr_block=network_config.vpc_cidr,
            region=region,
            public_subnet_cidr_blocks=network_config.public_subnet_cidrs,
            private_subnet_cidr_blocks=network_config.private_subnet_cidrs
        ))

        # Export the VPC for other stacks to use
        self.vpc = self.network.vpc
        self.vpc_id = self.network.vpc_id
