import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from aws_cdk import (
    aws_ec2 as ec2,
    CfnOutput,
    CfnTag
)
from constructs import Construct

from ecs_platform.config import constants
from ecs_platform.errors import InvalidFormatError, MissingFieldError, declaring

logger = logging.getLogger(__name__)


def _name_tag(name: str) -> List[CfnTag]:
    return [CfnTag(key="Name", value=name)]


@dataclass
class VpcConfig:
    name: str
    cidr_block: str
    region: str
    public_subnet_cidr_blocks: Optional[List[str]] = None
    private_subnet_cidr_blocks: Optional[List[str]] = None
    availability_zone_suffixes: Sequence[str] = field(default_factory=lambda: constants.DEFAULT_AZ_SUFFIXES)

    def validate(self) -> None:
        if not self.name:
            raise MissingFieldError("VPC.name")

        if not self.cidr_block:
            raise MissingFieldError("VPC.cidr_block")

        if self.public_subnet_cidr_blocks is None:
            raise MissingFieldError("VPC.public_subnet_cidr_blocks")

        if len(self.public_subnet_cidr_blocks) < 2:
            raise InvalidFormatError("VPC.public_subnet_cidr_blocks", "must have at least 2 CIDR blocks")

        if self.private_subnet_cidr_blocks is None:
            raise MissingFieldError("VPC.private_subnet_cidr_blocks")

        if len(self.private_subnet_cidr_blocks) < 2:
            raise InvalidFormatError("VPC.private_subnet_cidr_blocks", "must have at least 2 CIDR blocks")

        if not self.region:
            raise MissingFieldError("VPC.region")

        if len(self.availability_zone_suffixes) < 2:
            raise InvalidFormatError("VPC.availability_zone_suffixes", "must name at least 2 availability zones")

    @property
    def availability_zones(self) -> List[str]:
        return [f"{self.region}{suffix}" for suffix in self.availability_zone_suffixes[:2]]


class VpcConstruct(Construct):
    """
    Creates a two-AZ VPC with public and private subnets, an internet
    gateway and a single NAT gateway
    """
    def __init__(self, scope: Construct, construct_id: str, config: VpcConfig, **kwargs) -> None:
        config.validate()
        super().__init__(scope, construct_id, **kwargs)

        name = config.name
        azs = config.availability_zones

        with declaring(f"VPC {name}"):
            self.cfn_vpc = ec2.CfnVPC(
                self,
                "Vpc",
                cidr_block=config.cidr_block,
                enable_dns_hostnames=True,
                enable_dns_support=True,
                tags=_name_tag(f"{name}-vpc")
            )
        self.vpc_id = self.cfn_vpc.ref
        logger.info(f"Declared VPC {name}-vpc ({config.cidr_block})")

        CfnOutput(self, "VpcId", value=self.vpc_id, description="VPC-ID")

        # Only the first two blocks of each list are used, one per AZ
        self.public_subnets = [
            self._subnet(f"{name}-public-subnet-{index + 1}", cidr, az)
            for index, (cidr, az) in enumerate(zip(config.public_subnet_cidr_blocks, azs))
        ]
        self.private_subnets = [
            self._subnet(f"{name}-private-subnet-{index + 1}", cidr, az)
            for index, (cidr, az) in enumerate(zip(config.private_subnet_cidr_blocks, azs))
        ]

        with declaring(f"internet gateway {name}"):
            self.internet_gateway = ec2.CfnInternetGateway(
                self,
                "InternetGateway",
                tags=_name_tag(f"{name}-internet-gateway")
            )
            gateway_attachment = ec2.CfnVPCGatewayAttachment(
                self,
                "InternetGatewayAttachment",
                vpc_id=self.vpc_id,
                internet_gateway_id=self.internet_gateway.ref
            )
        CfnOutput(self, "IgwId", value=self.internet_gateway.ref, description="IGW-ID")

        with declaring(f"NAT gateway {name}"):
            elastic_ip = ec2.CfnEIP(
                self,
                "NatGatewayIp",
                domain="vpc",
                tags=_name_tag(f"{name}-nat-gateway-ip")
            )
            self.nat_gateway = ec2.CfnNatGateway(
                self,
                "NatGateway",
                allocation_id=elastic_ip.attr_allocation_id,
                subnet_id=self.public_subnets[0].ref,
                tags=_name_tag(f"{name}-nat-gateway")
            )
            self.nat_gateway.add_dependency(gateway_attachment)
        CfnOutput(self, "NatGatewayId", value=self.nat_gateway.ref, description="NAT-GATEWAY-ID")
        logger.info(f"Declared internet and NAT gateways for {name}")

        with declaring(f"route tables {name}"):
            self.public_route_table = ec2.CfnRouteTable(
                self,
                "PublicRouteTable",
                vpc_id=self.vpc_id,
                tags=_name_tag(f"{name}-public-route-table")
            )
            public_route = ec2.CfnRoute(
                self,
                "PublicDefaultRoute",
                route_table_id=self.public_route_table.ref,
                destination_cidr_block=constants.ANYWHERE_CIDR,
                gateway_id=self.internet_gateway.ref
            )
            public_route.add_dependency(gateway_attachment)

            self.private_route_table = ec2.CfnRouteTable(
                self,
                "PrivateRouteTable",
                vpc_id=self.vpc_id,
                tags=_name_tag(f"{name}-private-route-table")
            )
            ec2.CfnRoute(
                self,
                "PrivateDefaultRoute",
                route_table_id=self.private_route_table.ref,
                destination_cidr_block=constants.ANYWHERE_CIDR,
                nat_gateway_id=self.nat_gateway.ref
            )

            for index, subnet in enumerate(self.public_subnets):
                ec2.CfnSubnetRouteTableAssociation(
                    self,
                    f"PublicSubnet{index + 1}RouteTableAssociation",
                    subnet_id=subnet.ref,
                    route_table_id=self.public_route_table.ref
                )
            for index, subnet in enumerate(self.private_subnets):
                ec2.CfnSubnetRouteTableAssociation(
                    self,
                    f"PrivateSubnet{index + 1}RouteTableAssociation",
                    subnet_id=subnet.ref,
                    route_table_id=self.private_route_table.ref
                )
        logger.info(f"Declared route tables for {name}")

        # L2 view of the same network for constructs that take an IVpc
        self.vpc = ec2.Vpc.from_vpc_attributes(
            self,
            "VpcView",
            vpc_id=self.vpc_id,
            vpc_cidr_block=config.cidr_block,
            availability_zones=azs,
            public_subnet_ids=[subnet.ref for subnet in self.public_subnets],
            public_subnet_route_table_ids=[self.public_route_table.ref] * len(self.public_subnets),
            private_subnet_ids=[subnet.ref for subnet in self.private_subnets],
            private_subnet_route_table_ids=[self.private_route_table.ref] * len(self.private_subnets)
        )

    def _subnet(self, subnet_name: str, cidr_block: str, availability_zone: str) -> ec2.CfnSubnet:
        logical_id = "".join(part.title() for part in subnet_name.split("-")[-3:])
        with declaring(f"subnet {subnet_name}"):
            subnet = ec2.CfnSubnet(
                self,
                logical_id,
                vpc_id=self.vpc_id,
                cidr_block=cidr_block,
                availability_zone=availability_zone,
                tags=_name_tag(subnet_name)
            )
        logger.info(f"Declared subnet {subnet_name} ({cidr_block}) in {availability_zone}")
        return subnet
