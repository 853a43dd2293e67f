import pytest
from aws_cdk import assertions

from ecs_platform.errors import InvalidFormatError, MissingFieldError
from ecs_platform.infrastructure.network import VpcConstruct, VpcConfig


def vpc_config(**overrides):
    values = dict(
        name="test",
        cidr_block="10.0.0.0/16",
        region="us-west-2",
        public_subnet_cidr_blocks=["10.0.0.0/24", "10.0.1.0/24"],
        private_subnet_cidr_blocks=["10.0.10.0/24", "10.0.11.0/24"],
    )
    values.update(overrides)
    return VpcConfig(**values)


@pytest.mark.parametrize("overrides, error", [
    ({"public_subnet_cidr_blocks": ["10.0.0.0/24"]}, InvalidFormatError),
    ({"private_subnet_cidr_blocks": ["10.0.10.0/24"]}, InvalidFormatError),
    ({"public_subnet_cidr_blocks": []}, InvalidFormatError),
    ({"public_subnet_cidr_blocks": None}, MissingFieldError),
    ({"private_subnet_cidr_blocks": None}, MissingFieldError),
    ({"name": ""}, MissingFieldError),
    ({"cidr_block": ""}, MissingFieldError),
    ({"region": ""}, MissingFieldError),
])
def test_validate_rejects_incomplete_config(overrides, error):
    with pytest.raises(error):
        vpc_config(**overrides).validate()


@pytest.mark.parametrize("count", [2, 3])
def test_validate_accepts_two_or_more_subnets(count):
    cidrs = [f"10.0.{index}.0/24" for index in range(count)]
    vpc_config(public_subnet_cidr_blocks=cidrs, private_subnet_cidr_blocks=cidrs).validate()


def test_vpc_construct(stack):
    network = VpcConstruct(stack, "Network", vpc_config())
    template = assertions.Template.from_stack(stack)

    # Test VPC creation
    template.resource_count_is("AWS::EC2::VPC", 1)
    template.has_resource_properties("AWS::EC2::VPC", {
        "CidrBlock": "10.0.0.0/16",
        "EnableDnsHostnames": True,
        "Tags": [{"Key": "Name", "Value": "test-vpc"}]
    })

    # Test two public and two private subnets across two AZs
    template.resource_count_is("AWS::EC2::Subnet", 4)
    template.has_resource_properties("AWS::EC2::Subnet", {
        "CidrBlock": "10.0.0.0/24",
        "AvailabilityZone": "us-west-2a",
        "Tags": [{"Key": "Name", "Value": "test-public-subnet-1"}]
    })
    template.has_resource_properties("AWS::EC2::Subnet", {
        "CidrBlock": "10.0.11.0/24",
        "AvailabilityZone": "us-west-2c",
        "Tags": [{"Key": "Name", "Value": "test-private-subnet-2"}]
    })

    # Test gateways and routing
    template.resource_count_is("AWS::EC2::InternetGateway", 1)
    template.resource_count_is("AWS::EC2::VPCGatewayAttachment", 1)
    template.resource_count_is("AWS::EC2::EIP", 1)
    template.resource_count_is("AWS::EC2::NatGateway", 1)
    template.resource_count_is("AWS::EC2::RouteTable", 2)
    template.resource_count_is("AWS::EC2::Route", 2)
    template.resource_count_is("AWS::EC2::SubnetRouteTableAssociation", 4)
    template.has_resource_properties("AWS::EC2::Route", {
        "DestinationCidrBlock": "0.0.0.0/0",
        "NatGatewayId": assertions.Match.any_value()
    })
    template.has_resource_properties("AWS::EC2::Route", {
        "DestinationCidrBlock": "0.0.0.0/0",
        "GatewayId": assertions.Match.any_value()
    })

    # Test the L2 view exposes the same subnets
    assert len(network.vpc.public_subnets) == 2
    assert len(network.vpc.private_subnets) == 2
    assert len(network.public_subnets) == 2
    assert len(network.private_subnets) == 2


def test_vpc_construct_uses_first_two_cidr_blocks(stack):
    VpcConstruct(stack, "Network", vpc_config(
        public_subnet_cidr_blocks=["10.0.0.0/24", "10.0.1.0/24", "10.0.2.0/24"]
    ))
    template = assertions.Template.from_stack(stack)

    template.resource_count_is("AWS::EC2::Subnet", 4)


def test_invalid_config_declares_nothing(stack):
    with pytest.raises(InvalidFormatError):
        VpcConstruct(stack, "Network", vpc_config(public_subnet_cidr_blocks=["10.0.0.0/24"]))

    template = assertions.Template.from_stack(stack)
    template.resource_count_is("AWS::EC2::VPC", 0)
