#!/usr/bin/env python3
import logging
import os

from aws_cdk import App, Environment, Aspects
from cdk_nag import AwsSolutionsChecks

from ecs_platform import (
    NetworkStack,
    PlatformStack,
    DataStack,
    ServiceStack,
    EnvironmentConfig
)
from ecs_platform.nag_suppressions import add_nag_suppressions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)

# Initialize the CDK app
app = App()

# Get the target environment from context
environment_name = app.node.try_get_context("environment") or "dev"

# Create environment configuration
account = os.getenv('CDK_DEFAULT_ACCOUNT')
region = os.getenv('CDK_DEFAULT_REGION')
cdk_env = Environment(account=account, region=region)

build_context = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sample-app")
if environment_name == "prod":
    config = EnvironmentConfig.production(account, region, build_context=build_context)
else:
    config = EnvironmentConfig.development(account, region, build_context=build_context)

# Create the network layer
network_stack = NetworkStack(
    app,
    "NetworkStack",
    network_config=config.network,
    region=region,
    env=cdk_env
)

# Create the platform layer
platform_stack = PlatformStack(
    app,
    "PlatformStack",
    vpc=network_stack.vpc,
    ecs_config=config.ecs,
    domain_config=config.domain,
    env=cdk_env
)

data_stack = DataStack(
    app,
    "DataStack",
    vpc=network_stack.vpc,
    name=config.service.name,
    database_config=config.database,
    cache_config=config.cache,
    env=cdk_env
)

# Deploy the application service
environment = {}
if data_stack.postgres is not None:
    environment["DATABASE_HOST"] = data_stack.postgres.endpoint
if data_stack.redis is not None:
    environment["REDIS_HOST"] = data_stack.redis.endpoint

service_stack = ServiceStack(
    app,
    "ServiceStack",
    vpc=network_stack.vpc,
    ecs_cluster=platform_stack.ecs,
    load_balancer=platform_stack.load_balancer,
    service_defaults=config.service,
    region=region,
    environment=environment,
    env=cdk_env
)

# Add dependencies
platform_stack.add_dependency(network_stack)
data_stack.add_dependency(network_stack)
service_stack.add_dependency(platform_stack)
service_stack.add_dependency(data_stack)

# Apply cdk-nag suppressions, and run the checks when asked to
add_nag_suppressions([network_stack, platform_stack, data_stack, service_stack])
if app.node.try_get_context("nag"):
    Aspects.of(app).add(AwsSolutionsChecks(verbose=True))

# Synthesize the CloudFormation templates
app.synth()
