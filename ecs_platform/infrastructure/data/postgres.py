import logging
from dataclasses import dataclass
from typing import Optional

from aws_cdk import (
    aws_ec2 as ec2,
    aws_rds as rds,
    RemovalPolicy,
    CfnOutput
)
from constructs import Construct

from ecs_platform.errors import MissingFieldError, declaring

logger = logging.getLogger(__name__)


@dataclass
class PostgresSettings:
    """Instance settings for a Postgres database"""
    username: str = "platform"
    database_name: Optional[str] = None
    engine_version: str = "16.4"
    instance_type: str = "t3.micro"
    allocated_storage: int = 20
    max_allocated_storage: int = 100
    storage_type: str = "gp2"
    multi_az: bool = False
    skip_final_snapshot: bool = False


@dataclass
class PostgresConfig:
    name: str
    settings: Optional[PostgresSettings] = None
    vpc: Optional[ec2.IVpc] = None

    def validate(self) -> None:
        if not self.name:
            raise MissingFieldError("Postgres.name")

        if self.settings is None:
            raise MissingFieldError("Postgres.settings")

        if self.vpc is None:
            raise MissingFieldError("Postgres.vpc")


class PostgresConstruct(Construct):
    """
    Creates an RDS Postgres instance in the private subnets of a VPC.
    The master credentials are generated into Secrets Manager.
    """
    def __init__(self, scope: Construct, construct_id: str, config: PostgresConfig, **kwargs) -> None:
        config.validate()
        super().__init__(scope, construct_id, **kwargs)

        name = config.name
        settings = config.settings

        with declaring(f"DB subnet group {name}"):
            self.subnet_group = rds.SubnetGroup(
                self,
                "SubnetGroup",
                description=f"Subnets for the {name} database",
                subnet_group_name=f"{name}-db-subnet",
                vpc=config.vpc,
                vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS),
                removal_policy=RemovalPolicy.DESTROY
            )
        logger.info(f"Declared DB subnet group {name}-db-subnet")

        major_version = settings.engine_version.split(".")[0]
        with declaring(f"Postgres instance {name}"):
            self.database = rds.DatabaseInstance(
                self,
                "Database",
                engine=rds.DatabaseInstanceEngine.postgres(
                    version=rds.PostgresEngineVersion.of(settings.engine_version, major_version)
                ),
                instance_type=ec2.InstanceType(settings.instance_type),
                vpc=config.vpc,
                subnet_group=self.subnet_group,
                database_name=settings.database_name or name.replace("-", "_"),
                credentials=rds.Credentials.from_generated_secret(settings.username),
                allocated_storage=settings.allocated_storage,
                max_allocated_storage=settings.max_allocated_storage,
                storage_type=getattr(rds.StorageType, settings.storage_type.upper()),
                multi_az=settings.multi_az,
                publicly_accessible=False,
                storage_encrypted=True,
                removal_policy=RemovalPolicy.DESTROY if settings.skip_final_snapshot else RemovalPolicy.SNAPSHOT
            )
            self.database.node.add_dependency(self.subnet_group)
        logger.info(f"Declared Postgres {settings.engine_version} instance {name}")

        self.secret = self.database.secret
        self.endpoint = self.database.db_instance_endpoint_address

        CfnOutput(
            self,
            "Endpoint",
            value=self.endpoint,
            description=f"Endpoint address of the {name} database"
        )
