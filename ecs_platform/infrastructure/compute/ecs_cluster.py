import logging
from dataclasses import dataclass

from aws_cdk import (
    aws_ecs as ecs,
    aws_iam as iam,
    CfnOutput
)
from constructs import Construct

from ecs_platform.config import constants
from ecs_platform.errors import MissingFieldError, declaring

logger = logging.getLogger(__name__)


@dataclass
class EcsClusterConfig:
    name: str

    def validate(self) -> None:
        if not self.name:
            raise MissingFieldError("ECS.name")


class EcsClusterConstruct(Construct):
    """
    Creates an ECS cluster and the execution role its Fargate tasks run with
    """
    def __init__(self, scope: Construct, construct_id: str, config: EcsClusterConfig, **kwargs) -> None:
        config.validate()
        super().__init__(scope, construct_id, **kwargs)

        with declaring(f"ECS cluster {config.name}"):
            self.cluster = ecs.CfnCluster(
                self,
                "Cluster",
                cluster_name=config.name
            )
        self.cluster_arn = self.cluster.attr_arn
        logger.info(f"Declared ECS cluster {config.name}")

        CfnOutput(self, "ClusterId", value=self.cluster.ref, description="CLUSTER-ID")

        with declaring(f"task execution role {config.name}"):
            self.task_execution_role = iam.Role(
                self,
                "TaskExecutionRole",
                assumed_by=iam.ServicePrincipal(constants.TASK_PRINCIPAL),
                managed_policies=[
                    iam.ManagedPolicy.from_aws_managed_policy_name(constants.TASK_EXECUTION_POLICY)
                ]
            )
        logger.info(f"Declared task execution role for {config.name}")
