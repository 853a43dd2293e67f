"""
Fargate service assembly.

A FargateService wires one logical service end to end: an image build, a log
group, the primary container plus any sidecars, the task definition and the
running ECS service. Validation happens before anything is declared; once
declaring starts, a failure aborts the remaining steps and leaves what was
already declared in place.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from aws_cdk import (
    aws_ecs as ecs,
    aws_logs as logs,
    CfnTag,
    RemovalPolicy,
    CfnOutput
)
from constructs import Construct

from ecs_platform.applications.containers import (
    ContainerDefinition,
    ContainerLinuxParameters,
    ContainerLogConfig,
    ContainerMountPoint,
    ContainerPortMapping,
    awslogs_configuration,
    container_definitions_json,
    environment_from_mapping,
)
from ecs_platform.config import constants
from ecs_platform.errors import InvalidFormatError, MissingFieldError, declaring, prefixed
from ecs_platform.infrastructure.storage import DockerBuildSpec, DockerImage, DockerImageConfig

logger = logging.getLogger(__name__)

RETENTION_DAYS = {
    1: logs.RetentionDays.ONE_DAY,
    3: logs.RetentionDays.THREE_DAYS,
    5: logs.RetentionDays.FIVE_DAYS,
    7: logs.RetentionDays.ONE_WEEK,
    14: logs.RetentionDays.TWO_WEEKS,
    30: logs.RetentionDays.ONE_MONTH,
    60: logs.RetentionDays.TWO_MONTHS,
    90: logs.RetentionDays.THREE_MONTHS,
    120: logs.RetentionDays.FOUR_MONTHS,
    150: logs.RetentionDays.FIVE_MONTHS,
    180: logs.RetentionDays.SIX_MONTHS,
    365: logs.RetentionDays.ONE_YEAR,
    400: logs.RetentionDays.THIRTEEN_MONTHS,
    545: logs.RetentionDays.EIGHTEEN_MONTHS,
    731: logs.RetentionDays.TWO_YEARS,
    1827: logs.RetentionDays.FIVE_YEARS,
    3653: logs.RetentionDays.TEN_YEARS,
}


@dataclass
class TaskSpec:
    """Task-level resources and roles"""
    cpu: str
    memory: str
    execution_role_arn: Optional[str] = None
    task_role_arn: Optional[str] = None
    network_mode: str = constants.DEFAULT_NETWORK_MODE
    requires_compatibilities: List[str] = field(default_factory=lambda: list(constants.DEFAULT_COMPATIBILITIES))
    volumes: List[ecs.CfnTaskDefinition.VolumeProperty] = field(default_factory=list)


@dataclass
class LoadBalancerTarget:
    target_group_arn: str
    container_name: str
    container_port: int


@dataclass
class ServiceSpec:
    """How the service runs in the cluster"""
    cluster: str
    subnet_ids: List[str] = field(default_factory=list)
    security_group_ids: List[str] = field(default_factory=list)
    desired_count: int = 1
    launch_type: str = "FARGATE"
    assign_public_ip: bool = False
    load_balancers: List[LoadBalancerTarget] = field(default_factory=list)
    health_check_grace_period_seconds: Optional[int] = None
    enable_execute_command: bool = False
    service_name: Optional[str] = None
    task_definition: Optional[str] = None


@dataclass
class ServiceConfig:
    name: str
    region: str
    docker: Optional[DockerBuildSpec] = None
    task: Optional[TaskSpec] = None
    service: Optional[ServiceSpec] = None
    ports: Optional[List[ContainerPortMapping]] = field(default_factory=list)
    linux_parameters: Optional[ContainerLinuxParameters] = None
    mount_points: Optional[List[ContainerMountPoint]] = None
    sidecar_containers: List[ContainerDefinition] = field(default_factory=list)
    environment: Optional[Dict[str, str]] = field(default_factory=dict)
    docker_labels: Optional[Dict[str, str]] = None
    # CloudWatch only accepts 1, 3, 5, 7, 14, 30, 60, 90, 120, 150, 180, 365,
    # 400, 545, 731, 1827 and 3653 days
    log_retention_days: int = constants.DEFAULT_LOG_RETENTION_DAYS

    def validate(self) -> None:
        if not self.name:
            raise MissingFieldError("Service.name")

        if not self.region:
            raise MissingFieldError("Service.region")

        if self.docker is None:
            raise MissingFieldError("Service.docker")

        if self.task is None:
            raise MissingFieldError("Service.task")

        if self.service is None:
            raise MissingFieldError("Service.service")

        if self.log_retention_days not in RETENTION_DAYS:
            raise InvalidFormatError(
                "Service.log_retention_days",
                f"{self.log_retention_days} is not one of {sorted(RETENTION_DAYS)}"
            )

        if self.ports is None:
            self.ports = []

        if self.environment is None:
            self.environment = {}

        for index, sidecar in enumerate(self.sidecar_containers):
            try:
                sidecar.validate()
            except MissingFieldError as e:
                raise prefixed(e, f"Service.sidecar_containers[{index}]") from e


class FargateService(Construct):
    """
    Builds the service image and runs it as a Fargate service with its sidecars
    """
    def __init__(self, scope: Construct, construct_id: str, config: ServiceConfig, **kwargs) -> None:
        try:
            config.validate()
        except (MissingFieldError, InvalidFormatError) as e:
            logger.error(f"Invalid service configuration: {e}")
            raise
        super().__init__(scope, construct_id, **kwargs)

        self.config = config
        name = config.name

        self.image = DockerImage(self, "Image", DockerImageConfig(name=name, build=config.docker))

        log_configuration = self.service_log_configuration(name, config.region, config.log_retention_days)

        primary = ContainerDefinition(
            name=name,
            image=self.image.image_uri,
            port_mappings=list(config.ports),
            environment=environment_from_mapping(config.environment),
            log_configuration=log_configuration,
            docker_labels=config.docker_labels,
            linux_parameters=config.linux_parameters,
            mount_points=config.mount_points
        )
        primary.validate()

        self.containers = [primary, *config.sidecar_containers]
        self.container_definitions_json = container_definitions_json(self.containers)

        self.task_definition = self._task_definition(name, config.task)
        self.service = self._service(name, config.service)

    def service_log_configuration(self, name: str, region: str, retention_days: int) -> ContainerLogConfig:
        """Create the service's log group and the awslogs configuration pointing at it"""
        log_group_name = f"{constants.LOG_GROUP_PREFIX}/{name}"
        with declaring(f"log group {log_group_name}"):
            self.log_group = logs.LogGroup(
                self,
                "LogGroup",
                log_group_name=log_group_name,
                retention=RETENTION_DAYS[retention_days],
                removal_policy=RemovalPolicy.DESTROY
            )
        logger.info(f"Declared log group {log_group_name} with {retention_days} day retention")

        return awslogs_configuration(log_group_name, region)

    def _task_definition(self, name: str, task: TaskSpec) -> ecs.CfnTaskDefinition:
        task_name = f"{name}-task"
        with declaring(f"task definition {task_name}"):
            task_definition = ecs.CfnTaskDefinition(
                self,
                "TaskDefinition",
                family=task_name,
                tags=[CfnTag(key="Name", value=task_name)],
                cpu=task.cpu,
                memory=task.memory,
                network_mode=task.network_mode,
                requires_compatibilities=task.requires_compatibilities,
                execution_role_arn=task.execution_role_arn,
                task_role_arn=task.task_role_arn,
                volumes=task.volumes or None
            )
            task_definition.add_property_override(
                "ContainerDefinitions",
                [container.to_cfn() for container in self.containers]
            )
        logger.info(f"Declared task definition {task_name} with {len(self.containers)} containers")
        return task_definition

    def _service(self, name: str, spec: ServiceSpec) -> ecs.CfnService:
        spec.task_definition = self.task_definition.ref

        load_balancers: Optional[List[Any]] = [
            ecs.CfnService.LoadBalancerProperty(
                target_group_arn=target.target_group_arn,
                container_name=target.container_name,
                container_port=target.container_port
            )
            for target in spec.load_balancers
        ] or None

        network_configuration = None
        if spec.subnet_ids:
            network_configuration = ecs.CfnService.NetworkConfigurationProperty(
                awsvpc_configuration=ecs.CfnService.AwsVpcConfigurationProperty(
                    subnets=spec.subnet_ids,
                    security_groups=spec.security_group_ids or None,
                    assign_public_ip="ENABLED" if spec.assign_public_ip else "DISABLED"
                )
            )

        service_name = spec.service_name or f"{name}-svc"
        with declaring(f"service {service_name}"):
            service = ecs.CfnService(
                self,
                "Service",
                service_name=service_name,
                cluster=spec.cluster,
                task_definition=spec.task_definition,
                desired_count=spec.desired_count,
                launch_type=spec.launch_type,
                network_configuration=network_configuration,
                load_balancers=load_balancers,
                health_check_grace_period_seconds=spec.health_check_grace_period_seconds,
                enable_execute_command=spec.enable_execute_command
            )
        logger.info(f"Declared service {service_name} in cluster {spec.cluster}")

        CfnOutput(
            self,
            "TaskDefinitionArn",
            value=self.task_definition.ref,
            description=f"Task definition for {name}"
        )
        return service
