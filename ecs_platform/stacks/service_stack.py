from typing import Dict, List, Optional

from aws_cdk import (
    Stack,
    aws_ec2 as ec2,
)
from constructs import Construct

from ecs_platform.applications.containers import ContainerDefinition, ContainerPortMapping
from ecs_platform.applications.workloads import (
    FargateService,
    LoadBalancerTarget,
    ServiceConfig,
    ServiceSpec,
    TaskSpec,
)
from ecs_platform.config import ServiceDefaults
from ecs_platform.infrastructure.compute import EcsClusterConstruct
from ecs_platform.infrastructure.edge import LoadBalancerConstruct
from ecs_platform.infrastructure.storage import DockerBuildSpec
from ecs_platform.utilities import DockerLabelExtractor


class ServiceStack(Stack):
    """
    Runs the application image as a Fargate service behind the load balancer
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        ecs_cluster: EcsClusterConstruct,
        load_balancer: LoadBalancerConstruct,
        service_defaults: ServiceDefaults,
        region: str,
        environment: Optional[Dict[str, str]] = None,
        sidecar_containers: Optional[List[ContainerDefinition]] = None,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        port = service_defaults.container_port

        # Only the load balancer reaches the containers
        self.security_group = ec2.SecurityGroup(
            self,
            "ServiceSecurityGroup",
            vpc=vpc,
            description=f"Ingress for the {service_defaults.name} service",
            allow_all_outbound=True
        )
        self.security_group.add_ingress_rule(
            ec2.Peer.security_group_id(load_balancer.security_group.security_group_id),
            ec2.Port.tcp(port),
            "Load balancer"
        )

        build = DockerBuildSpec(context=service_defaults.build_context)

        self.service = FargateService(self, "Service", ServiceConfig(
            name=service_defaults.name,
            region=region,
            docker=build,
            task=TaskSpec(
                cpu=service_defaults.cpu,
                memory=service_defaults.memory,
                execution_role_arn=ecs_cluster.task_execution_role.role_arn
            ),
            service=ServiceSpec(
                cluster=ecs_cluster.cluster_arn,
                desired_count=service_defaults.desired_count,
                subnet_ids=[subnet.subnet_id for subnet in vpc.private_subnets],
                security_group_ids=[self.security_group.security_group_id],
                load_balancers=[LoadBalancerTarget(
                    target_group_arn=load_balancer.target_group.target_group_arn,
                    container_name=service_defaults.name,
                    container_port=port
                )],
                health_check_grace_period_seconds=60
            ),
            ports=[ContainerPortMapping(container_port=port, host_port=port, protocol="tcp")],
            environment={**service_defaults.environment, **(environment or {})},
            docker_labels=DockerLabelExtractor(build.dockerfile_path).extract(),
            sidecar_containers=sidecar_containers or [],
            log_retention_days=service_defaults.log_retention_days
        ))
