import logging
from dataclasses import dataclass, field
from typing import List, Optional

from aws_cdk import (
    aws_ec2 as ec2,
    aws_elasticloadbalancingv2 as elbv2,
    aws_s3 as s3,
    CfnOutput,
    Duration
)
from constructs import Construct

from ecs_platform.config import constants
from ecs_platform.errors import MissingFieldError, declaring
from ecs_platform.infrastructure.edge.https import HttpsConstruct

logger = logging.getLogger(__name__)


def default_health_check() -> elbv2.HealthCheck:
    return elbv2.HealthCheck(
        enabled=True,
        path=constants.HEALTH_CHECK_PATH,
        protocol=elbv2.Protocol.HTTP,
        port=str(constants.HTTP_PORT),
        healthy_threshold_count=5,
        unhealthy_threshold_count=5,
        timeout=Duration.seconds(5)
    )


@dataclass
class LoadBalancerConfig:
    name: str
    vpc: Optional[ec2.IVpc] = None
    https: List[HttpsConstruct] = field(default_factory=list)
    health_check: Optional[elbv2.HealthCheck] = None
    log_bucket: Optional[s3.IBucket] = None
    log_prefix: Optional[str] = None

    def validate(self) -> None:
        if not self.name:
            raise MissingFieldError("LoadBalancer.name")

        if self.vpc is None:
            raise MissingFieldError("LoadBalancer.vpc")

        if not self.https:
            raise MissingFieldError("LoadBalancer.https")

        if self.health_check is None:
            self.health_check = default_health_check()


class LoadBalancerConstruct(Construct):
    """
    Creates an internet-facing Application Load Balancer terminating HTTPS
    and forwarding to an IP target group
    """
    def __init__(self, scope: Construct, construct_id: str, config: LoadBalancerConfig, **kwargs) -> None:
        config.validate()
        super().__init__(scope, construct_id, **kwargs)

        name = config.name

        # HTTPS and HTTP in, everything out
        with declaring(f"security group {name}"):
            self.security_group = ec2.SecurityGroup(
                self,
                "SecurityGroup",
                vpc=config.vpc,
                security_group_name=f"{name}-sg",
                description=f"Ingress for the {name} load balancer",
                allow_all_outbound=True
            )
            self.security_group.add_ingress_rule(
                ec2.Peer.ipv4(constants.ANYWHERE_CIDR), ec2.Port.tcp(constants.HTTPS_PORT), "HTTPS"
            )
            self.security_group.add_ingress_rule(
                ec2.Peer.ipv4(constants.ANYWHERE_CIDR), ec2.Port.tcp(constants.HTTP_PORT), "HTTP"
            )

        with declaring(f"load balancer {name}"):
            self.load_balancer = elbv2.ApplicationLoadBalancer(
                self,
                "LoadBalancer",
                load_balancer_name=f"{name}-lb",
                vpc=config.vpc,
                internet_facing=True,
                vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
                ip_address_type=elbv2.IpAddressType.IPV4,
                security_group=self.security_group,
                drop_invalid_header_fields=True,
                deletion_protection=True
            )
            if config.log_bucket is not None:
                self.load_balancer.log_access_logs(config.log_bucket, config.log_prefix)
        logger.info(f"Declared load balancer {name}-lb")

        with declaring(f"target group {name}"):
            self.target_group = elbv2.ApplicationTargetGroup(
                self,
                "TargetGroup",
                target_group_name=f"{name}-tg",
                vpc=config.vpc,
                port=constants.HTTP_PORT,
                protocol=elbv2.ApplicationProtocol.HTTP,
                target_type=elbv2.TargetType.IP,
                deregistration_delay=Duration.seconds(constants.DEREGISTRATION_DELAY_SECONDS),
                health_check=config.health_check
            )

        primary, *additional = config.https
        with declaring(f"HTTPS listener {name}"):
            self.listener = self.load_balancer.add_listener(
                "HttpsListener",
                port=constants.HTTPS_PORT,
                protocol=elbv2.ApplicationProtocol.HTTPS,
                ssl_policy=elbv2.SslPolicy.FORWARD_SECRECY_TLS12_RES_GCM,
                certificates=[elbv2.ListenerCertificate.from_certificate_manager(primary.certificate)],
                default_target_groups=[self.target_group],
                # ingress is declared on the security group above
                open=False
            )

            for index, https in enumerate(additional, start=1):
                elbv2.ApplicationListenerCertificate(
                    self,
                    f"ListenerCertificate{index}",
                    listener=self.listener,
                    certificates=[elbv2.ListenerCertificate.from_certificate_manager(https.certificate)]
                )
        logger.info(f"Declared HTTPS listener for {name} with {len(config.https)} certificates")

        CfnOutput(
            self,
            "LoadBalancerDns",
            value=self.load_balancer.load_balancer_dns_name,
            description=f"DNS name of the {name} load balancer"
        )
