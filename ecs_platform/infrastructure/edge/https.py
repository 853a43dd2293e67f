import logging
from dataclasses import dataclass, field
from typing import List, Optional

from aws_cdk import (
    aws_certificatemanager as acm,
    aws_route53 as route53,
    CfnOutput
)
from constructs import Construct

from ecs_platform.errors import InvalidFormatError, MissingFieldError, declaring

logger = logging.getLogger(__name__)


@dataclass
class HttpsConfig:
    """
    A DNS-validated certificate for a domain hosted in a Route53 zone.

    zone is the fully qualified zone name, e.g. ``example.com.``. When
    hosted_zone_id is set the zone is referenced directly instead of being
    looked up by name.
    """
    name: str
    zone: str
    domain_name: str
    private_zone: bool = False
    subject_alternative_names: List[str] = field(default_factory=list)
    hosted_zone_id: Optional[str] = None

    def validate(self) -> None:
        if not self.name:
            raise MissingFieldError("HTTPS.name")

        if not self.zone:
            raise MissingFieldError("HTTPS.zone")

        if not self.zone.endswith("."):
            raise InvalidFormatError(
                "HTTPS.zone",
                f"<{self.zone}> must end with trailing period, i.e. <domain.com.>"
            )

        if not self.domain_name:
            raise MissingFieldError("HTTPS.domain_name")


class HttpsConstruct(Construct):
    """
    Creates an ACM certificate validated through DNS records in the zone,
    one validation record per domain on the certificate
    """
    def __init__(self, scope: Construct, construct_id: str, config: HttpsConfig, **kwargs) -> None:
        config.validate()
        super().__init__(scope, construct_id, **kwargs)

        self.zone = self._lookup_zone(config)
        logger.info(f"Resolved hosted zone {config.zone}")

        with declaring(f"certificate {config.name}"):
            self.certificate = acm.Certificate(
                self,
                "Certificate",
                certificate_name=f"{config.name}-cert",
                domain_name=config.domain_name,
                subject_alternative_names=config.subject_alternative_names or None,
                validation=acm.CertificateValidation.from_dns(self.zone)
            )
        logger.info(
            f"Declared certificate for {config.domain_name} with "
            f"{len(config.subject_alternative_names)} alternative names"
        )

        CfnOutput(
            self,
            "CertificateArn",
            value=self.certificate.certificate_arn,
            description=f"Certificate for {config.domain_name}"
        )

    def _lookup_zone(self, config: HttpsConfig) -> route53.IHostedZone:
        with declaring(f"hosted zone lookup {config.zone}"):
            if config.hosted_zone_id:
                return route53.HostedZone.from_hosted_zone_attributes(
                    self,
                    "Zone",
                    hosted_zone_id=config.hosted_zone_id,
                    zone_name=config.zone.rstrip(".")
                )

            return route53.HostedZone.from_lookup(
                self,
                "Zone",
                domain_name=config.zone.rstrip("."),
                private_zone=config.private_zone
            )
