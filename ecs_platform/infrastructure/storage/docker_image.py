import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from aws_cdk import (
    aws_ecr as ecr,
    aws_ecr_assets as ecr_assets,
    RemovalPolicy,
    CfnOutput
)
from constructs import Construct

from ecs_platform.errors import MissingFieldError, declaring

logger = logging.getLogger(__name__)


@dataclass
class DockerBuildSpec:
    """How to build a container image"""
    context: str
    dockerfile: str = "Dockerfile"
    build_args: Dict[str, str] = field(default_factory=dict)
    target: Optional[str] = None
    platform: Optional[str] = None

    @property
    def dockerfile_path(self) -> str:
        return os.path.join(self.context, self.dockerfile)


@dataclass
class DockerImageConfig:
    name: str
    build: Optional[DockerBuildSpec] = None

    def validate(self) -> None:
        if not self.name:
            raise MissingFieldError("DockerImage.name")

        if self.build is None:
            raise MissingFieldError("DockerImage.build")


class DockerImage(Construct):
    """
    Creates an ECR repository and builds and publishes an image for it
    """
    def __init__(self, scope: Construct, construct_id: str, config: DockerImageConfig, **kwargs) -> None:
        config.validate()
        super().__init__(scope, construct_id, **kwargs)

        with declaring(f"ECR repository {config.name}"):
            self.repository = ecr.Repository(
                self,
                "Repository",
                repository_name=config.name,
                encryption=ecr.RepositoryEncryption.AES_256,
                image_tag_mutability=ecr.TagMutability.MUTABLE,
                image_scan_on_push=True,
                removal_policy=RemovalPolicy.DESTROY,
                empty_on_delete=True
            )
            # CDK omits the default encryption type, keep it explicit in the template
            self.repository.node.default_child.add_property_override(
                "EncryptionConfiguration.EncryptionType", "AES256"
            )
        logger.info(f"Declared ECR repository {config.name}")

        build = config.build
        with declaring(f"image build {config.name}"):
            self.image = ecr_assets.DockerImageAsset(
                self,
                "Image",
                directory=build.context,
                file=build.dockerfile,
                build_args=build.build_args or None,
                target=build.target,
                platform=ecr_assets.Platform.custom(build.platform) if build.platform else None
            )
        logger.info(f"Declared image build for {config.name} from {build.dockerfile_path}")

        self.image_uri = self.image.image_uri

        CfnOutput(
            self,
            "RepositoryUri",
            value=self.repository.repository_uri,
            description=f"ECR Repository URI for {config.name}"
        )
