"""
ECR registry credentials for pushing images outside of a CDK deployment
"""
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional

import boto3

from ecs_platform.errors import InvalidFormatError, MissingFieldError

logger = logging.getLogger(__name__)


@dataclass
class RegistryCredentials:
    server: str
    username: str
    password: str


def registry_credentials(authorization_token: str, proxy_endpoint: str) -> RegistryCredentials:
    """Decode an ECR authorization token into a username and password"""
    try:
        decoded = base64.b64decode(authorization_token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise InvalidFormatError("authorization_token", "not base64 encoded") from e

    parts = decoded.split(":")
    if len(parts) != 2:
        raise InvalidFormatError("authorization_token", "invalid credentials")

    return RegistryCredentials(server=proxy_endpoint, username=parts[0], password=parts[1])


def fetch_registry_credentials(registry_id: str, ecr_client=None) -> RegistryCredentials:
    """Fetch push credentials for a registry"""
    if not registry_id:
        raise MissingFieldError("registry_id")

    client = ecr_client or boto3.client("ecr")
    response = client.get_authorization_token(registryIds=[registry_id])

    data: Optional[dict] = next(iter(response.get("authorizationData", [])), None)
    if data is None:
        raise InvalidFormatError("authorizationData", f"no credentials returned for registry {registry_id}")

    logger.info(f"Fetched registry credentials for {data['proxyEndpoint']}")
    return registry_credentials(data["authorizationToken"], data["proxyEndpoint"])
