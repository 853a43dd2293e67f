import base64
import pytest
from aws_cdk import assertions, Token
from botocore.stub import Stubber
import boto3

from ecs_platform.errors import InvalidFormatError, MissingFieldError
from ecs_platform.infrastructure.storage import (
    DockerBuildSpec,
    DockerImage,
    DockerImageConfig,
    fetch_registry_credentials,
    registry_credentials,
)


def test_validate_requires_build():
    with pytest.raises(MissingFieldError) as e:
        DockerImageConfig(name="api").validate()

    assert e.value.field == "DockerImage.build"


def test_docker_image_construct(stack, build_context):
    image = DockerImage(stack, "Image", DockerImageConfig(
        name="api",
        build=DockerBuildSpec(context=build_context, build_args={"VERSION": "1"})
    ))
    template = assertions.Template.from_stack(stack)

    # Test repository creation
    template.resource_count_is("AWS::ECR::Repository", 1)
    template.has_resource_properties("AWS::ECR::Repository", {
        "RepositoryName": "api",
        "EncryptionConfiguration": {"EncryptionType": "AES256"},
        "ImageTagMutability": "MUTABLE",
        "ImageScanningConfiguration": {"ScanOnPush": True}
    })

    # The image URI is only known once the asset is published
    assert Token.is_unresolved(image.image_uri)


def test_registry_credentials_splits_token():
    token = base64.b64encode(b"AWS:secret-password").decode()

    credentials = registry_credentials(token, "https://123456789012.dkr.ecr.us-west-2.amazonaws.com")

    assert credentials.username == "AWS"
    assert credentials.password == "secret-password"
    assert credentials.server == "https://123456789012.dkr.ecr.us-west-2.amazonaws.com"


@pytest.mark.parametrize("token", [
    base64.b64encode(b"no-separator").decode(),
    base64.b64encode(b"too:many:parts").decode(),
    "not base64!",
])
def test_registry_credentials_rejects_malformed_tokens(token):
    with pytest.raises(InvalidFormatError):
        registry_credentials(token, "https://registry")


def test_fetch_registry_credentials():
    client = boto3.client("ecr", region_name="us-west-2")
    stubber = Stubber(client)
    stubber.add_response(
        "get_authorization_token",
        {
            "authorizationData": [{
                "authorizationToken": base64.b64encode(b"AWS:pw").decode(),
                "proxyEndpoint": "https://123456789012.dkr.ecr.us-west-2.amazonaws.com"
            }]
        },
        {"registryIds": ["123456789012"]}
    )

    with stubber:
        credentials = fetch_registry_credentials("123456789012", ecr_client=client)

    assert credentials.username == "AWS"
    assert credentials.password == "pw"
    stubber.assert_no_pending_responses()
