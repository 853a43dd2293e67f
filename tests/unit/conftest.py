import os
import pytest
from unittest.mock import patch

from aws_cdk import App, Environment, Stack


@pytest.fixture(scope="function", autouse=True)
def mock_environment():
    """Mock AWS environment variables for all tests"""
    with patch.dict(os.environ, {
        "CDK_DEFAULT_ACCOUNT": "123456789012",
        "CDK_DEFAULT_REGION": "us-west-2"
    }):
        yield


@pytest.fixture
def stack():
    """An empty stack in a concrete account and region"""
    app = App()
    return Stack(app, "test-stack", env=Environment(account="123456789012", region="us-west-2"))


@pytest.fixture
def build_context(tmp_path):
    """A directory holding a minimal Dockerfile"""
    (tmp_path / "Dockerfile").write_text(
        'FROM public.ecr.aws/nginx/nginx:stable-alpine\n'
        'LABEL team="platform"\n'
    )
    return str(tmp_path)
