from .docker_image import DockerImage, DockerImageConfig, DockerBuildSpec
from .registry_auth import RegistryCredentials, registry_credentials, fetch_registry_credentials
