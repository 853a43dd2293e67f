from .container_definition import (
    ContainerDefinition,
    ContainerPortMapping,
    ContainerEnvVar,
    ContainerLogConfig,
    ContainerLinuxCapabilities,
    ContainerLinuxParameters,
    ContainerMountPoint,
    awslogs_configuration,
    container_definitions_json,
    environment_from_mapping,
)
