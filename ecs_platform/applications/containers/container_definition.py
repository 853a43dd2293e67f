"""
Container definitions for ECS task definitions.

A ContainerDefinition has two renderings: ``to_dict``/``to_json`` produce the
ECS API container-definition JSON (camelCase keys), and ``to_cfn`` produces the
CloudFormation ``AWS::ECS::TaskDefinition.ContainerDefinition`` property shape
that is embedded into a synthesized task definition.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ecs_platform.config import constants
from ecs_platform.errors import CoercionError, MissingFieldError


def _expect(value, kind, what: str):
    if not isinstance(value, kind):
        raise CoercionError(what, value)
    return value


def _string_map(value, what: str) -> Optional[Dict[str, str]]:
    if value is None:
        return None
    _expect(value, Mapping, what)
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise CoercionError(what, {key: item})
    return dict(value)


@dataclass
class ContainerPortMapping:
    container_port: int
    host_port: int
    protocol: str = "tcp"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "containerPort": self.container_port,
            "hostPort": self.host_port,
            "protocol": self.protocol,
        }

    def to_cfn(self) -> Dict[str, Any]:
        return {
            "ContainerPort": self.container_port,
            "HostPort": self.host_port,
            "Protocol": self.protocol,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ContainerPortMapping':
        _expect(data, Mapping, "portMappings entry")
        return cls(
            container_port=_expect(data.get("containerPort"), int, "containerPort"),
            host_port=_expect(data.get("hostPort"), int, "hostPort"),
            protocol=_expect(data.get("protocol"), str, "protocol"),
        )


@dataclass
class ContainerEnvVar:
    name: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "value": self.value}

    def to_cfn(self) -> Dict[str, str]:
        return {"Name": self.name, "Value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ContainerEnvVar':
        _expect(data, Mapping, "environment entry")
        return cls(
            name=_expect(data.get("name"), str, "environment name"),
            value=_expect(data.get("value"), str, "environment value"),
        )


@dataclass
class ContainerLogConfig:
    """
    Log configuration for a container.

    secret_options, when set, is a list of ``{"name": ..., "valueFrom": ...}``
    entries referencing Secrets Manager or SSM parameters.
    """
    log_driver: str
    options: Dict[str, Any] = field(default_factory=dict)
    secret_options: Optional[List[Dict[str, str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "logDriver": self.log_driver,
            "secretOptions": self.secret_options,
            "options": self.options,
        }

    def to_cfn(self) -> Dict[str, Any]:
        rendered = {"LogDriver": self.log_driver, "Options": self.options}
        if self.secret_options:
            rendered["SecretOptions"] = [
                {"Name": option["name"], "ValueFrom": option["valueFrom"]}
                for option in self.secret_options
            ]
        return rendered

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ContainerLogConfig':
        _expect(data, Mapping, "logConfiguration")
        secret_options = data.get("secretOptions")
        if secret_options is not None:
            secret_options = [
                _string_map(option, "secretOptions entry")
                for option in _expect(secret_options, list, "secretOptions")
            ]
        return cls(
            log_driver=_expect(data.get("logDriver"), str, "logDriver"),
            options=dict(_expect(data.get("options") or {}, Mapping, "options")),
            secret_options=secret_options,
        )


@dataclass
class ContainerLinuxCapabilities:
    add: List[str] = field(default_factory=list)
    drop: List[str] = field(default_factory=list)


@dataclass
class ContainerLinuxParameters:
    capabilities: ContainerLinuxCapabilities = field(default_factory=ContainerLinuxCapabilities)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capabilities": {
                "add": list(self.capabilities.add),
                "drop": list(self.capabilities.drop),
            }
        }

    def to_cfn(self) -> Dict[str, Any]:
        return {
            "Capabilities": {
                "Add": list(self.capabilities.add),
                "Drop": list(self.capabilities.drop),
            }
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ContainerLinuxParameters':
        capabilities = _expect(_expect(data, Mapping, "linuxParameters").get("capabilities") or {},
                               Mapping, "capabilities")
        return cls(capabilities=ContainerLinuxCapabilities(
            add=list(_expect(capabilities.get("add") or [], list, "capabilities.add")),
            drop=list(_expect(capabilities.get("drop") or [], list, "capabilities.drop")),
        ))


@dataclass
class ContainerMountPoint:
    container_path: str
    source_volume: str
    read_only: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "containerPath": self.container_path,
            "readOnly": self.read_only,
            "sourceVolume": self.source_volume,
        }

    def to_cfn(self) -> Dict[str, Any]:
        return {
            "ContainerPath": self.container_path,
            "ReadOnly": self.read_only,
            "SourceVolume": self.source_volume,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ContainerMountPoint':
        _expect(data, Mapping, "mountPoints entry")
        return cls(
            container_path=_expect(data.get("containerPath"), str, "containerPath"),
            source_volume=_expect(data.get("sourceVolume"), str, "sourceVolume"),
            read_only=_expect(data.get("readOnly", False), bool, "readOnly"),
        )


@dataclass
class ContainerDefinition:
    """
    A single container inside an ECS task definition
    """
    name: str
    image: str
    port_mappings: Optional[List[ContainerPortMapping]] = None
    environment: Optional[List[ContainerEnvVar]] = None
    log_configuration: Optional[ContainerLogConfig] = None
    docker_labels: Optional[Dict[str, str]] = None
    linux_parameters: Optional[ContainerLinuxParameters] = None
    mount_points: Optional[List[ContainerMountPoint]] = None
    command: Optional[List[str]] = None

    def validate(self) -> None:
        """
        Check the required fields and normalize the port mapping and
        environment lists so they always serialize as arrays
        """
        if not self.name:
            raise MissingFieldError("name")

        if not self.image:
            raise MissingFieldError("image")

        if self.log_configuration is None:
            raise MissingFieldError("log_configuration")

        if self.port_mappings is None:
            self.port_mappings = []

        if self.environment is None:
            self.environment = []

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.command is not None:
            data["command"] = list(self.command)

        data.update({
            "name": self.name,
            "image": self.image,
            "portMappings": _render(self.port_mappings),
            "environment": _render(self.environment),
            "logConfiguration": self.log_configuration.to_dict() if self.log_configuration else None,
            "dockerLabels": self.docker_labels,
        })

        if self.linux_parameters is not None:
            data["linuxParameters"] = self.linux_parameters.to_dict()
        if self.mount_points is not None:
            data["mountPoints"] = [mount.to_dict() for mount in self.mount_points]

        return data

    def to_json(self) -> str:
        return _dumps(self.to_dict())

    def to_cfn(self) -> Dict[str, Any]:
        rendered: Dict[str, Any] = {
            "Name": self.name,
            "Image": self.image,
            "PortMappings": [port.to_cfn() for port in self.port_mappings or []],
            "Environment": [env.to_cfn() for env in self.environment or []],
        }
        if self.command is not None:
            rendered["Command"] = list(self.command)
        if self.log_configuration is not None:
            rendered["LogConfiguration"] = self.log_configuration.to_cfn()
        if self.docker_labels:
            rendered["DockerLabels"] = dict(self.docker_labels)
        if self.linux_parameters is not None:
            rendered["LinuxParameters"] = self.linux_parameters.to_cfn()
        if self.mount_points:
            rendered["MountPoints"] = [mount.to_cfn() for mount in self.mount_points]
        return rendered

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ContainerDefinition':
        _expect(data, Mapping, "container definition")

        def entries(key: str, parser):
            value = data.get(key)
            if value is None:
                return None
            return [parser(item) for item in _expect(value, list, key)]

        log_configuration = data.get("logConfiguration")
        linux_parameters = data.get("linuxParameters")
        command = data.get("command")

        return cls(
            name=_expect(data.get("name", ""), str, "name"),
            image=_expect(data.get("image", ""), str, "image"),
            port_mappings=entries("portMappings", ContainerPortMapping.from_dict),
            environment=entries("environment", ContainerEnvVar.from_dict),
            log_configuration=(
                ContainerLogConfig.from_dict(log_configuration) if log_configuration is not None else None
            ),
            docker_labels=_string_map(data.get("dockerLabels"), "dockerLabels"),
            linux_parameters=(
                ContainerLinuxParameters.from_dict(linux_parameters) if linux_parameters is not None else None
            ),
            mount_points=entries("mountPoints", ContainerMountPoint.from_dict),
            command=list(_expect(command, list, "command")) if command is not None else None,
        )

    @classmethod
    def from_json(cls, text: str) -> 'ContainerDefinition':
        try:
            data = json.loads(text)
        except ValueError as e:
            raise CoercionError("container definition JSON", text) from e
        return cls.from_dict(data)


def _render(items) -> List[Dict[str, Any]]:
    return [item.to_dict() for item in items or []]


def _dumps(data) -> str:
    try:
        return json.dumps(data)
    except (TypeError, ValueError) as e:
        raise CoercionError("container definition", data) from e


def environment_from_mapping(mapping: Optional[Mapping[str, str]]) -> List[ContainerEnvVar]:
    """Convert an environment mapping into container environment variables"""
    env = _string_map(mapping, "environment") or {}
    return [ContainerEnvVar(name=key, value=value) for key, value in env.items()]


def container_definitions_json(definitions: Sequence[ContainerDefinition]) -> str:
    """Render container definitions as the JSON array a task definition takes"""
    return _dumps([definition.to_dict() for definition in definitions])


def awslogs_configuration(log_group_name: str, region: str) -> ContainerLogConfig:
    """Build the awslogs driver configuration for a log group"""
    return ContainerLogConfig(
        log_driver=constants.LOG_DRIVER,
        secret_options=None,
        options={
            "awslogs-group": log_group_name,
            "awslogs-region": region,
            "awslogs-stream-prefix": constants.LOG_STREAM_PREFIX,
        },
    )
