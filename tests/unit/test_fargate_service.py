import json
import pytest
from aws_cdk import assertions

from ecs_platform.applications import (
    ContainerDefinition,
    FargateService,
    ServiceConfig,
    ServiceSpec,
    TaskSpec,
    LoadBalancerTarget,
)
from ecs_platform.applications.containers import (
    ContainerLogConfig,
    ContainerPortMapping,
    awslogs_configuration,
)
from ecs_platform.errors import InvalidFormatError, MissingFieldError
from ecs_platform.infrastructure.storage import DockerBuildSpec


def sidecar(name="envoy", image="public.ecr.aws/appmesh/aws-appmesh-envoy:v1.29"):
    return ContainerDefinition(
        name=name,
        image=image,
        log_configuration=awslogs_configuration("/fargate/service/envoy", "us-west-2")
    )


def service_config(build_context, **overrides):
    values = dict(
        name="api",
        region="us-west-2",
        docker=DockerBuildSpec(context=build_context),
        task=TaskSpec(cpu="256", memory="512", execution_role_arn="arn:aws:iam::123456789012:role/exec"),
        service=ServiceSpec(
            cluster="test-cluster",
            subnet_ids=["subnet-1", "subnet-2"],
            security_group_ids=["sg-1"],
            desired_count=2,
            load_balancers=[LoadBalancerTarget(
                target_group_arn="arn:aws:elasticloadbalancing:us-west-2:123456789012:targetgroup/api/1",
                container_name="api",
                container_port=80
            )]
        ),
        ports=[ContainerPortMapping(container_port=80, host_port=80, protocol="tcp")],
        environment={"STAGE": "test", "LOG_LEVEL": "debug"},
        docker_labels={"team": "platform"},
    )
    values.update(overrides)
    return ServiceConfig(**values)


def container_definitions(template):
    task_definitions = template.find_resources("AWS::ECS::TaskDefinition")
    assert len(task_definitions) == 1
    task_definition = next(iter(task_definitions.values()))
    return task_definition["Properties"]["ContainerDefinitions"]


@pytest.mark.parametrize("overrides, field", [
    ({"name": ""}, "Service.name"),
    ({"region": ""}, "Service.region"),
    ({"docker": None}, "Service.docker"),
    ({"task": None}, "Service.task"),
    ({"service": None}, "Service.service"),
])
def test_validate_requires_fields(build_context, overrides, field):
    with pytest.raises(MissingFieldError) as e:
        service_config(build_context, **overrides).validate()

    assert e.value.field == field


def test_validate_rejects_unsupported_retention(build_context):
    with pytest.raises(InvalidFormatError) as e:
        service_config(build_context, log_retention_days=45).validate()

    assert e.value.field == "Service.log_retention_days"


def test_failing_sidecar_declares_nothing(stack, build_context):
    config = service_config(build_context, sidecar_containers=[sidecar(), sidecar(name="xray", image="")])

    with pytest.raises(MissingFieldError) as e:
        FargateService(stack, "Service", config)

    assert e.value.field == "Service.sidecar_containers[1].image"
    template = assertions.Template.from_stack(stack)
    template.resource_count_is("AWS::ECR::Repository", 0)
    template.resource_count_is("AWS::Logs::LogGroup", 0)
    template.resource_count_is("AWS::ECS::TaskDefinition", 0)


def test_fargate_service_construct(stack, build_context):
    service = FargateService(stack, "Service", service_config(build_context, sidecar_containers=[sidecar()]))
    template = assertions.Template.from_stack(stack)

    # Test image repository
    template.has_resource_properties("AWS::ECR::Repository", {
        "RepositoryName": "api"
    })

    # Test log group
    template.has_resource_properties("AWS::Logs::LogGroup", {
        "LogGroupName": "/fargate/service/api",
        "RetentionInDays": 30
    })

    # Test task definition
    template.has_resource_properties("AWS::ECS::TaskDefinition", {
        "Family": "api-task",
        "Cpu": "256",
        "Memory": "512",
        "NetworkMode": "awsvpc",
        "RequiresCompatibilities": ["FARGATE"],
        "ExecutionRoleArn": "arn:aws:iam::123456789012:role/exec",
        "Tags": [{"Key": "Name", "Value": "api-task"}]
    })

    # Test service
    template.has_resource_properties("AWS::ECS::Service", {
        "ServiceName": "api-svc",
        "Cluster": "test-cluster",
        "DesiredCount": 2,
        "LaunchType": "FARGATE",
        "TaskDefinition": {"Ref": assertions.Match.string_like_regexp("ServiceTaskDefinition")},
        "NetworkConfiguration": {
            "AwsvpcConfiguration": {
                "Subnets": ["subnet-1", "subnet-2"],
                "SecurityGroups": ["sg-1"],
                "AssignPublicIp": "DISABLED"
            }
        },
        "LoadBalancers": [{
            "ContainerName": "api",
            "ContainerPort": 80,
            "TargetGroupArn": "arn:aws:elasticloadbalancing:us-west-2:123456789012:targetgroup/api/1"
        }]
    })

    assert service.config.service.task_definition == service.task_definition.ref


def test_container_definitions(stack, build_context):
    FargateService(stack, "Service", service_config(build_context, sidecar_containers=[sidecar()]))
    template = assertions.Template.from_stack(stack)

    containers = container_definitions(template)

    # Primary container first, then sidecars in order
    assert [container["Name"] for container in containers] == ["api", "envoy"]

    primary = containers[0]
    assert primary["Environment"] == [
        {"Name": "STAGE", "Value": "test"},
        {"Name": "LOG_LEVEL", "Value": "debug"},
    ]
    assert primary["DockerLabels"] == {"team": "platform"}
    assert primary["PortMappings"] == [{"ContainerPort": 80, "HostPort": 80, "Protocol": "tcp"}]
    assert primary["LogConfiguration"] == {
        "LogDriver": "awslogs",
        "Options": {
            "awslogs-group": "/fargate/service/api",
            "awslogs-region": "us-west-2",
            "awslogs-stream-prefix": "fargate"
        }
    }
    assert containers[1]["Image"] == "public.ecr.aws/appmesh/aws-appmesh-envoy:v1.29"


def test_container_definitions_json(stack, build_context):
    service = FargateService(stack, "Service", service_config(build_context))

    definitions = json.loads(service.container_definitions_json)

    assert len(definitions) == 1
    assert definitions[0]["name"] == "api"
    assert definitions[0]["environment"] == [
        {"name": "STAGE", "value": "test"},
        {"name": "LOG_LEVEL", "value": "debug"},
    ]
    assert definitions[0]["logConfiguration"]["logDriver"] == "awslogs"


def test_custom_service_name_and_public_ip(stack, build_context):
    FargateService(stack, "Service", service_config(
        build_context,
        service=ServiceSpec(
            cluster="test-cluster",
            subnet_ids=["subnet-1"],
            assign_public_ip=True,
            service_name="public-api"
        ),
        log_retention_days=7
    ))
    template = assertions.Template.from_stack(stack)

    template.has_resource_properties("AWS::ECS::Service", {
        "ServiceName": "public-api",
        "NetworkConfiguration": {
            "AwsvpcConfiguration": {
                "Subnets": ["subnet-1"],
                "AssignPublicIp": "ENABLED"
            }
        }
    })
    template.has_resource_properties("AWS::Logs::LogGroup", {
        "RetentionInDays": 7
    })


def test_missing_log_configuration_on_sidecar_is_scoped(build_context):
    broken = ContainerDefinition(name="agent", image="amazon/cloudwatch-agent:latest")
    config = service_config(build_context, sidecar_containers=[broken])

    with pytest.raises(MissingFieldError) as e:
        config.validate()

    assert e.value.field == "Service.sidecar_containers[0].log_configuration"


def test_log_configuration_secret_options(stack, build_context):
    log_configuration = ContainerLogConfig(
        log_driver="awsfirelens",
        options={"Name": "datadog"},
        secret_options=[{"name": "apikey", "valueFrom": "arn:aws:secretsmanager:us-west-2:123456789012:secret:dd"}]
    )
    FargateService(stack, "Service", service_config(
        build_context,
        sidecar_containers=[ContainerDefinition(name="router", image="fluent-bit:latest",
                                                log_configuration=log_configuration)]
    ))
    template = assertions.Template.from_stack(stack)

    router = container_definitions(template)[1]
    assert router["LogConfiguration"]["SecretOptions"] == [
        {"Name": "apikey", "ValueFrom": "arn:aws:secretsmanager:us-west-2:123456789012:secret:dd"}
    ]


def test_unset_ports_and_environment_render_as_empty_lists(stack, build_context):
    config = service_config(build_context, ports=None, environment=None, docker_labels=None)

    FargateService(stack, "Service", config)
    template = assertions.Template.from_stack(stack)

    primary = container_definitions(template)[0]
    assert primary["PortMappings"] == []
    assert primary["Environment"] == []
    assert "DockerLabels" not in primary
    assert config.ports == []
    assert config.environment == {}
