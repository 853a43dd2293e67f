from cdk_nag import NagSuppressions


def _find(stacks, suffix):
    return next((stack for stack in stacks if stack.stack_name.endswith(suffix)), None)


def add_nag_suppressions(stacks):
    """
    Add suppressions for cdk-nag findings
    """
    # Network Stack suppressions
    network_stack = _find(stacks, 'NetworkStack')
    if network_stack:
        NagSuppressions.add_stack_suppressions(
            network_stack,
            [
                {
                    "id": "AwsSolutions-VPC7",
                    "reason": "VPC Flow Logs are not required for this environment"
                }
            ]
        )

    # Platform Stack suppressions
    platform_stack = _find(stacks, 'PlatformStack')
    if platform_stack:
        NagSuppressions.add_stack_suppressions(
            platform_stack,
            [
                {
                    "id": "AwsSolutions-IAM4",
                    "reason": "AmazonECSTaskExecutionRolePolicy is the managed policy ECS expects for task execution"
                },
                {
                    "id": "AwsSolutions-EC23",
                    "reason": "The public load balancer accepts HTTP and HTTPS from anywhere"
                },
                {
                    "id": "AwsSolutions-ELB2",
                    "reason": "Access logs are enabled per environment through LoadBalancerConfig.log_bucket"
                },
                {
                    "id": "AwsSolutions-ECS4",
                    "reason": "Container Insights is not required for this environment"
                }
            ]
        )

    # Data Stack suppressions
    data_stack = _find(stacks, 'DataStack')
    if data_stack:
        NagSuppressions.add_stack_suppressions(
            data_stack,
            [
                {
                    "id": "AwsSolutions-RDS3",
                    "reason": "Multi-AZ is enabled in production but disabled in development for cost reasons"
                },
                {
                    "id": "AwsSolutions-RDS10",
                    "reason": "Deletion protection is managed through the snapshot removal policy"
                },
                {
                    "id": "AwsSolutions-RDS11",
                    "reason": "The database is only reachable from inside the VPC"
                },
                {
                    "id": "AwsSolutions-SMG4",
                    "reason": "Credential rotation is not configured for the generated database secret"
                },
                {
                    "id": "AwsSolutions-AEC3",
                    "reason": "Single node cache clusters do not support encryption settings"
                },
                {
                    "id": "AwsSolutions-AEC4",
                    "reason": "Single node cache clusters are not Multi-AZ"
                },
                {
                    "id": "AwsSolutions-AEC5",
                    "reason": "The cache is only reachable from inside the VPC"
                }
            ]
        )

    # Service Stack suppressions
    service_stack = _find(stacks, 'ServiceStack')
    if service_stack:
        NagSuppressions.add_stack_suppressions(
            service_stack,
            [
                {
                    "id": "AwsSolutions-ECS2",
                    "reason": "Non-secret configuration is passed to the container as environment variables"
                }
            ]
        )
