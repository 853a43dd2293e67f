"""
Constants used throughout the ECS Fargate Platform
"""

# Logging
LOG_DRIVER = "awslogs"
LOG_GROUP_PREFIX = "/fargate/service"
LOG_STREAM_PREFIX = "fargate"
DEFAULT_LOG_RETENTION_DAYS = 30

# ECS Configuration
TASK_EXECUTION_POLICY = "service-role/AmazonECSTaskExecutionRolePolicy"
TASK_PRINCIPAL = "ecs-tasks.amazonaws.com"
DEFAULT_NETWORK_MODE = "awsvpc"
DEFAULT_COMPATIBILITIES = ["FARGATE"]

# Load Balancer Configuration
HTTPS_PORT = 443
HTTP_PORT = 80
HEALTH_CHECK_PATH = "/health"
DEREGISTRATION_DELAY_SECONDS = 30

# Network Configuration
ANYWHERE_CIDR = "0.0.0.0/0"
DEFAULT_AZ_SUFFIXES = ("a", "c")
