from .vpc import VpcConstruct, VpcConfig
