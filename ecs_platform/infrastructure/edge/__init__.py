from .https import HttpsConstruct, HttpsConfig
from .load_balancer import LoadBalancerConstruct, LoadBalancerConfig, default_health_check
