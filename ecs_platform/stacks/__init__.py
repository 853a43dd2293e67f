from .network_stack import NetworkStack
from .platform_stack import PlatformStack
from .data_stack import DataStack
from .service_stack import ServiceStack
