from ipaddress import IPv4Address, IPv6Address
from typing import Any

from botocore.client import BaseClient

from safeshortener.models import AdmissionOutcome


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type AppConfig = dict[str, Any]

# Type aliases for admission checks
type IPAddress = IPv4Address | IPv6Address
type ValidationOutcome = AdmissionOutcome

# Type aliases for boto3 clients
type AppConfigDataClient = BaseClient
