from typing import Any, TypeAlias

from botocore.client import BaseClient


# Type aliases for Python dictionaries
LambdaEvent: TypeAlias = dict[str, Any]
LambdaContext: TypeAlias = Any
LambdaResponse: TypeAlias = dict[str, Any]
AppConfig: TypeAlias = dict[str, Any]

# Type aliases for boto3 clients
AppConfigDataClient: TypeAlias = BaseClient
