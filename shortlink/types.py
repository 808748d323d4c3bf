from typing import Any


# Type aliases for API Gateway (Lambda proxy) payloads
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]

# Type aliases for configuration documents
type AppConfig = dict[str, Any]
type LambdaConfiguration = dict[str, Any]
