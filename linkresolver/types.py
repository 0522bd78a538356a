from typing import Any


# API Gateway Lambda proxy payloads
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
