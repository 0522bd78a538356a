"""Shared request parsing and response building for the link lambdas

Functions:
    resolution_service(lambda_name) -> ResolutionService
        Build (once per process and lambda) the service from AppConfig.
    parse_json_body(event) -> dict
        Decode the JSON request body, raising BadRequestError if invalid.
    path_shortcode(event) -> str | None
        Read the 'shortcode' path parameter.
    query_parameter(event, name) -> str | None
        Read a query string parameter.
    entry_body(entry, event) -> dict
        JSON-serializable representation of a ShortEntryModel.
    response_json / response_error / response_302
        API Gateway Lambda proxy responses.
"""

import json
import functools
from typing import Any

from linkresolver.types import LambdaEvent, LambdaResponse
from linkresolver.models import ShortEntryModel
from linkresolver.exceptions import LinkResolverError, BadRequestError
from linkresolver.services import ResolutionService, build_resolution_service
from linkresolver.utils import load_config, app_prefix, get_short_url


@functools.cache
def resolution_service(lambda_name: str) -> ResolutionService:
    """Build the resolution service for `lambda_name`, once per process

    Failed builds are not cached, so the next invocation retries.
    """
    return build_resolution_service(load_config(lambda_name), prefix=app_prefix())


def parse_json_body(event: LambdaEvent) -> dict[str, Any]:
    try:
        body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError as e:
        raise BadRequestError('Bad Request (invalid JSON body)') from e
    if not isinstance(body, dict):
        raise BadRequestError('Bad Request (JSON body must be an object)')
    return body


def path_shortcode(event: LambdaEvent) -> str | None:
    return (event.get('pathParameters') or {}).get('shortcode')


def query_parameter(event: LambdaEvent, name: str) -> str | None:
    return (event.get('queryStringParameters') or {}).get(name)


def entry_body(entry: ShortEntryModel, event: LambdaEvent) -> dict[str, Any]:
    return {
        'shortcode': entry.shortcode,
        'short_url': get_short_url(entry.shortcode, event),
        'target_url': entry.target,
        'created_at': entry.created_at.isoformat(),
        'expires_at': entry.expires_at.isoformat() if entry.expires_at is not None else None,
    }


def response_json(status_code: int, body: dict[str, Any]) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_error(error: LinkResolverError) -> LambdaResponse:
    return response_json(error.status_code, {'message': str(error), 'errorCode': error.error_code})


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }
