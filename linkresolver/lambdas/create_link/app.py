import logging

from linkresolver.types import LambdaEvent, LambdaContext, LambdaResponse
from linkresolver.models import LinkOptions
from linkresolver.exceptions import LinkResolverError, BadRequestError
from linkresolver.utils.helpers import guarantee_500_response
from linkresolver.lambdas.helpers import resolution_service, parse_json_body, entry_body, response_json, response_error
from linkresolver.lambdas.create_link.constants import LAMBDA_NAME, CREATE_SUCCESS, CREATE_REJECTED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to create short links

    This Lambda handler follows this procedure to create short links:
    - Step 1: Extract target URL and options from request body
    - Step 2: Create the short link (canonicalize, store, cache, filter)
    - Step 3: Respond to user with 201 created

    HTTP responses:
        201: Short link created
            shortcode, short_url, target_url (canonical), created_at, expires_at
        400: Bad client request
            invalid JSON, missing target_url, malformed address, bad shortcode or ttl
        409: Conflict
            custom shortcode already in use
        503: Service unavailable
            persistent store unreachable

    Args:
        event (LambdaEvent):
            API Gateway event payload. JSON body:
            {"target_url": str, "shortcode": str (optional), "ttl": int (optional)}
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse: API Gateway-compatible response.

    Example:
        >>> event = {'body': '{"target_url": "https://Example.com/path/"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['target_url']
        'https://example.com/path'
    """
    try:
        # 1- Extract target URL and options from request body
        body = parse_json_body(event)
        target_url = body.get('target_url')
        if not target_url:
            raise BadRequestError("Bad Request (missing 'target_url' in JSON body)")
        options = LinkOptions(shortcode=body.get('shortcode'), ttl=body.get('ttl'))

        # 2- Create the short link
        entry = resolution_service(LAMBDA_NAME).create(target_url, options)
    except LinkResolverError as error:
        logger.info(
            'Short link not created. Responding with %s.',
            error.status_code,
            extra={'event': CREATE_REJECTED, 'errorCode': error.error_code},
        )
        return response_error(error)

    # 3- Respond with the created entry
    logger.info(
        'Short link created. Responding with 201.',
        extra={'shortcode': entry.shortcode, 'event': CREATE_SUCCESS},
    )
    response_body = entry_body(entry, event)
    response_body['message'] = f"Successfully shortened {entry.target} to {response_body['short_url']}"
    return response_json(201, response_body)
