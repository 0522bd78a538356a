import logging

from linkresolver.types import LambdaEvent, LambdaContext, LambdaResponse
from linkresolver.exceptions import LinkResolverError, BadRequestError
from linkresolver.utils.helpers import guarantee_500_response
from linkresolver.lambdas.helpers import (
    resolution_service,
    parse_json_body,
    path_shortcode,
    entry_body,
    response_json,
    response_error,
)
from linkresolver.lambdas.update_link.constants import LAMBDA_NAME, UPDATE_SUCCESS, UPDATE_REJECTED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to re-target short links

    PUT /{shortcode} with JSON body {"target_url": str, "ttl": int (optional)}.
    Without ttl the link keeps its current expiry.

    HTTP responses:
        200: Short link updated (updated entry in body)
        400: Bad client request (invalid JSON, missing fields, malformed address, bad ttl)
        404: Not found (no active link for shortcode)
        409: Conflict (link modified concurrently)
        503: Service unavailable (persistent store unreachable)
    """
    try:
        shortcode = path_shortcode(event)
        if not shortcode:
            raise BadRequestError("Bad Request (missing 'shortcode' in path)")

        body = parse_json_body(event)
        target_url = body.get('target_url')
        if not target_url:
            raise BadRequestError("Bad Request (missing 'target_url' in JSON body)")

        entry = resolution_service(LAMBDA_NAME).update(shortcode, target_url, ttl=body.get('ttl'))
    except LinkResolverError as error:
        logger.info(
            'Short link not updated. Responding with %s.',
            error.status_code,
            extra={'shortcode': path_shortcode(event), 'event': UPDATE_REJECTED, 'errorCode': error.error_code},
        )
        return response_error(error)

    logger.info('Short link updated. Responding with 200.', extra={'shortcode': entry.shortcode, 'event': UPDATE_SUCCESS})
    response_body = entry_body(entry, event)
    response_body['message'] = f"Successfully updated {response_body['short_url']} to {entry.target}"
    return response_json(200, response_body)
