import logging

from linkresolver.types import LambdaEvent, LambdaContext, LambdaResponse
from linkresolver.exceptions import LinkResolverError
from linkresolver.utils.helpers import guarantee_500_response
from linkresolver.lambdas.helpers import (
    resolution_service,
    path_shortcode,
    query_parameter,
    entry_body,
    response_json,
    response_error,
)
from linkresolver.lambdas.delete_link.constants import LAMBDA_NAME, DELETE_SUCCESS, DELETE_REJECTED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to delete short links

    DELETE /{shortcode}, or DELETE /?target_url=<url> to delete the first
    active link created for that target. A shortcode takes precedence.

    HTTP responses:
        200: Short link deleted (deleted entry in body)
        400: Bad client request (neither shortcode nor target_url, malformed address)
        404: Not found (no active link matches)
        409: Conflict (link modified concurrently)
        503: Service unavailable (persistent store unreachable)
    """
    shortcode = path_shortcode(event)
    target_url = query_parameter(event, 'target_url')

    try:
        entry = resolution_service(LAMBDA_NAME).delete(shortcode=shortcode, target=target_url)
    except LinkResolverError as error:
        logger.info(
            'Short link not deleted. Responding with %s.',
            error.status_code,
            extra={'shortcode': shortcode, 'event': DELETE_REJECTED, 'errorCode': error.error_code},
        )
        return response_error(error)

    logger.info('Short link deleted. Responding with 200.', extra={'shortcode': entry.shortcode, 'event': DELETE_SUCCESS})
    response_body = entry_body(entry, event)
    response_body['message'] = f"Successfully deleted {response_body['short_url']}"
    return response_json(200, response_body)
