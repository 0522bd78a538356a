import logging

from linkresolver.types import LambdaEvent, LambdaContext, LambdaResponse
from linkresolver.exceptions import LinkResolverError, BadRequestError
from linkresolver.utils.helpers import guarantee_500_response
from linkresolver.lambdas.helpers import resolution_service, path_shortcode, response_302, response_error
from linkresolver.lambdas.resolve_link.constants import LAMBDA_NAME, REDIRECT_SUCCESS, REDIRECT_REJECTED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to resolve short links

    This Lambda handler follows this procedure to redirect clients:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve shortcode (existence filter -> cache -> store)
    - Step 3: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: canonical target URL
        400: Bad client request
            missing shortcode in path parameters
        404: Not found
            shortcode never issued, deleted or expired
        503: Service unavailable
            persistent store unreachable

    Example:
        >>> event = {'pathParameters': {'shortcode': 'V1StGXR8_Z'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/path'
    """
    try:
        # 1- Extract shortcode from request's path
        shortcode = path_shortcode(event)
        if not shortcode:
            raise BadRequestError("Bad Request (missing 'shortcode' in path)")

        # 2- Resolve shortcode to its target
        target_url = resolution_service(LAMBDA_NAME).get(shortcode)
    except LinkResolverError as error:
        logger.info(
            'Short link not resolved. Responding with %s.',
            error.status_code,
            extra={'shortcode': path_shortcode(event), 'event': REDIRECT_REJECTED, 'errorCode': error.error_code},
        )
        return response_error(error)

    # 3- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
