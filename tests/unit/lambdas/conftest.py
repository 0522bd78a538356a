from typing import cast
from unittest.mock import MagicMock

import pytest

from linkresolver.types import LambdaEvent, LambdaContext
from linkresolver.services import ResolutionService


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'test'})


@pytest.fixture
def service() -> ResolutionService:
    return MagicMock(spec=ResolutionService)


@pytest.fixture
def make_event():
    """Build API Gateway proxy events."""

    def _make_event(
        method: str = 'GET',
        shortcode: str | None = None,
        body: str | None = None,
        query: dict | None = None,
    ) -> LambdaEvent:
        return cast(LambdaEvent, {
            'resource': '/{shortcode}' if shortcode else '/',
            'httpMethod': method,
            'path': f'/{shortcode}' if shortcode else '/',
            'pathParameters': {'shortcode': shortcode} if shortcode else None,
            'queryStringParameters': query,
            'body': body,
            'requestContext': {'domainName': 'sho.rt', 'stage': 'test'},
        })

    return _make_event
