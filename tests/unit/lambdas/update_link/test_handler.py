import json
from datetime import datetime, UTC

import pytest
from pytest import MonkeyPatch

from linkresolver.lambdas.update_link import app
from linkresolver.models import ShortEntryModel
from linkresolver.exceptions import NotFoundError, BadRequestError


NOW = datetime(2025, 10, 15, tzinfo=UTC)


class TestUpdateLinkHandler:

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, service, context, make_event) -> None:
        monkeypatch.setattr(app, 'resolution_service', lambda lambda_name: service)
        service.update.return_value = ShortEntryModel(shortcode='abc123', target='https://example.com/new', created_at=NOW)
        self.service = service
        self.context = context
        self.make_event = make_event

    def test_update_link(self):
        event = self.make_event('PUT', shortcode='abc123', body=json.dumps({'target_url': 'https://example.com/new/', 'ttl': 60}))

        response = app.lambda_handler(event, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert body['target_url'] == 'https://example.com/new'
        assert body['expires_at'] is None
        self.service.update.assert_called_once_with('abc123', 'https://example.com/new/', ttl=60)

    def test_update_link_without_ttl(self):
        event = self.make_event('PUT', shortcode='abc123', body=json.dumps({'target_url': 'https://example.com/new'}))

        app.lambda_handler(event, self.context)

        self.service.update.assert_called_once_with('abc123', 'https://example.com/new', ttl=None)

    @pytest.mark.parametrize(
        'shortcode, body',
        [
            (None, json.dumps({'target_url': 'https://example.com/'})),
            ('abc123', '{not json'),
            ('abc123', json.dumps({'ttl': 60})),
        ],
    )
    def test_bad_request(self, shortcode, body):
        response = app.lambda_handler(self.make_event('PUT', shortcode=shortcode, body=body), self.context)

        assert response['statusCode'] == 400
        self.service.update.assert_not_called()

    def test_invalid_ttl(self):
        self.service.update.side_effect = BadRequestError('ttl must be a positive integer number of seconds')
        event = self.make_event('PUT', shortcode='abc123', body=json.dumps({'target_url': 'https://example.com/', 'ttl': -1}))

        response = app.lambda_handler(event, self.context)

        assert response['statusCode'] == 400

    def test_not_found(self):
        self.service.update.side_effect = NotFoundError("Short link 'abc123' not found.")
        event = self.make_event('PUT', shortcode='abc123', body=json.dumps({'target_url': 'https://example.com/'}))

        response = app.lambda_handler(event, self.context)

        assert response['statusCode'] == 404
        assert json.loads(response['body'])['errorCode'] == 'NOT_FOUND'
