import base64
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from auth import YahooAuth, build_authorization_url
from errors import RefreshFailed, TokenExchangeFailed
from yahoo_integration.config import YAHOO_AUTH_URL, YAHOO_TOKEN_URL
from yahoo_integration.models import TokenSet

from helpers import FakeHttp, FakeResponse, TOKEN_RESPONSE


def _query(url):
    return {k: v[0] for k, v in parse_qs(urlparse(url).query).items()}


def test_authorization_url_carries_client_and_state():
    url = build_authorization_url('client-id', 'https://example.com/callback', 'fspt-r', 'abc123')

    assert url.startswith(YAHOO_AUTH_URL + '?')
    assert _query(url) == {
        'response_type': 'code',
        'client_id': 'client-id',
        'redirect_uri': 'https://example.com/callback',
        'scope': 'fspt-r',
        'state': 'abc123'
    }


def test_authorization_url_is_deterministic():
    args = ('client-id', 'https://example.com/callback', 'fspt-r', 'abc123')
    assert build_authorization_url(*args) == build_authorization_url(*args)


def test_exchange_code_posts_basic_auth_form():
    http = FakeHttp([FakeResponse(200, TOKEN_RESPONSE)])
    token = YahooAuth(http=http).exchange_code('the-code', 'cid', 'secret', 'https://example.com/callback')

    assert token == TokenSet.from_dict(TOKEN_RESPONSE)

    method, url, kwargs = http.calls[0]
    assert (method, url) == ('POST', YAHOO_TOKEN_URL)
    assert kwargs['data'] == {
        'grant_type': 'authorization_code',
        'redirect_uri': 'https://example.com/callback',
        'code': 'the-code'
    }
    expected = base64.b64encode(b'cid:secret').decode()
    assert kwargs['headers']['Authorization'] == f'Basic {expected}'


def test_exchange_code_failure_keeps_upstream_details():
    http = FakeHttp([FakeResponse(400, text='{"error":"invalid_grant"}')])

    with pytest.raises(TokenExchangeFailed) as excinfo:
        YahooAuth(http=http).exchange_code('bad', 'cid', 'secret', 'https://example.com/callback')

    assert excinfo.value.status == 400
    assert 'invalid_grant' in excinfo.value.body


def test_exchange_code_network_error():
    http = FakeHttp([requests.ConnectionError('connection refused')])

    with pytest.raises(TokenExchangeFailed):
        YahooAuth(http=http).exchange_code('code', 'cid', 'secret', 'https://example.com/callback')


def test_exchange_code_rejects_response_without_tokens():
    http = FakeHttp([FakeResponse(200, {'token_type': 'bearer'})])

    with pytest.raises(TokenExchangeFailed):
        YahooAuth(http=http).exchange_code('code', 'cid', 'secret', 'https://example.com/callback')


def test_refresh_sends_refresh_token():
    http = FakeHttp([FakeResponse(200, dict(TOKEN_RESPONSE, access_token='access-2', refresh_token='refresh-2'))])
    old = TokenSet.from_dict(TOKEN_RESPONSE)

    new = YahooAuth(http=http).refresh(old, 'cid', 'secret', 'https://example.com/callback')

    assert new.access_token == 'access-2'
    assert new.refresh_token == 'refresh-2'
    assert http.calls[0][2]['data']['grant_type'] == 'refresh_token'
    assert http.calls[0][2]['data']['refresh_token'] == 'refresh-1'


def test_refresh_keeps_old_refresh_token_when_not_rotated():
    http = FakeHttp([FakeResponse(200, {'access_token': 'access-2', 'expires_in': 3600})])
    old = TokenSet.from_dict(TOKEN_RESPONSE)

    new = YahooAuth(http=http).refresh(old, 'cid', 'secret', 'https://example.com/callback')

    assert new.access_token == 'access-2'
    assert new.refresh_token == 'refresh-1'


def test_refresh_failure():
    http = FakeHttp([FakeResponse(401, text='revoked')])

    with pytest.raises(RefreshFailed) as excinfo:
        YahooAuth(http=http).refresh(TokenSet.from_dict(TOKEN_RESPONSE), 'cid', 'secret', 'https://example.com/callback')

    assert excinfo.value.status == 401
