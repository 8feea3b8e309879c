"""
Yahoo OAuth2 Authentication Module
Handles the three-legged OAuth2 flow for Yahoo Fantasy Sports API access
"""

import base64
import logging
from typing import Optional

import requests
from requests_oauthlib import OAuth2Session

from errors import RefreshFailed, TokenExchangeFailed
from yahoo_integration.config import YAHOO_AUTH_URL, YAHOO_TOKEN_URL, DEFAULT_HTTP_TIMEOUT
from yahoo_integration.models import TokenSet

logger = logging.getLogger(__name__)


def build_authorization_url(client_id: str, redirect_uri: str, scope: str, state: str) -> str:
    """Build the Yahoo consent URL the user is redirected to"""
    yahoo = OAuth2Session(
        client_id,
        redirect_uri=redirect_uri,
        scope=[scope]
    )
    authorization_url, _state = yahoo.authorization_url(YAHOO_AUTH_URL, state=state)
    return authorization_url


class YahooAuth:
    """Exchanges authorization codes and refresh tokens against Yahoo's token endpoint"""

    def __init__(self, http: Optional[requests.Session] = None,
                 token_url: str = YAHOO_TOKEN_URL, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.http = http or requests.Session()
        self.token_url = token_url
        self.timeout = timeout

    def build_authorization_url(self, client_id: str, redirect_uri: str, scope: str, state: str) -> str:
        return build_authorization_url(client_id, redirect_uri, scope, state)

    def _basic_auth_headers(self, client_id: str, client_secret: str) -> dict:
        credentials = f"{client_id}:{client_secret}"
        encoded_credentials = base64.b64encode(credentials.encode()).decode()
        return {
            'Authorization': f'Basic {encoded_credentials}',
            'Content-Type': 'application/x-www-form-urlencoded'
        }

    def _post_token(self, data: dict, client_id: str, client_secret: str, error_cls, what: str) -> dict:
        try:
            response = self.http.post(
                self.token_url,
                headers=self._basic_auth_headers(client_id, client_secret),
                data=data,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise error_cls(f"{what} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"{what} failed with {response.status_code}: {response.text}")
            raise error_cls(f"{what} failed", status=response.status_code, body=response.text)

        try:
            return response.json()
        except ValueError as e:
            raise error_cls(f"{what} returned a non-JSON body",
                            status=response.status_code, body=response.text) from e

    def exchange_code(self, code: str, client_id: str, client_secret: str, redirect_uri: str) -> TokenSet:
        """
        Exchange an authorization code for a token set

        Raises:
            TokenExchangeFailed: on any non-2xx response or unusable token payload
        """
        payload = self._post_token(
            {
                'grant_type': 'authorization_code',
                'redirect_uri': redirect_uri,
                'code': code
            },
            client_id, client_secret, TokenExchangeFailed, 'Token exchange'
        )

        try:
            return TokenSet.from_dict(payload)
        except ValueError as e:
            raise TokenExchangeFailed(f"Token exchange returned an unusable token: {e}", body=str(payload)) from e

    def refresh(self, token_set: TokenSet, client_id: str, client_secret: str, redirect_uri: str) -> TokenSet:
        """
        Refresh an expired access token

        Raises:
            RefreshFailed: on any non-2xx response or unusable token payload
        """
        payload = self._post_token(
            {
                'grant_type': 'refresh_token',
                'redirect_uri': redirect_uri,
                'refresh_token': token_set.refresh_token
            },
            client_id, client_secret, RefreshFailed, 'Token refresh'
        )

        # Yahoo normally rotates the refresh token, but keep the old one if it doesn't
        if isinstance(payload, dict) and not payload.get('refresh_token'):
            payload = dict(payload, refresh_token=token_set.refresh_token)

        try:
            return TokenSet.from_dict(payload)
        except ValueError as e:
            raise RefreshFailed(f"Token refresh returned an unusable token: {e}", body=str(payload)) from e
