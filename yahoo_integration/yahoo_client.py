"""
Yahoo Fantasy Sports API Client

Fetches league settings with the stored OAuth token, refreshing it once
when Yahoo answers 401, and caches the result in memory per league key.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import requests

from errors import (
    MalformedUpstreamResponse,
    UpstreamAuthFailed,
    UpstreamRequestFailed,
)
from .config import YAHOO_API_BASE_URL, DEFAULT_HTTP_TIMEOUT
from .models import TokenSet
from .storage import DocumentStore, TokenStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def extract_settings(payload: Any) -> Dict[str, Any]:
    """
    Pull the settings object out of Yahoo's JSON envelope

    Yahoo wraps league resources as
    {"fantasy_content": {"league": [{...metadata}, {"settings": [{...}]}]}}

    Raises:
        MalformedUpstreamResponse: if any level of that shape is missing
    """
    try:
        league = payload['fantasy_content']['league']
        settings = league[1]['settings'][0]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedUpstreamResponse(f"League settings not found in Yahoo response: {e!r}") from e

    if not isinstance(settings, dict):
        raise MalformedUpstreamResponse(
            f"League settings should be an object, got {type(settings).__name__}"
        )
    return settings


class YahooFantasyClient:
    """
    Yahoo Fantasy Sports API v2 client for league settings

    Features:
    - Bearer-token requests using the stored TokenSet
    - A single refresh-and-retry when Yahoo answers 401
    - In-memory settings cache keyed by league key, never expired
    - Every successful fetch recorded in the settings document
    """

    def __init__(self, token_store: TokenStore, oauth,
                 client_id: str, client_secret: str, redirect_uri: str,
                 settings_store: Optional[DocumentStore] = None,
                 http: Optional[requests.Session] = None,
                 clock: Callable[[], datetime] = _utcnow,
                 base_url: str = YAHOO_API_BASE_URL,
                 timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.token_store = token_store
        self.oauth = oauth
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.settings_store = settings_store
        self.http = http or requests.Session()
        self.clock = clock
        self.base_url = base_url
        self.timeout = timeout

        self.cache: Dict[str, Dict[str, Any]] = {}

    def _get(self, url: str, token: TokenSet) -> requests.Response:
        headers = {
            'Authorization': f'Bearer {token.access_token}',
            'Accept': 'application/json'
        }
        try:
            return self.http.get(url, headers=headers, params={'format': 'json'}, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamRequestFailed(f"Request to {url} failed: {e}") from e

    def _make_request(self, endpoint: str) -> Any:
        """
        Make an authenticated API request and return the decoded JSON body

        Args:
            endpoint: API endpoint (e.g., '/league/423.l.12345/settings')

        Raises:
            NotAuthenticated: no stored token
            RefreshFailed: the 401 refresh was rejected
            UpstreamAuthFailed: still 401 after refreshing
            UpstreamRequestFailed: any other non-2xx or network failure
            MalformedUpstreamResponse: body is not JSON
        """
        token = self.token_store.load()
        url = f"{self.base_url}{endpoint}"

        response = self._get(url, token)

        if response.status_code == 401:
            logger.info(f"Got 401 for {endpoint}, refreshing token and retrying once")
            token = self.oauth.refresh(token, self.client_id, self.client_secret, self.redirect_uri)
            self.token_store.save(token)

            response = self._get(url, token)
            if response.status_code == 401:
                logger.error(f"Still unauthorized for {endpoint} after token refresh")
                raise UpstreamAuthFailed(
                    "Yahoo rejected the refreshed token",
                    status=response.status_code,
                    body=response.text
                )

        if not 200 <= response.status_code < 300:
            raise UpstreamRequestFailed(
                f"Yahoo request to {endpoint} failed",
                status=response.status_code,
                body=response.text
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedUpstreamResponse(
                f"Yahoo returned a non-JSON body for {endpoint}",
                status=response.status_code,
                body=response.text
            ) from e

    def _record_settings(self, league_key: str, settings: Dict[str, Any]) -> None:
        """Write the fetched settings into the settings document, keeping other leagues"""
        if self.settings_store is None:
            return

        try:
            document = self.settings_store.load() or {}
        except (OSError, ValueError) as e:
            logger.warning(f"Discarding unreadable settings document {self.settings_store!r}: {e}")
            document = {}
        if not isinstance(document, dict):
            document = {}

        document[league_key] = {
            'fetched_at': self.clock().isoformat(),
            'settings': settings
        }
        self.settings_store.save(document)

    def get_settings(self, league_key: str) -> Dict[str, Any]:
        """
        Get league settings, from cache when this process has already fetched them

        Args:
            league_key: Yahoo league key (e.g., '423.l.12345')

        Returns:
            The settings object from Yahoo's league/settings resource
        """
        cached = self.cache.get(league_key)
        if cached is not None:
            return cached

        payload = self._make_request(f'/league/{league_key}/settings')
        settings = extract_settings(payload)

        self._record_settings(league_key, settings)
        self.cache[league_key] = settings
        logger.info(f"Cached settings for league {league_key}")
        return settings

    def invalidate(self, league_key: Optional[str] = None) -> None:
        """Drop one league from the cache, or all of them when no key is given"""
        if league_key is None:
            self.cache.clear()
        else:
            self.cache.pop(league_key, None)

    def prefetch(self, league_key: str) -> bool:
        """Warm the cache at startup; failures are logged rather than raised"""
        try:
            self.get_settings(league_key)
            logger.info(f"✅ Prefetched settings for league {league_key}")
            return True
        except Exception as e:
            logger.warning(f"⚠️ Could not prefetch settings for league {league_key}: {e}")
            return False
