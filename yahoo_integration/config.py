"""
Yahoo Fantasy API Configuration
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from errors import ConfigError

load_dotenv()

# Yahoo OAuth 2.0 Endpoints
YAHOO_AUTH_URL = 'https://api.login.yahoo.com/oauth2/request_auth'
YAHOO_TOKEN_URL = 'https://api.login.yahoo.com/oauth2/get_token'
YAHOO_API_BASE_URL = 'https://fantasysports.yahooapis.com/fantasy/v2'

# Fantasy Sports read-only scope
YAHOO_SCOPE = 'fspt-r'

# Static state sent when per-request state verification is turned off
LEGACY_OAUTH_STATE = 'secureRandom'

# Other upstreams
FANTASYPROS_PPR_CSV_URL = 'https://www.fantasypros.com/nfl/rankings/consensus-cheatsheets.php?export=xls'
DEFAULT_OPENAI_MODEL = 'gpt-3.5-turbo'

DEFAULT_PORT = 3000
DEFAULT_HTTP_TIMEOUT = 30.0


def _first(env: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class Config:
    """Runtime settings for the assistant, read once at startup"""
    client_id: str
    client_secret: str
    redirect_uri: str
    port: int = DEFAULT_PORT
    host: str = '0.0.0.0'
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    secret_key: str = 'dev-key-change-in-production'
    token_file: str = 'tokens.json'
    settings_file: str = 'league_settings.json'
    database_url: Optional[str] = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    prefetch_league_key: Optional[str] = None
    verify_state: bool = True
    debug: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'Config':
        """
        Build configuration from environment variables

        Raises:
            ConfigError: if a Yahoo credential is missing or a value does not parse
        """
        if env is None:
            env = os.environ

        client_id = _first(env, 'YAHOO_CLIENT_ID', 'CLIENT_ID')
        client_secret = _first(env, 'YAHOO_CLIENT_SECRET', 'CLIENT_SECRET')
        redirect_uri = _first(env, 'YAHOO_REDIRECT_URI', 'REDIRECT_URI')

        missing = [
            name for name, value in (
                ('YAHOO_CLIENT_ID', client_id),
                ('YAHOO_CLIENT_SECRET', client_secret),
                ('YAHOO_REDIRECT_URI', redirect_uri),
            ) if not value
        ]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

        try:
            port = int(env.get('PORT') or DEFAULT_PORT)
            http_timeout = float(env.get('HTTP_TIMEOUT') or DEFAULT_HTTP_TIMEOUT)
        except ValueError as e:
            raise ConfigError(f"Invalid numeric configuration: {e}") from e

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            port=port,
            host=env.get('HOST') or '0.0.0.0',
            openai_api_key=env.get('OPENAI_API_KEY') or None,
            openai_model=env.get('OPENAI_MODEL') or DEFAULT_OPENAI_MODEL,
            secret_key=env.get('FLASK_SECRET_KEY') or 'dev-key-change-in-production',
            token_file=env.get('TOKEN_FILE') or 'tokens.json',
            settings_file=env.get('SETTINGS_FILE') or 'league_settings.json',
            database_url=env.get('YAHOO_DATABASE_URL') or None,
            http_timeout=http_timeout,
            prefetch_league_key=env.get('PREFETCH_LEAGUE_KEY') or None,
            verify_state=_flag(env.get('OAUTH_VERIFY_STATE'), True),
            debug=_flag(env.get('FLASK_DEBUG'), False),
        )
