"""
Yahoo Fantasy Draft Assistant - Main Flask Application
"""

import logging
import sys
import threading
from dataclasses import dataclass
from typing import Any, Optional

import requests
from flask import Flask, jsonify, redirect, url_for

from auth import YahooAuth
from errors import ConfigError
from routes.draft_routes import draft_bp
from services.fantasypros import FantasyProsRankings
from services.insights import InsightGenerator
from yahoo_integration.config import Config
from yahoo_integration.database import YahooDatabase, TOKEN_DOCUMENT, SETTINGS_DOCUMENT
from yahoo_integration.routes import yahoo_bp
from yahoo_integration.storage import DocumentStore, JsonFileStore, TokenStore
from yahoo_integration.yahoo_client import YahooFantasyClient

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Collaborators shared by the route handlers"""
    config: Config
    token_store: TokenStore
    oauth: YahooAuth
    yahoo_client: YahooFantasyClient
    rankings: FantasyProsRankings
    insights: InsightGenerator


def build_stores(config: Config):
    """Token and settings stores: SQLAlchemy when a database URL is set, JSON files otherwise"""
    if config.database_url:
        database = YahooDatabase(config.database_url)
        return database.store(TOKEN_DOCUMENT), database.store(SETTINGS_DOCUMENT)
    return JsonFileStore(config.token_file), JsonFileStore(config.settings_file)


def build_services(config: Config, http: Optional[requests.Session] = None,
                   token_store: Optional[TokenStore] = None,
                   settings_store: Optional[DocumentStore] = None,
                   oauth: Any = None, yahoo_client: Any = None,
                   rankings: Any = None, insights: Any = None) -> Services:
    """Wire up the default collaborators; anything passed in is used as-is"""
    http = http or requests.Session()

    if token_store is None or settings_store is None:
        default_token_doc, default_settings_doc = build_stores(config)
        if token_store is None:
            token_store = TokenStore(default_token_doc)
        if settings_store is None:
            settings_store = default_settings_doc

    oauth = oauth or YahooAuth(http=http, timeout=config.http_timeout)
    yahoo_client = yahoo_client or YahooFantasyClient(
        token_store,
        oauth,
        config.client_id,
        config.client_secret,
        config.redirect_uri,
        settings_store=settings_store,
        http=http,
        timeout=config.http_timeout
    )
    rankings = rankings or FantasyProsRankings(timeout=config.http_timeout)
    insights = insights or InsightGenerator.from_api_key(config.openai_api_key, model=config.openai_model)

    return Services(
        config=config,
        token_store=token_store,
        oauth=oauth,
        yahoo_client=yahoo_client,
        rankings=rankings,
        insights=insights
    )


def create_app(config: Optional[Config] = None, **overrides) -> Flask:
    """
    Create the Flask application

    Args:
        config: runtime settings; read from the environment when omitted
        overrides: collaborators to use instead of the defaults (see build_services)
    """
    if config is None:
        config = Config.from_env()

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.extensions['draft_assistant'] = build_services(config, **overrides)

    # Register blueprints
    app.register_blueprint(yahoo_bp)
    app.register_blueprint(draft_bp)

    @app.route('/')
    def index():
        """Start at the Yahoo OAuth flow"""
        return redirect(url_for('yahoo.yahoo_login'))

    @app.route('/healthz')
    def healthz():
        return jsonify({'status': 'ok'})

    return app


def start_prefetch(app: Flask) -> Optional[threading.Thread]:
    """Fetch the configured league's settings once, off the request path"""
    services = app.extensions['draft_assistant']
    league_key = services.config.prefetch_league_key
    if not league_key:
        return None

    thread = threading.Thread(
        target=services.yahoo_client.prefetch,
        args=(league_key,),
        name='league-settings-prefetch',
        daemon=True
    )
    thread.start()
    return thread


def main():
    try:
        config = Config.from_env()
    except ConfigError as e:
        logger.error(f"ERROR: {e}")
        sys.exit(1)

    app = create_app(config)
    start_prefetch(app)

    logger.info(f"🚀 Server running on http://{config.host}:{config.port}")
    logger.info("▶️ Visit /auth to begin the Yahoo OAuth flow")
    app.run(host=config.host, port=config.port, debug=config.debug, use_reloader=False)


if __name__ == '__main__':
    main()
