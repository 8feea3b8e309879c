"""
Yahoo Fantasy Integration Routes

Flask blueprint for the Yahoo OAuth flow and league settings endpoint
"""

import secrets

from flask import Blueprint, current_app, jsonify, redirect, request, session

from errors import NotAuthenticated
from .config import YAHOO_SCOPE, LEGACY_OAUTH_STATE

# Create blueprint
yahoo_bp = Blueprint('yahoo', __name__)


def _services():
    return current_app.extensions['draft_assistant']


@yahoo_bp.route('/auth')
def yahoo_login():
    """
    Start Yahoo OAuth 2.0 login flow

    Redirects the user to the Yahoo authorization page
    """
    services = _services()
    config = services.config

    if config.verify_state:
        state = secrets.token_urlsafe(16)
        # Store state in session so the callback can check it
        session['yahoo_oauth_state'] = state
    else:
        state = LEGACY_OAUTH_STATE

    authorization_url = services.oauth.build_authorization_url(
        config.client_id, config.redirect_uri, YAHOO_SCOPE, state
    )
    return redirect(authorization_url)


@yahoo_bp.route('/callback')
def yahoo_callback():
    """
    Handle Yahoo OAuth callback

    Exchanges the authorization code for tokens and persists them
    """
    services = _services()
    config = services.config
    logger = current_app.logger

    logger.info(f"💬 /callback invoked with args: {sorted(request.args.keys())}")

    code = request.args.get('code')
    if not code:
        logger.error("⚠️ No authorization code provided")
        return 'Missing code', 400

    if config.verify_state:
        expected_state = session.pop('yahoo_oauth_state', None)
        state = request.args.get('state')
        if not expected_state or state != expected_state:
            logger.error("❌ OAuth state mismatch")
            return 'Invalid OAuth state', 400

    try:
        token_set = services.oauth.exchange_code(
            code, config.client_id, config.client_secret, config.redirect_uri
        )
        services.token_store.save(token_set)
    except Exception as e:
        body = getattr(e, 'body', None)
        logger.error(f"Token exchange error: {e}" + (f" - {body}" if body else ''))
        return 'Token exchange failed. See server logs.', 500

    logger.info(f"✅ Tokens received for Yahoo user {token_set.xoauth_yahoo_guid or 'unknown'}")
    return '✅ OAuth successful! Tokens saved.'


@yahoo_bp.route('/league/<league_key>/settings')
def league_settings(league_key):
    """Get the settings document for a Yahoo league"""
    try:
        settings = _services().yahoo_client.get_settings(league_key)
        return jsonify(settings)
    except NotAuthenticated as e:
        current_app.logger.error(f"Settings requested for {league_key} before authenticating: {e}")
        return jsonify({'success': False, 'error': str(e)}), 500
    except Exception as e:
        current_app.logger.error(f"Error fetching settings for league {league_key}: {e}")
        return jsonify({'success': False, 'error': str(e)}), 500
