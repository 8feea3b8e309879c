"""
Yahoo Fantasy Sports Integration Module

Token persistence and cached league settings for the Yahoo Fantasy Sports API v2.
"""

from .yahoo_client import YahooFantasyClient
from .models import TokenSet
from .storage import DocumentStore, JsonFileStore, TokenStore

__all__ = [
    'YahooFantasyClient',
    'TokenSet',
    'DocumentStore',
    'JsonFileStore',
    'TokenStore'
]

__version__ = '1.0.0'
