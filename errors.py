"""
Error types for the Yahoo Fantasy Draft Assistant

Routes catch these at the HTTP boundary and turn them into JSON error responses.
"""

from typing import Optional


class DraftAssistantError(Exception):
    """Base class for all assistant errors"""


class ConfigError(DraftAssistantError):
    """Required configuration is missing or invalid"""


class NotAuthenticated(DraftAssistantError):
    """No usable Yahoo token has been stored yet"""


class UpstreamError(DraftAssistantError):
    """An upstream HTTP call failed; keeps status and body for diagnostics"""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self):
        message = super().__str__()
        if self.status is not None:
            message = f"{message} (status {self.status})"
        return message


class TokenExchangeFailed(UpstreamError):
    pass


class RefreshFailed(UpstreamError):
    pass


class UpstreamAuthFailed(UpstreamError):
    """Yahoo still answered 401 after a token refresh"""


class UpstreamRequestFailed(UpstreamError):
    pass


class MalformedUpstreamResponse(UpstreamError):
    pass


class RankingFetchFailed(UpstreamError):
    pass


class InsightGenerationFailed(DraftAssistantError):
    pass


class InvalidInput(DraftAssistantError, TypeError):
    pass
