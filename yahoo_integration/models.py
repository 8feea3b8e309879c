"""
Data models for Yahoo OAuth credentials
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional


@dataclass
class TokenSet:
    """Yahoo OAuth 2.0 access/refresh token pair"""
    access_token: str
    refresh_token: str
    token_type: str = 'bearer'
    expires_in: int = 3600

    # Yahoo returns the user's GUID alongside the tokens
    xoauth_yahoo_guid: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TokenSet':
        """
        Build a TokenSet from a token endpoint response or stored document

        Raises:
            ValueError: if the document is not a usable token set
        """
        if not isinstance(data, dict):
            raise ValueError(f"Token document must be an object, got {type(data).__name__}")

        access_token = data.get('access_token')
        refresh_token = data.get('refresh_token')
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("Token document has no access_token")
        if not isinstance(refresh_token, str) or not refresh_token:
            raise ValueError("Token document has no refresh_token")

        try:
            expires_in = int(data.get('expires_in', 3600))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid expires_in: {data.get('expires_in')!r}") from e

        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type=data.get('token_type') or 'bearer',
            expires_in=expires_in,
            xoauth_yahoo_guid=data.get('xoauth_yahoo_guid'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out the GUID when Yahoo did not send one"""
        data = asdict(self)
        if data['xoauth_yahoo_guid'] is None:
            del data['xoauth_yahoo_guid']
        return data
