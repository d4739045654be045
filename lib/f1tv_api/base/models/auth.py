# f1tv_api/base/models/auth.py
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from enum import Enum
import time


class AuthState(Enum):
    """Standardized authentication states"""
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    ENTITLED = "entitled"
    EXPIRED = "expired"


@dataclass
class TokenInfo:
    """Standardized token information"""
    scope: str
    has_token: bool
    is_valid: bool
    expires_at: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scope': self.scope,
            'has_token': self.has_token,
            'is_valid': self.is_valid,
            'expires_at': self.expires_at
        }


@dataclass
class SessionStatus:
    """Snapshot of a session's credential and dependent state"""
    login_status: str
    auth_state: AuthState
    language: str
    platform: str

    # Readiness
    is_location_ready: bool = False
    is_ready: bool = False

    # Tokens
    token_scopes: Dict[str, TokenInfo] = field(default_factory=dict)

    # Location
    entitlement_tier: Optional[str] = None
    group_id: Optional[int] = None
    country: Optional[str] = None

    # Metadata
    subscriber_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response format"""
        result = {
            'login_status': self.login_status,
            'auth_state': self.auth_state.value,
            'language': self.language,
            'platform': self.platform,
            'is_location_ready': self.is_location_ready,
            'is_ready': self.is_ready,
            'token_scopes': {
                scope: token.to_dict()
                for scope, token in self.token_scopes.items()
            },
            'location': {
                'entitlement': self.entitlement_tier,
                'group_id': self.group_id,
                'country': self.country
            },
            'subscriber_id': self.subscriber_id,
            'timestamp': self.timestamp
        }

        descriptions = {
            AuthState.ANONYMOUS: "No ascendon token set",
            AuthState.AUTHENTICATED: "Ascendon token set, entitlement pending",
            AuthState.ENTITLED: "Ascendon and entitlement tokens set",
            AuthState.EXPIRED: "Ascendon token expired"
        }
        result['auth_state_description'] = descriptions.get(self.auth_state, "Unknown state")

        return result
