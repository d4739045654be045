# f1tv_api/f1tv/token_utils.py
"""
Ascendon token decoding and verification

Decoding only checks structure (three base64url segments, JSON object payload)
and never contacts the network. Verification fetches the issuer's signing key
from its JWKS endpoint and checks signature and expiry.
"""

from typing import Any, Optional

import jwt

from ..base.utils.logger import logger
from .constants import F1TVDefaults
from .exceptions import InvalidCredential
from .models import DecodedAscendonToken

# Structural decode only: no signature, no registered-claim checks
_UNVERIFIED_OPTIONS = {
    'verify_signature': False,
    'verify_exp': False,
    'verify_nbf': False,
    'verify_iat': False,
    'verify_aud': False,
    'verify_iss': False,
}

_VERIFY_ALGORITHMS = ['RS256', 'RS384', 'RS512', 'ES256', 'ES384', 'ES512']


class TokenValidator:
    """Token validation utilities"""

    @staticmethod
    def is_jwt_token(token: Any) -> bool:
        """Check if value looks like a JWT (three segments, JSON header)"""
        if not isinstance(token, str):
            return False
        parts = token.split('.')
        return len(parts) == 3 and parts[0].startswith('eyJ')


class AscendonTokenParser:
    """Ascendon token decoding utilities"""

    @staticmethod
    def decode(token: Any) -> DecodedAscendonToken:
        """
        Decode ascendon token claims without signature verification

        Args:
            token: JWT string

        Returns:
            DecodedAscendonToken with claims copied unmodified

        Raises:
            InvalidCredential: token is not a structurally valid JWT
        """
        if not TokenValidator.is_jwt_token(token):
            raise InvalidCredential('ascendon token provided is not a valid JWT token!')

        try:
            claims = jwt.decode(token, options=_UNVERIFIED_OPTIONS)
        except jwt.InvalidTokenError as e:
            raise InvalidCredential(f'Failed to decode ascendon token: {e}') from e

        logger.debug(f"Ascendon token decoded - claims: {sorted(claims.keys())}")
        return DecodedAscendonToken.from_claims(claims)

    @staticmethod
    def get_unverified_kid(token: str) -> Optional[str]:
        """Extract the kid from the JWT header without verification"""
        try:
            header = jwt.get_unverified_header(token)
            return header.get('kid')
        except jwt.InvalidTokenError:
            return None


def verify_subscription_token(token: Any, jwks_uri: str = F1TVDefaults.JWKS_URI,
                              jwks_client: Optional[jwt.PyJWKClient] = None) -> DecodedAscendonToken:
    """
    Verify an ascendon token against the issuer's published signing keys

    Args:
        token: JWT string
        jwks_uri: JWKS endpoint used when no client is supplied
        jwks_client: Optional pre-built (or fake) PyJWKClient

    Returns:
        DecodedAscendonToken

    Raises:
        InvalidCredential: malformed token, unknown key, bad signature or expired
    """
    if not TokenValidator.is_jwt_token(token):
        raise InvalidCredential('subscriptionToken provided is not a valid JWT token!')

    kid = AscendonTokenParser.get_unverified_kid(token)
    if not kid:
        raise InvalidCredential('KID not available in subscriptionToken header!')

    client = jwks_client or jwt.PyJWKClient(jwks_uri)

    try:
        signing_key = client.get_signing_key(kid)
    except jwt.PyJWKClientError as e:
        raise InvalidCredential(f'Unable to get signing key {kid}: {e}') from e

    try:
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=_VERIFY_ALGORITHMS,
            options={'verify_aud': False},
        )
    except jwt.InvalidTokenError as e:
        raise InvalidCredential(f'Ascendon token verification failed: {e}') from e

    logger.info(f"Ascendon token verified with key {kid}")
    return DecodedAscendonToken.from_claims(claims)
