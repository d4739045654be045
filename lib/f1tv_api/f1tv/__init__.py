# f1tv_api/f1tv/__init__.py
"""
F1TV client module
"""

from .client import F1TVClient
from .session import F1TVSession, SessionEvents
from .constants import F1TVConfig, F1TVDefaults, Language, Platform
from .exceptions import F1TVError, InvalidCredential, PreconditionNotMet, UpstreamError, EmptyResult
from .token_utils import AscendonTokenParser, verify_subscription_token

__all__ = [
    "F1TVClient",
    "F1TVSession",
    "SessionEvents",
    "F1TVConfig",
    "F1TVDefaults",
    "Language",
    "Platform",
    "F1TVError",
    "InvalidCredential",
    "PreconditionNotMet",
    "UpstreamError",
    "EmptyResult",
    "AscendonTokenParser",
    "verify_subscription_token",
]
