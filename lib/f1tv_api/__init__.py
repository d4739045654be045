# f1tv_api/__init__.py
"""
Unofficial F1TV API client
"""

from .version import __version__
from .base.network import HTTPManager, HTTPManagerFactory
from .base.models import RequestConfig, ProxyConfig, SessionStatus
from .f1tv import (
    F1TVClient,
    F1TVSession,
    F1TVConfig,
    F1TVDefaults,
    Language,
    Platform,
    F1TVError,
    InvalidCredential,
    PreconditionNotMet,
    UpstreamError,
    EmptyResult,
    verify_subscription_token,
)
from .f1tv.models import (
    APIResult,
    ContainerSelection,
    ContentPlayResult,
    ContentVideoContainer,
    DecodedAscendonToken,
    EntitlementResult,
    LiveNowResult,
    LocationResult,
    Picture,
    RefreshReport,
    SearchVodParams,
    SearchVodResult,
    UserLocation,
)

__all__ = [
    '__version__',
    'HTTPManager',
    'HTTPManagerFactory',
    'RequestConfig',
    'ProxyConfig',
    'SessionStatus',
    'F1TVClient',
    'F1TVSession',
    'F1TVConfig',
    'F1TVDefaults',
    'Language',
    'Platform',
    'F1TVError',
    'InvalidCredential',
    'PreconditionNotMet',
    'UpstreamError',
    'EmptyResult',
    'verify_subscription_token',
    'APIResult',
    'ContainerSelection',
    'ContentPlayResult',
    'ContentVideoContainer',
    'DecodedAscendonToken',
    'EntitlementResult',
    'LiveNowResult',
    'LocationResult',
    'Picture',
    'RefreshReport',
    'SearchVodParams',
    'SearchVodResult',
    'UserLocation',
]
