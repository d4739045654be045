# f1tv_api/base/models/__init__.py
from .auth import AuthState, TokenInfo, SessionStatus
from .proxy_models import ProxyType, ProxyScope, ProxyAuth, ProxyConfig, RequestConfig

__all__ = [
    'AuthState',
    'TokenInfo',
    'SessionStatus',
    'ProxyType',
    'ProxyScope',
    'ProxyAuth',
    'ProxyConfig',
    'RequestConfig'
]
