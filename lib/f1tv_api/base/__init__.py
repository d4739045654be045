# f1tv_api/base/__init__.py
"""
Transport, logging, configuration and signalling shared by the F1TV client.
"""

from .network import HTTPManager, HTTPManagerFactory
from .models import RequestConfig, ProxyConfig, SessionStatus
from .utils import logger, Signal, ReadinessSignal

__all__ = [
    "HTTPManager",
    "HTTPManagerFactory",
    "RequestConfig",
    "ProxyConfig",
    "SessionStatus",
    "logger",
    "Signal",
    "ReadinessSignal",
]
