# f1tv_api/base/network/__init__.py
from .http_manager import HTTPManager, HTTPManagerFactory

__all__ = ["HTTPManager", "HTTPManagerFactory"]
