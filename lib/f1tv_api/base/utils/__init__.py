# f1tv_api/base/utils/__init__.py

from .logger import logger, BaseLogger, mask_token
from .environment import EnvironmentManager, get_environment_manager
from .signals import Signal, ReadinessSignal

__all__ = [
    'logger',
    'BaseLogger',
    'mask_token',
    'EnvironmentManager',
    'get_environment_manager',
    'Signal',
    'ReadinessSignal'
]
