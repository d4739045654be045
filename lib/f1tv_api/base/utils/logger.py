# f1tv_api/base/utils/logger.py
"""
Centralized logging module for f1tv-api.
"""

import sys
import logging

from .environment import get_environment_manager
from ...version import __title__, __version__

_env_manager_instance = get_environment_manager()


class BaseLogger:
    """Base logger interface that all logger implementations must follow"""

    def __init__(self, logger_name: str, logger_version: str):
        self.logger_name = logger_name
        self.logger_version = logger_version
        self.prefix = f"[{logger_name} v{logger_version}]"

    def debug(self, message: str) -> None:
        """Log debug message"""
        raise NotImplementedError

    def info(self, message: str) -> None:
        """Log info message"""
        raise NotImplementedError

    def warning(self, message: str) -> None:
        """Log warning message"""
        raise NotImplementedError

    def error(self, message: str, exc_info: bool = False) -> None:
        """Log error message"""
        raise NotImplementedError

    def critical(self, message: str) -> None:
        """Log critical message"""
        raise NotImplementedError

    def set_level(self, level: str) -> None:
        """Change the minimum level"""
        raise NotImplementedError

    # Specialized methods
    def log_token_event(self, token: str, event: str, details: str = "") -> None:
        """Log credential/entitlement token event"""
        log_message = f"TOKEN [{token}] {event}"
        if details:
            log_message += f" - {details}"
        self.info(log_message)

    def log_refresh_event(self, resource: str, event: str, details: str = "") -> None:
        """Log dependent-state refresh event"""
        log_message = f"REFRESH [{resource}] {event}"
        if details:
            log_message += f" - {details}"
        self.debug(log_message)

    def log_session_event(self, event: str, details: str = "") -> None:
        """Log session lifecycle event"""
        log_message = f"SESSION {event}"
        if details:
            log_message += f" - {details}"
        self.debug(log_message)


class StandardLogger(BaseLogger):
    """Standard Python logging"""

    def __init__(self, logger_name: str, logger_version: str, level: str = 'INFO'):
        super().__init__(logger_name, logger_version)

        self._logger = logging.getLogger(logger_name)

        # Only add handlers if none exist
        if not self._logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(
                f'%(asctime)s {self.prefix} %(levelname)s: %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(formatter)
            self._logger.addHandler(console_handler)

            log_dir = _env_manager_instance.get_config('log_dir')
            if log_dir:
                import os
                log_file = os.path.join(str(log_dir), 'f1tv-api.log')
                try:
                    file_handler = logging.FileHandler(log_file, encoding='utf-8')
                    file_handler.setFormatter(formatter)
                    self._logger.addHandler(file_handler)
                except (OSError, PermissionError) as file_handler_error:
                    print(f"Failed to create file handler: {file_handler_error}", file=sys.stderr)

        self.set_level(level)

    def set_level(self, level: str) -> None:
        self._logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str, exc_info: bool = False) -> None:
        if exc_info:
            self._logger.error(message, exc_info=True)
        else:
            self._logger.error(message)

    def critical(self, message: str) -> None:
        self._logger.critical(message)


def create_logger() -> BaseLogger:
    """Create logger instance from environment configuration"""
    level = _env_manager_instance.get_config('log_level', 'INFO')
    return StandardLogger(__title__, __version__, level)


def mask_token(token: str, visible: int = 12) -> str:
    """Shorten a token for log output"""
    if not token:
        return '<none>'
    if len(token) <= visible:
        return token
    return f"{token[:visible]}..."


# Global logger instance
logger: BaseLogger = create_logger()

__all__ = ['BaseLogger', 'StandardLogger', 'logger', 'mask_token']
