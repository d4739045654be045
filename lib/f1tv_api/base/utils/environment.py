# f1tv_api/base/utils/environment.py
"""
Runtime configuration for f1tv-api.
Merges defaults, an optional config.json and F1TV_* environment variables.
"""

import os
import sys
import json
from typing import Dict, Any, Optional, Union
from pathlib import Path


# Environment variable -> (config key, converter)
ENV_OVERRIDES = {
    'F1TV_LANGUAGE': ('language', str),
    'F1TV_PLATFORM': ('platform', str),
    'F1TV_ASCENDON': ('ascendon', str),
    'F1TV_SERVER_PORT': ('server_port', int),
    'F1TV_LOG_LEVEL': ('log_level', str),
    'F1TV_LOG_DIR': ('log_dir', str),
    'F1TV_TIMEOUT': ('timeout', int),
    'F1TV_PROXY': ('proxy_url', str),
    'F1TV_PROXY_SCOPE': ('proxy_scope', str),
}

# Keys that must never be written to config.json
VOLATILE_KEYS = {'ascendon'}


class EnvironmentManager:
    """
    Central manager for runtime configuration.
    """

    _instance: Optional['EnvironmentManager'] = None

    def __new__(cls) -> 'EnvironmentManager':
        if cls._instance is None:
            cls._instance = super(EnvironmentManager, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self._initialized = True
        self._config: Dict[str, Any] = {}

        self._init_defaults()
        self._load_config()
        self._load_environment()

    def _init_defaults(self) -> None:
        """Initialize default configuration values"""
        self._config['language'] = 'ENG'
        self._config['platform'] = 'WEB_DASH'
        self._config['server_port'] = 7778
        self._config['log_level'] = 'INFO'
        self._config['timeout'] = 30
        self._config['debug_mode'] = False

        config_dir = os.environ.get('F1TV_CONFIG_DIR')
        if not config_dir:
            config_home = os.environ.get('XDG_CONFIG_HOME') or os.path.join(str(Path.home()), '.config')
            config_dir = os.path.join(config_home, 'f1tv-api')
        self._config['config_dir'] = config_dir

    @property
    def config_file(self) -> str:
        return os.path.join(self._config['config_dir'], 'config.json')

    def _load_config(self) -> None:
        """Load additional configuration from config.json"""
        if not os.path.exists(self.config_file):
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
            for key, value in file_config.items():
                if key in VOLATILE_KEYS:
                    continue
                if isinstance(value, (str, int, float, bool, type(None))):
                    self._config[key] = value
        except json.JSONDecodeError as json_error:
            print(f"Invalid JSON in config file: {json_error}", file=sys.stderr)
        except OSError as io_error:
            print(f"Failed to read config file: {io_error}", file=sys.stderr)

    def _load_environment(self) -> None:
        """Apply F1TV_* environment variables on top of file configuration"""
        for env_name, (key, converter) in ENV_OVERRIDES.items():
            raw_value = os.environ.get(env_name)
            if raw_value is None or raw_value == '':
                continue
            try:
                self._config[key] = converter(raw_value)
            except ValueError as convert_error:
                print(f"Invalid value for {env_name}, keeping default: {convert_error}", file=sys.stderr)

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        return self._config.get(key, default)

    def set_config(self, key: str, value: Union[str, int, float, bool, None], persist: bool = True) -> None:
        """Set configuration value, persisting it to config.json unless volatile"""
        self._config[key] = value

        if not persist or key in VOLATILE_KEYS:
            return

        try:
            os.makedirs(self._config['config_dir'], exist_ok=True)

            existing_config = {}
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    existing_config = json.load(f)

            existing_config[key] = value

            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(existing_config, f, indent=2, ensure_ascii=False)
        except OSError as save_error:
            print(f"Failed to save config: {save_error}", file=sys.stderr)
        except (TypeError, ValueError) as type_error:
            print(f"Config contains non-serializable data: {type_error}", file=sys.stderr)

    def debug_info(self) -> Dict[str, Any]:
        """Runtime and configuration summary without tokens or paths"""
        info: Dict[str, Any] = {
            'config_file_present': os.path.exists(self.config_file),
            'python_version': sys.version,
            'os': sys.platform,
        }

        safe_config: Dict[str, Any] = {}
        for key, value in self._config.items():
            if key in VOLATILE_KEYS or key.endswith('_dir'):
                continue
            if isinstance(value, (str, int, float, bool, type(None))):
                safe_config[key] = value
            else:
                safe_config[key] = str(type(value))

        info['config_summary'] = safe_config

        return info

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next access re-reads the environment"""
        global _env_manager
        cls._instance = None
        _env_manager = None


# Global singleton instance
_env_manager: Optional[EnvironmentManager] = None


def get_environment_manager() -> EnvironmentManager:
    """Get the global environment manager instance"""
    global _env_manager
    if _env_manager is None:
        _env_manager = EnvironmentManager()
    return _env_manager
