# f1tv_api/f1tv/constants.py
"""
F1TV constants and default configuration
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote, urlencode

from ..version import __title__, __version__, __repository__


class Language(Enum):
    """Catalog languages accepted in request paths"""
    ENGLISH = 'ENG'
    DUTCH = 'NLD'
    PORTUGUESE = 'POR'
    SPANISH = 'SPA'
    GERMAN = 'DEU'
    FRENCH = 'FRA'


class Platform(Enum):
    """Device/stream-format combinations accepted in request paths"""
    BIG_SCREEN_DASH = 'BIG_SCREEN_DASH'
    BIG_SCREEN_HLS = 'BIG_SCREEN_HLS'
    MOBILE_DASH = 'MOBILE_DASH'
    MOBILE_HLS = 'MOBILE_HLS'
    TABLET_DASH = 'TABLET_DASH'
    TABLET_HLS = 'TABLET_HLS'
    WEB_DASH = 'WEB_DASH'
    WEB_HLS = 'WEB_HLS'


class LoginStatus:
    ANONYMOUS = 'A'
    REGISTERED = 'R'


class F1TVDefaults:
    """Default values for the F1TV client"""

    BASE_URL = 'https://f1tv.formula1.com'
    IMAGE_RESIZER_URL = f'{BASE_URL}/image-resizer/image'
    CONFIG_URL = f'{BASE_URL}/config'
    JWKS_URI = 'https://api.formula1.com/static/jwks.json'

    # API versions per endpoint
    API_VERSIONS = {
        'entitlement': '2.0',
        'location': '1.0',
        'content_play': '2.0',
        'content_video': '4.0',
        'live_now': '1.0',
        'search_vod': '2.0',
    }

    # Fixed command path segments
    COMMANDS = {
        'entitlement': 'ALL/USER/ENTITLEMENT',
        'location': 'ALL/USER/LOCATION',
        'content_play': 'ALL/CONTENT/PLAY',
        'content_video': 'ALL/CONTENT/VIDEO',
        'live_now': 'ALL/EVENTS/LIVENOW',
        'search_vod': 'ALL/PAGE/SEARCH/VOD',
    }

    # Auth header names
    ASCENDON_HEADER = 'ascendontoken'
    ENTITLEMENT_HEADER = 'entitlementtoken'

    # Location query parameter seeded from the ascendon token
    HOME_COUNTRY_PARAM = 'homeCountry'

    # Client identification
    USER_AGENT = f'{__title__}/{__version__} ({__repository__})'

    DEFAULT_LANGUAGE = Language.ENGLISH
    DEFAULT_PLATFORM = Platform.WEB_DASH

    # HTTP settings
    DEFAULT_TIMEOUT = 30


def _enum_value(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


class F1TVConfig:
    """Configuration class for the F1TV client"""

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """Initialize with optional configuration overrides"""
        config = config_dict or {}

        self.base_url = config.get('base_url', F1TVDefaults.BASE_URL).rstrip('/')
        self.image_resizer_url = config.get('image_resizer_url', F1TVDefaults.IMAGE_RESIZER_URL).rstrip('/')
        self.config_url = config.get('config_url', f'{self.base_url}/config')
        self.jwks_uri = config.get('jwks_uri', F1TVDefaults.JWKS_URI)

        self.api_versions = dict(F1TVDefaults.API_VERSIONS)
        self.api_versions.update(config.get('api_versions', {}))

        self.language = Language(_enum_value(config.get('language', F1TVDefaults.DEFAULT_LANGUAGE)))
        self.platform = Platform(_enum_value(config.get('platform', F1TVDefaults.DEFAULT_PLATFORM)))

        # HTTP settings
        self.user_agent = config.get('user_agent', F1TVDefaults.USER_AGENT)
        self.timeout = config.get('timeout', F1TVDefaults.DEFAULT_TIMEOUT)

    @classmethod
    def from_environment(cls, env_manager, overrides: Optional[Dict[str, Any]] = None) -> 'F1TVConfig':
        """Build configuration from the environment manager plus explicit overrides"""
        config = {
            'language': env_manager.get_config('language', F1TVDefaults.DEFAULT_LANGUAGE.value),
            'platform': env_manager.get_config('platform', F1TVDefaults.DEFAULT_PLATFORM.value),
            'timeout': env_manager.get_config('timeout', F1TVDefaults.DEFAULT_TIMEOUT),
        }
        config.update(overrides or {})
        return cls(config)

    def get_base_headers(self) -> Dict[str, str]:
        """Get base HTTP headers sent with every request"""
        return {
            'User-Agent': self.user_agent,
            'Accept': 'application/json',
        }

    def get_auth_headers(self, ascendon: Optional[str] = None,
                         entitlement: Optional[str] = None) -> Dict[str, str]:
        """Get auth headers for the tokens that are set"""
        headers = {}
        if ascendon:
            headers[F1TVDefaults.ASCENDON_HEADER] = ascendon
        if entitlement:
            headers[F1TVDefaults.ENTITLEMENT_HEADER] = entitlement
        return headers

    def build_api_url(self, endpoint: str, login_status: str, language: Any, platform: Any,
                      *extra: Any, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Build a deterministic API URL

        Format: {base}/{version}/{A|R}/{language}/{platform}/{command}[/{extra}]*[?{query}]
        """
        segments = [
            self.base_url,
            self.api_versions[endpoint],
            login_status,
            _enum_value(language),
            _enum_value(platform),
            F1TVDefaults.COMMANDS[endpoint],
        ]
        segments.extend(quote(str(segment), safe='') for segment in extra)

        url = '/'.join(segments)
        query = encode_query(params)
        if query:
            url += '?' + query
        return url

    def build_picture_url(self, slug: str, params: Mapping[str, Any]) -> str:
        """Build image-resizer URL"""
        url = f"{self.image_resizer_url}/{quote(slug.lstrip('/'), safe='/:')}"
        query = encode_query(params)
        if query:
            url += '?' + query
        return url


def encode_query(params: Optional[Mapping[str, Any]]) -> str:
    """Encode query parameters, dropping unset values"""
    if not params:
        return ''
    filtered = [(key, _enum_value(value)) for key, value in params.items() if value is not None]
    return urlencode(filtered)
