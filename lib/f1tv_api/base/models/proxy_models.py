# f1tv_api/base/models/proxy_models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple
from urllib.parse import quote, urlparse

# Request kinds issued by the client
OPERATIONS = ("api", "auth", "image")


class ProxyType(Enum):
    """Proxy schemes understood by requests"""

    HTTP = "http"
    HTTPS = "https"
    SOCKS4 = "socks4"
    SOCKS5 = "socks5"
    SOCKS5H = "socks5h"


@dataclass
class ProxyScope:
    """
    Which request kinds are routed through the proxy
    """

    api_calls: bool = True  # location, config, content and search requests
    authentication: bool = True  # entitlement and signing-key requests
    images: bool = True  # image resizer downloads

    def should_use_proxy_for(self, operation: str) -> bool:
        if operation == "auth":
            return self.authentication
        if operation == "image":
            return self.images
        return self.api_calls

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "ProxyScope":
        """
        Build scope from operation names, e.g. ["api", "image"]

        Raises:
            ValueError: unknown operation name
        """
        selected = {name.strip().lower() for name in names if name and name.strip()}
        unknown = selected.difference(OPERATIONS)
        if unknown:
            raise ValueError(f"Unknown proxy scope operation(s): {', '.join(sorted(unknown))}")
        return cls(
            api_calls="api" in selected,
            authentication="auth" in selected,
            images="image" in selected,
        )


@dataclass
class ProxyAuth:
    username: str
    password: str

    def to_auth_string(self) -> str:
        # Credentials may contain ':' or '@'
        return f"{quote(self.username, safe='')}:{quote(self.password, safe='')}"


@dataclass
class ProxyConfig:
    """
    Proxy endpoint plus the request kinds it applies to
    """

    host: str
    port: int
    proxy_type: ProxyType = ProxyType.HTTP
    auth: Optional[ProxyAuth] = None
    scope: ProxyScope = field(default_factory=ProxyScope)

    @property
    def url(self) -> str:
        auth_part = f"{self.auth.to_auth_string()}@" if self.auth else ""
        return f"{self.proxy_type.value}://{auth_part}{self.host}:{self.port}"

    def to_proxy_dict(self) -> Dict[str, str]:
        """Proxy mapping in the form requests expects"""
        return {"http": self.url, "https": self.url}

    @classmethod
    def from_url(cls, proxy_url: str, scope: Optional[ProxyScope] = None) -> "ProxyConfig":
        """
        Parse "scheme://[user:pass@]host:port"

        Raises:
            ValueError: missing host/port, port out of range or unsupported scheme
        """
        parsed = urlparse(proxy_url)

        try:
            port = parsed.port
        except ValueError:
            raise ValueError(f"Invalid proxy port in {proxy_url!r}")

        if not parsed.hostname or not port:
            raise ValueError(f"Invalid proxy URL: {proxy_url!r}")

        try:
            proxy_type = ProxyType((parsed.scheme or "http").lower())
        except ValueError:
            raise ValueError(f"Unsupported proxy scheme: {parsed.scheme}")

        auth = None
        if parsed.username:
            auth = ProxyAuth(username=parsed.username, password=parsed.password or "")

        return cls(
            host=parsed.hostname,
            port=port,
            proxy_type=proxy_type,
            auth=auth,
            scope=scope or ProxyScope(),
        )


@dataclass
class RequestConfig:
    """
    Settings applied to every request an HTTPManager sends
    """

    proxy_config: Optional[ProxyConfig] = None

    timeout: int = 30
    verify_ssl: bool = True

    # 0 disables automatic retries
    max_retries: int = 0
    retry_delay: float = 1.0
    retry_statuses: Tuple[int, ...] = (429, 500, 502, 503, 504)

    default_headers: Dict[str, str] = field(default_factory=dict)
    user_agent: str = ""

    def get_request_kwargs(self, operation: str = "api") -> Dict[str, Any]:
        """
        Keyword arguments for requests.Session.request

        Args:
            operation: Request kind (api, auth, image), selects proxy use
        """
        headers = dict(self.default_headers)
        if self.user_agent:
            headers.setdefault("User-Agent", self.user_agent)

        kwargs: Dict[str, Any] = {
            "timeout": self.timeout,
            "verify": self.verify_ssl,
            "headers": headers,
        }

        if self.proxy_config and self.proxy_config.scope.should_use_proxy_for(operation):
            kwargs["proxies"] = self.proxy_config.to_proxy_dict()

        return kwargs
