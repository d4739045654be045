# f1tv_api/base/network/http_manager.py
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..models.proxy_models import ProxyConfig, ProxyScope, RequestConfig
from ..utils.logger import logger


class HTTPManager:
    """
    Shared transport for the F1TV client

    Every request returns its response whatever the status code; turning a
    non-success answer into an error is left to the caller, who knows which
    action failed. Transport failures (DNS, refused connection, timeout)
    are logged and re-raised as requests exceptions.
    """

    def __init__(self, config: Optional[RequestConfig] = None):
        self.config = config or RequestConfig()
        self._session = self._build_session(self.config)

    @staticmethod
    def _build_session(config: RequestConfig) -> requests.Session:
        session = requests.Session()

        if config.max_retries > 0:
            # Status codes come back as responses once retries are exhausted
            retries = Retry(
                total=config.max_retries,
                backoff_factor=config.retry_delay,
                status_forcelist=list(config.retry_statuses),
                allowed_methods=["HEAD", "GET", "OPTIONS"],
                raise_on_status=False,
            )
        else:
            retries = 0

        adapter = HTTPAdapter(max_retries=retries)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def get(self, url: str, operation: str = "api", **kwargs) -> requests.Response:
        """
        Perform GET request

        Args:
            url: Request URL
            operation: Request kind (api, auth, image) for proxy scoping
            **kwargs: Passed to requests (headers are merged, not replaced)
        """
        return self.request("GET", url, operation, **kwargs)

    def request(self, method: str, url: str, operation: str = "api", **kwargs) -> requests.Response:
        request_kwargs = self.config.get_request_kwargs(operation)
        request_kwargs["headers"].update(kwargs.pop("headers", None) or {})
        request_kwargs.update(kwargs)

        self._log_request(method, url, operation, request_kwargs)

        try:
            response = self._session.request(method, url, **request_kwargs)
        except requests.exceptions.ProxyError as e:
            logger.error(f"Proxy error for {operation} request to {self._display_url(url)}: {e}")
            raise
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout ({request_kwargs.get('timeout')}s) for {operation} request "
                         f"to {self._display_url(url)}: {e}")
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f"{type(e).__name__} for {operation} request to {self._display_url(url)}: {e}")
            raise

        self._log_response(response)
        return response

    @staticmethod
    def _display_url(url: str) -> str:
        return url if len(url) <= 100 else f"{url[:80]}...{url[-17:]}"

    def _log_request(self, method: str, url: str, operation: str, kwargs: Dict[str, Any]) -> None:
        proxy = self.config.proxy_config
        if proxy is None:
            proxy_info = "none"
        elif proxy.scope.should_use_proxy_for(operation):
            proxy_info = f"{proxy.proxy_type.value}://{proxy.host}:{proxy.port}"
        else:
            proxy_info = f"skipped for '{operation}'"

        logger.debug(f"{method} {operation} -> {self._display_url(url)} "
                     f"[proxy: {proxy_info}] [timeout: {kwargs.get('timeout')}s]")

    @staticmethod
    def _log_response(response: requests.Response) -> None:
        elapsed = ""
        if getattr(response, "elapsed", None) is not None:
            elapsed = f" [{int(response.elapsed.total_seconds() * 1000)}ms]"

        size = len(response.content or b"")
        if size > 1024 * 1024:
            size_display = f"{size / (1024 * 1024):.2f} MB"
        elif size > 1024:
            size_display = f"{size / 1024:.2f} KB"
        else:
            size_display = f"{size} bytes"

        content_type = response.headers.get("Content-Type", "unknown")
        logger.debug(f"Response {response.status_code} ({size_display}, {content_type}){elapsed}")

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class HTTPManagerFactory:
    """Builds HTTPManager instances from loose settings"""

    @staticmethod
    def create(proxy_url: Optional[str] = None, proxy_scope: Optional[ProxyScope] = None,
               **config_kwargs) -> HTTPManager:
        """
        Args:
            proxy_url: Optional proxy, e.g. "socks5://127.0.0.1:1080"
            proxy_scope: Request kinds routed through the proxy (all by default)
            **config_kwargs: Remaining RequestConfig fields
        """
        proxy_config = ProxyConfig.from_url(proxy_url, scope=proxy_scope) if proxy_url else None
        return HTTPManager(RequestConfig(proxy_config=proxy_config, **config_kwargs))
