# f1tv_api/f1tv/session.py
"""
F1TV session state

Owns the ascendon token and everything derived from it:
- decoded claims, recomputed on every token change
- entitlement token, fetched with the ascendon token
- location, scoped by the entitlement tier and the token's home country
- remote client configuration

Refreshes run one at a time on a private worker thread in the fixed order
entitlement -> location -> remote config. Each refresh returns a Future;
failures reject that future and are emitted on the matching error signal.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..base.models.auth import AuthState, SessionStatus, TokenInfo
from ..base.network import HTTPManager
from ..base.models.proxy_models import RequestConfig
from ..base.utils.logger import logger, mask_token
from ..base.utils.signals import Signal, ReadinessSignal
from .constants import F1TVConfig, F1TVDefaults, Language, LoginStatus, Platform
from .exceptions import InvalidCredential, PreconditionNotMet, UpstreamError
from .models import DecodedAscendonToken, EntitlementResult, LocationResult, RefreshReport
from .token_utils import AscendonTokenParser, verify_subscription_token


@dataclass
class SessionEvents:
    """Signals published by a session"""
    ascendon_updated: Signal
    ascendon_error: Signal
    entitlement_updated: Signal
    entitlement_error: Signal
    location_updated: Signal
    location_error: Signal
    config_updated: Signal
    config_error: Signal
    ready: Signal

    @classmethod
    def create(cls) -> 'SessionEvents':
        return cls(**{name: Signal(name) for name in cls.__dataclass_fields__})


class F1TVSession:
    """
    Credential holder, dependent-state refresher and readiness tracker
    """

    def __init__(self, ascendon: Optional[str] = None,
                 language: Language = F1TVDefaults.DEFAULT_LANGUAGE,
                 platform: Platform = F1TVDefaults.DEFAULT_PLATFORM,
                 http_manager: Optional[HTTPManager] = None,
                 config: Optional[F1TVConfig] = None,
                 auto_refresh: bool = True):
        """
        Initialize session

        Args:
            ascendon: Optional ascendon (subscription) token
            language: Catalog language used in request paths
            platform: Default platform used in request paths
            http_manager: Transport; a default HTTPManager is created when omitted
            config: Endpoint/header configuration overrides
            auto_refresh: Schedule the initial refresh chain immediately
        """
        self._config = config or F1TVConfig()
        self.language = Language(language)
        self.platform = Platform(platform)

        self._owns_http_manager = http_manager is None
        self._http_manager = http_manager or HTTPManager(RequestConfig(
            timeout=self._config.timeout,
            user_agent=self._config.user_agent,
        ))

        self._lock = threading.RLock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='f1tv-refresh')
        self._closed = False

        self._ascendon: Optional[str] = None
        self._decoded_ascendon: Optional[DecodedAscendonToken] = None
        self._entitlement: Optional[str] = None
        self._location: Optional[LocationResult] = None
        self._remote_config: Optional[Dict[str, Any]] = None

        self.events = SessionEvents.create()
        self._location_ready = ReadinessSignal('location')
        self._config_ready = ReadinessSignal('config')
        self._ready = ReadinessSignal.all_of('ready', self._location_ready, self._config_ready)
        self._ready.on_set(self.events.ready.emit)

        logger.log_session_event(
            "created",
            f"language={self.language.value} platform={self.platform.value} "
            f"ascendon={'set' if ascendon else 'none'}"
        )

        # Refresh chain scheduled by the constructor
        self.initial_refresh: 'Future[RefreshReport]' = self._apply_ascendon(ascendon, schedule=auto_refresh)

    # ------------------------------------------------------------------
    # Credential holder
    # ------------------------------------------------------------------

    @property
    def config(self) -> F1TVConfig:
        return self._config

    @property
    def http_manager(self) -> HTTPManager:
        return self._http_manager

    @property
    def ascendon(self) -> Optional[str]:
        return self._ascendon

    @ascendon.setter
    def ascendon(self, ascendon: Optional[str]) -> None:
        self.set_ascendon(ascendon)

    @property
    def decoded_ascendon(self) -> Optional[DecodedAscendonToken]:
        return self._decoded_ascendon

    @property
    def entitlement(self) -> Optional[str]:
        return self._entitlement

    @property
    def location(self) -> Optional[LocationResult]:
        return self._location

    @property
    def remote_config(self) -> Optional[Dict[str, Any]]:
        return self._remote_config

    def login_status(self) -> str:
        """'A' (anonymous) without ascendon token, 'R' (registered) otherwise"""
        return LoginStatus.ANONYMOUS if self._ascendon is None else LoginStatus.REGISTERED

    def set_ascendon(self, ascendon: Optional[str]) -> 'Future[RefreshReport]':
        """
        Replace the ascendon token

        The entitlement is cleared before this returns. A malformed token
        leaves the session anonymous, emits ascendon_error, schedules the
        anonymous refresh chain and rejects the returned future with
        InvalidCredential; nothing is raised here.

        Returns:
            Future resolving with the RefreshReport of the triggered chain
        """
        return self._apply_ascendon(ascendon, schedule=True)

    def _apply_ascendon(self, ascendon: Optional[str], schedule: bool) -> 'Future[RefreshReport]':
        with self._lock:
            self._ascendon = None
            self._decoded_ascendon = None
            self._entitlement = None

            if not ascendon:
                logger.log_token_event('ascendon', 'cleared')
                decode_error = None
            else:
                try:
                    decoded = AscendonTokenParser.decode(ascendon)
                except InvalidCredential as e:
                    decode_error = e
                else:
                    decode_error = None
                    self._ascendon = ascendon
                    self._decoded_ascendon = decoded
                    logger.log_token_event(
                        'ascendon', 'set',
                        f"subscriber={decoded.subscriber_id} status={decoded.subscription_status} "
                        f"token={mask_token(ascendon)}"
                    )
                    if decoded.is_expired():
                        logger.warning("Ascendon token is expired; entitlement refresh will likely fail")

        if decode_error is not None:
            logger.error(f"Rejected ascendon token: {decode_error}")
            self.events.ascendon_error.emit(decode_error)
            # Session is anonymous now; replace any registered location/config
            if schedule:
                self.refresh_all()
            failed: Future = Future()
            failed.set_exception(decode_error)
            return failed

        self.events.ascendon_updated.emit(self._ascendon)

        if not schedule:
            done: Future = Future()
            done.set_result(RefreshReport())
            return done

        return self.refresh_all()

    def verify_ascendon(self, jwks_client=None) -> 'Future[DecodedAscendonToken]':
        """
        Fully verify the current ascendon token against the issuer's JWKS

        Raises:
            PreconditionNotMet: no ascendon token is set
        """
        ascendon = self._ascendon
        if ascendon is None:
            raise PreconditionNotMet('ascendon token is not set', missing='ascendon')
        return self._submit(verify_subscription_token, ascendon, self._config.jwks_uri, jwks_client)

    # ------------------------------------------------------------------
    # Dependent-state refresher
    # ------------------------------------------------------------------

    def refresh_all(self) -> 'Future[RefreshReport]':
        """
        Schedule entitlement (with a token) -> location -> remote config

        A failed step is reported and the chain moves on; the report lists
        every step's outcome.
        """
        steps: List[Tuple[str, Callable[[], Any]]] = []
        if self._ascendon is not None:
            steps.append(('entitlement', self._fetch_entitlement))
        steps.append(('location', self._fetch_location))
        steps.append(('config', self._fetch_remote_config))

        return self._submit(self._run_chain, steps)

    def _run_chain(self, steps: List[Tuple[str, Callable[[], Any]]]) -> RefreshReport:
        report = RefreshReport()
        for name, step in steps:
            try:
                step()
            except Exception as e:
                report.failed[name] = e
            else:
                report.succeeded.append(name)

        if report.failed:
            logger.log_refresh_event('chain', 'finished with errors', ', '.join(sorted(report.failed)))
        else:
            logger.log_refresh_event('chain', 'finished', ', '.join(report.succeeded))
        return report

    def refresh_entitlement(self) -> 'Future[str]':
        """
        Schedule an entitlement fetch

        Raises:
            PreconditionNotMet: no ascendon token is set (no request is made)
        """
        if self._ascendon is None:
            raise PreconditionNotMet('ascendon token is not set', missing='ascendon')
        return self._submit(self._fetch_entitlement)

    def refresh_location(self) -> 'Future[LocationResult]':
        """Schedule a location fetch"""
        return self._submit(self._fetch_location)

    def refresh_remote_config(self) -> 'Future[Dict[str, Any]]':
        """Schedule a remote configuration fetch"""
        return self._submit(self._fetch_remote_config)

    def _fetch_entitlement(self) -> str:
        with self._lock:
            ascendon = self._ascendon
        if ascendon is None:
            error = PreconditionNotMet('ascendon token is not set', missing='ascendon')
            self.events.entitlement_error.emit(error)
            raise error

        url = self._config.build_api_url('entitlement', LoginStatus.REGISTERED, self.language, self.platform)

        try:
            data = self._get_json(url, 'get entitlement', operation='auth',
                                  headers=self._config.get_auth_headers(ascendon=ascendon))
            entitlement = EntitlementResult.from_api_response(data.get('resultObj') or {}).entitlement_token
            if not entitlement:
                raise UpstreamError('get entitlement', 200, 'response carried no entitlementToken', url)
        except Exception as e:
            logger.error(f"Entitlement refresh failed: {e}")
            self.events.entitlement_error.emit(e)
            raise

        with self._lock:
            if self._ascendon != ascendon:
                logger.debug("Discarding entitlement fetched for a replaced ascendon token")
                return entitlement
            self._entitlement = entitlement

        logger.log_token_event('entitlement', 'updated', mask_token(entitlement))
        self.events.entitlement_updated.emit(entitlement)
        return entitlement

    def _fetch_location(self) -> LocationResult:
        with self._lock:
            login_status = self.login_status()
            entitlement = self._entitlement
            decoded = self._decoded_ascendon

        params = {}
        if decoded is not None and decoded.external_context:
            params[F1TVDefaults.HOME_COUNTRY_PARAM] = decoded.external_context

        url = self._config.build_api_url('location', login_status, self.language, self.platform,
                                         params=params)

        try:
            data = self._get_json(url, 'get location',
                                  headers=self._config.get_auth_headers(entitlement=entitlement))
            location = LocationResult.from_api_response(data.get('resultObj') or {})
        except Exception as e:
            logger.error(f"Location refresh failed: {e}")
            self.events.location_error.emit(e)
            raise

        with self._lock:
            self._location = location

        primary = location.primary
        logger.log_refresh_event(
            'location', 'updated',
            f"tier={primary.entitlement} group={primary.group_id}" if primary else "no user location"
        )
        self.events.location_updated.emit(location)
        self._location_ready.set()
        return location

    def _fetch_remote_config(self) -> Dict[str, Any]:
        # Served without the resultObj envelope
        try:
            remote_config = self._get_json(self._config.config_url, 'get config')
        except Exception as e:
            logger.error(f"Remote config refresh failed: {e}")
            self.events.config_error.emit(e)
            raise

        with self._lock:
            self._remote_config = remote_config

        logger.log_refresh_event('config', 'updated', f"version={remote_config.get('version')}")
        self.events.config_updated.emit(remote_config)
        self._config_ready.set()
        return remote_config

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    @property
    def is_location_ready(self) -> bool:
        return self._location_ready.is_set()

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def when_location_ready(self) -> Future:
        """
        Future resolving once location has been fetched at least once

        Already resolved when location is populated. Never resolves if no
        location fetch ever succeeds; apply a timeout when waiting on it.
        """
        return self._location_ready.future()

    def wait_location_ready(self, timeout: Optional[float] = None) -> bool:
        return self._location_ready.wait(timeout)

    def when_ready(self) -> Future:
        """Future resolving once both location and remote config were fetched"""
        return self._ready.future()

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        return self._ready.wait(timeout)

    # ------------------------------------------------------------------
    # Status and helpers
    # ------------------------------------------------------------------

    def get_status(self) -> SessionStatus:
        """Snapshot of credential, entitlement, location and readiness"""
        with self._lock:
            decoded = self._decoded_ascendon
            entitlement = self._entitlement
            location = self._location

        if decoded is None:
            auth_state = AuthState.ANONYMOUS
        elif decoded.is_expired():
            auth_state = AuthState.EXPIRED
        elif entitlement:
            auth_state = AuthState.ENTITLED
        else:
            auth_state = AuthState.AUTHENTICATED

        token_scopes = {
            'ascendon': TokenInfo(
                scope='ascendon',
                has_token=decoded is not None,
                is_valid=decoded is not None and not decoded.is_expired(),
                expires_at=decoded.exp if decoded else None
            ),
            'entitlement': TokenInfo(
                scope='entitlement',
                has_token=entitlement is not None,
                is_valid=entitlement is not None
            )
        }

        primary = location.primary if location else None
        return SessionStatus(
            login_status=self.login_status(),
            auth_state=auth_state,
            language=self.language.value,
            platform=self.platform.value,
            is_location_ready=self.is_location_ready,
            is_ready=self.is_ready,
            token_scopes=token_scopes,
            entitlement_tier=primary.entitlement if primary else None,
            group_id=primary.group_id if primary else None,
            country=(primary.registered_country or primary.detected_country) if primary else None,
            subscriber_id=decoded.subscriber_id if decoded else None
        )

    def _submit(self, fn: Callable, *args) -> Future:
        if self._closed:
            raise RuntimeError('session is closed')
        return self._executor.submit(fn, *args)

    def _get_json(self, url: str, action: str, operation: str = 'api',
                  headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """GET url and decode its JSON object body, raising UpstreamError on failure or bad shape"""
        request_headers = self._config.get_base_headers()
        request_headers.update(headers or {})

        response = self._http_manager.get(url, operation=operation, headers=request_headers)

        if response.status_code >= 400:
            raise UpstreamError(action, response.status_code, response.text, url)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(action, response.status_code, f'invalid JSON body: {e}', url) from e

        if not isinstance(data, dict):
            raise UpstreamError(action, response.status_code,
                                f'expected JSON object, got {type(data).__name__}', url)

        result_obj = data.get('resultObj')
        if result_obj is not None and not isinstance(result_obj, dict):
            raise UpstreamError(action, response.status_code,
                                f'expected resultObj object, got {type(result_obj).__name__}', url)
        return data

    def close(self) -> None:
        """Stop the refresh worker and release the transport"""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        if self._owns_http_manager:
            self._http_manager.close()
        logger.log_session_event("closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
