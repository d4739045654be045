# f1tv_api/f1tv/models.py
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar('T')


@dataclass
class APIResult(Generic[T]):
    """
    F1TV response envelope: {resultCode, message, errorDescription, resultObj, systemTime}
    """
    result_code: str
    message: str
    error_description: str
    result_obj: T
    system_time: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any],
                          parse_result: Optional[Callable[[Any], T]] = None) -> 'APIResult[T]':
        """Create envelope, converting resultObj with parse_result when given"""
        result_obj = data.get('resultObj')
        if parse_result is not None and result_obj is not None:
            result_obj = parse_result(result_obj)
        return cls(
            result_code=data.get('resultCode', ''),
            message=data.get('message', ''),
            error_description=data.get('errorDescription', ''),
            result_obj=result_obj,
            system_time=data.get('systemTime'),
            raw=data
        )


@dataclass
class DecodedAscendonToken:
    """
    Claims carried by the ascendon (subscription) token
    """
    subscriber_id: Optional[str] = None
    subscription_status: Optional[str] = None
    subscribed_product: Optional[str] = None
    session_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    external_context: Optional[str] = None
    ents: List[Dict[str, str]] = field(default_factory=list)
    exp: Optional[int] = None
    iat: Optional[int] = None
    jti: Optional[str] = None
    raw_claims: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> 'DecodedAscendonToken':
        return cls(
            subscriber_id=claims.get('SubscriberId'),
            subscription_status=claims.get('SubscriptionStatus'),
            subscribed_product=claims.get('SubscribedProduct'),
            session_id=claims.get('SessionId'),
            first_name=claims.get('FirstName'),
            last_name=claims.get('LastName'),
            external_context=claims.get('ExternalAuthorizationsContextData'),
            ents=list(claims.get('ents') or []),
            exp=claims.get('exp'),
            iat=claims.get('iat'),
            jti=claims.get('jti'),
            raw_claims=dict(claims)
        )

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check the exp claim; tokens without exp never expire"""
        if self.exp is None:
            return False
        return (now if now is not None else time.time()) >= self.exp

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop('raw_claims')
        return data


@dataclass
class UserLocation:
    """One entry of the location result; the first one is the active context"""
    group_id: int
    entitlement: str  # ANONYMOUS | REG | PRO | ...
    detected_country: Optional[str] = None
    registered_country: Optional[str] = None
    detected_country_alpha3: Optional[str] = None
    registered_country_alpha3: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'UserLocation':
        return cls(
            group_id=data.get('groupId'),
            entitlement=data.get('entitlement', ''),
            detected_country=data.get('detectedCountryIsoCode'),
            registered_country=data.get('registeredCountryIsoCode'),
            detected_country_alpha3=data.get('detectedCountryIsoCodeAlpha3'),
            registered_country_alpha3=data.get('registeredCountryIsoCodeAlpha3')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'groupId': self.group_id,
            'entitlement': self.entitlement,
            'detectedCountryIsoCode': self.detected_country,
            'registeredCountryIsoCode': self.registered_country,
            'detectedCountryIsoCodeAlpha3': self.detected_country_alpha3,
            'registeredCountryIsoCodeAlpha3': self.registered_country_alpha3
        }


@dataclass
class LocationResult:
    user_location: List[UserLocation] = field(default_factory=list)
    countries: List[Any] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'LocationResult':
        return cls(
            user_location=[UserLocation.from_api_response(entry) for entry in data.get('userLocation') or []],
            countries=list(data.get('countries') or [])
        )

    def has_user_location(self) -> bool:
        return len(self.user_location) > 0

    @property
    def primary(self) -> Optional[UserLocation]:
        return self.user_location[0] if self.user_location else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'userLocation': [entry.to_dict() for entry in self.user_location],
            'countries': self.countries
        }


@dataclass
class EntitlementResult:
    entitlement_token: str

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'EntitlementResult':
        return cls(entitlement_token=data.get('entitlementToken', ''))


@dataclass
class ContentPlayResult:
    """Playback URL and DRM details for one content item"""
    url: str
    stream_type: str  # DASH | DASHWV | HLS
    entitlement_token: Optional[str] = None
    channel_id: Optional[int] = None
    drm_type: Optional[str] = None
    la_url: Optional[str] = None
    drm_token: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'ContentPlayResult':
        return cls(
            url=data.get('url', ''),
            stream_type=data.get('streamType', ''),
            entitlement_token=data.get('entitlementToken'),
            channel_id=data.get('channelId'),
            drm_type=data.get('drmType'),
            la_url=data.get('laURL'),
            drm_token=data.get('drmToken'),
            raw=data
        )

    @property
    def is_drm_protected(self) -> bool:
        return bool(self.drm_type)

    def to_dict(self) -> Dict[str, Any]:
        return self.raw or {
            'url': self.url,
            'streamType': self.stream_type,
            'entitlementToken': self.entitlement_token,
            'channelId': self.channel_id,
            'drmType': self.drm_type,
            'laURL': self.la_url,
            'drmToken': self.drm_token
        }


@dataclass
class ContentVideoContainer:
    """Video container; metadata is kept verbatim"""
    content_id: Optional[int]
    metadata: Dict[str, Any] = field(default_factory=dict)
    platform_variants: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'ContentVideoContainer':
        metadata = data.get('metadata') or {}
        return cls(
            content_id=data.get('contentId', metadata.get('contentId')),
            metadata=metadata,
            platform_variants=list(data.get('platformVariants') or []),
            raw=data
        )

    @property
    def title(self) -> Optional[str]:
        return self.metadata.get('title')

    @property
    def additional_streams(self) -> List[Dict[str, Any]]:
        """Onboard/data channels of a multi-stream session (empty if none)"""
        return list(self.metadata.get('additionalStreams') or [])

    def to_dict(self) -> Dict[str, Any]:
        return self.raw


@dataclass
class ContainerSelection:
    """
    First container of a response plus how many were dropped
    """
    container: ContentVideoContainer
    discarded: int = 0

    @property
    def ambiguous(self) -> bool:
        return self.discarded > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'container': self.container.to_dict(),
            'discarded': self.discarded,
            'ambiguous': self.ambiguous
        }


@dataclass
class LiveNowResult:
    polling_enabled: Dict[str, bool] = field(default_factory=dict)
    polling_lower: Optional[int] = None
    polling_upper: Optional[int] = None
    items: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'LiveNowResult':
        return cls(
            polling_enabled=dict(data.get('pollingEnabled') or {}),
            polling_lower=data.get('pollingLower'),
            polling_upper=data.get('pollingUpper'),
            items=list(data.get('items') or []),
            raw=data
        )

    @property
    def is_live(self) -> bool:
        return len(self.items) > 0


@dataclass
class SearchVodParams:
    """Query filters accepted by the VOD search"""
    filter_genres: Optional[str] = None
    filter_MeetingKey: Optional[str] = None
    filter_objectSubtype: Optional[str] = None
    filter_orderByFom: Optional[str] = None
    filter_season: Optional[str] = None
    filter_year: Optional[str] = None
    maxResults: Optional[str] = None
    orderBy: Optional[str] = None
    sortOrder: Optional[str] = None

    def __post_init__(self):
        if self.sortOrder is not None and self.sortOrder not in ('asc', 'desc'):
            raise ValueError(f"sortOrder must be 'asc' or 'desc', got {self.sortOrder!r}")

    def to_query(self) -> Dict[str, str]:
        return {key: str(value) for key, value in asdict(self).items() if value is not None}


@dataclass
class SearchVodResult:
    total: int = 0
    collection_name: Optional[str] = None
    search_result_total: int = 0
    containers: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'SearchVodResult':
        return cls(
            total=data.get('total', 0),
            collection_name=data.get('collectionName'),
            search_result_total=data.get('searchResultTotal', 0),
            containers=list(data.get('containers') or []),
            raw=data
        )


@dataclass
class Picture:
    """Binary image returned by the image resizer"""
    content: bytes
    content_type: Optional[str]
    url: str

    def __len__(self) -> int:
        return len(self.content)


@dataclass
class RefreshReport:
    """Outcome of one refresh chain"""
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed
