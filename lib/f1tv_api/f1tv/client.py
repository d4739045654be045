# f1tv_api/f1tv/client.py
from typing import Any, Dict, Mapping, Optional, Union

from ..base.utils.logger import logger
from .constants import Platform
from .exceptions import EmptyResult, PreconditionNotMet, UpstreamError
from .models import (
    APIResult,
    ContainerSelection,
    ContentPlayResult,
    ContentVideoContainer,
    LiveNowResult,
    Picture,
    SearchVodParams,
    SearchVodResult,
    UserLocation,
)
from .session import F1TVSession


class F1TVClient(F1TVSession):
    """
    Typed F1TV API client

    Every action checks its preconditions against the cached session state
    before issuing exactly one request; nothing is re-fetched on demand.
    """

    def content_play(self, content_id: int, channel_id: Optional[int] = None,
                     platform: Optional[Platform] = None) -> APIResult[ContentPlayResult]:
        """
        Get playback URL (and DRM details) for a content item

        Args:
            content_id: Content ID
            channel_id: Optional alternate channel (onboard camera, data channel, ...)
            platform: Platform override for this call

        Raises:
            PreconditionNotMet: ascendon or entitlement token is not set
            UpstreamError: non-success response
        """
        with self._lock:
            ascendon = self._ascendon
            entitlement = self._entitlement

        if not ascendon or not entitlement:
            raise PreconditionNotMet(
                'ascendon token or entitlement token is not set, unable to play content',
                missing='ascendon' if not ascendon else 'entitlement'
            )

        params = {'contentId': str(content_id)}
        if channel_id:
            params['channelId'] = str(channel_id)

        url = self._config.build_api_url(
            'content_play', self.login_status(), self.language, Platform(platform or self.platform),
            params=params
        )

        data = self._get_json(url, 'play content',
                              headers=self._config.get_auth_headers(ascendon=ascendon, entitlement=entitlement))
        result = APIResult.from_api_response(data, ContentPlayResult.from_api_response)
        logger.info(f"Content {content_id} play URL received ({result.result_obj.stream_type})")
        return result

    def content_video(self, content_id: int) -> ContainerSelection:
        """
        Get video details for a content item

        Returns:
            ContainerSelection holding the first container; ambiguous is set
            when the server returned more than one

        Raises:
            PreconditionNotMet: location is not set
            EmptyResult: server returned no containers
            UpstreamError: non-success response
        """
        user_location = self._require_user_location()

        with self._lock:
            entitlement = self._entitlement

        if not entitlement:
            logger.warning('entitlement token is not set')

        url = self._config.build_api_url(
            'content_video', self.login_status(), self.language, self.platform,
            content_id, user_location.entitlement, user_location.group_id
        )

        data = self._get_json(url, 'get video content',
                              headers=self._config.get_auth_headers(entitlement=entitlement))
        containers = (data.get('resultObj') or {}).get('containers') or []

        if len(containers) == 0:
            raise EmptyResult(f'No containers found for content {content_id}')

        selection = ContainerSelection(
            container=ContentVideoContainer.from_api_response(containers[0]),
            discarded=len(containers) - 1
        )
        if selection.ambiguous:
            logger.warning(f"Multiple containers found for content {content_id}, "
                           f"returning the first one ({selection.discarded} discarded)")
        return selection

    def live_now(self) -> APIResult[LiveNowResult]:
        """
        Get currently live events

        Raises:
            PreconditionNotMet: location is not set
            UpstreamError: non-success response
        """
        user_location = self._require_user_location()

        url = self._config.build_api_url(
            'live_now', self.login_status(), self.language, self.platform,
            user_location.entitlement, user_location.group_id
        )

        data = self._get_json(url, 'get live now')
        return APIResult.from_api_response(data, LiveNowResult.from_api_response)

    def search_vod(self, params: Optional[Union[SearchVodParams, Mapping[str, Any]]] = None
                   ) -> APIResult[SearchVodResult]:
        """
        Search the VOD catalog

        Args:
            params: SearchVodParams or plain mapping of query filters

        Raises:
            PreconditionNotMet: location is not set
            UpstreamError: non-success response
        """
        user_location = self._require_user_location()

        query = params.to_query() if isinstance(params, SearchVodParams) else dict(params or {})

        url = self._config.build_api_url(
            'search_vod', self.login_status(), self.language, self.platform,
            user_location.entitlement, user_location.group_id,
            params=query
        )

        data = self._get_json(url, 'search VOD')
        return APIResult.from_api_response(data, SearchVodResult.from_api_response)

    def picture_url(self, slug: str, width: int, height: int, quality: Optional[str] = None,
                    orientation: Optional[str] = None, fallback: bool = False) -> str:
        """
        Build image-resizer URL

        Args:
            slug: Picture identifier (pictureUrl field of content metadata)
            width: Target width
            height: Target height
            quality: 'HI' for high quality
            orientation: 'L' for landscape
            fallback: Ask for a placeholder when the picture is missing
        """
        params: Dict[str, Any] = {'width': int(width), 'height': int(height)}
        if quality:
            params['q'] = quality
        if orientation:
            params['o'] = orientation
        if fallback:
            params['fallback'] = 'true'
        return self._config.build_picture_url(slug, params)

    def picture(self, slug: str, width: int, height: int, quality: Optional[str] = None,
                orientation: Optional[str] = None, fallback: bool = False) -> Picture:
        """
        Download a resized picture

        Raises:
            UpstreamError: non-success response
        """
        url = self.picture_url(slug, width, height, quality, orientation, fallback)

        response = self._http_manager.get(url, operation='image', headers=self._config.get_base_headers())
        if response.status_code >= 400:
            raise UpstreamError('get picture', response.status_code, response.text, url)

        return Picture(
            content=response.content,
            content_type=response.headers.get('Content-Type'),
            url=url
        )

    def _require_user_location(self) -> UserLocation:
        with self._lock:
            location = self._location

        if location is None or not location.has_user_location():
            raise PreconditionNotMet('location is not set', missing='location')
        return location.primary
