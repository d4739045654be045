import logging

import pytest

from conftest import FakeResponse, envelope
from f1tv_api import Platform, SearchVodParams
from f1tv_api.f1tv.exceptions import EmptyResult, PreconditionNotMet, UpstreamError

BASE = "https://f1tv.formula1.com"


def _container(content_id, title):
    return {
        "id": str(content_id),
        "metadata": {"contentId": content_id, "title": title},
        "platformVariants": [{"cpId": 1}],
    }


def test_content_play_without_credential_makes_no_request(anonymous_client, transport):
    before = len(transport.requests)

    with pytest.raises(PreconditionNotMet) as excinfo:
        anonymous_client.content_play(1000003957)

    assert "unable to play content" in str(excinfo.value)
    assert excinfo.value.missing == "ascendon"
    assert len(transport.requests) == before


def test_content_play_without_entitlement(client_factory, transport, make_token):
    transport.add("ALL/USER/ENTITLEMENT", FakeResponse(403, text="forbidden"))
    client = client_factory(make_token())
    client.initial_refresh.result(timeout=5)
    before = len(transport.requests)

    with pytest.raises(PreconditionNotMet) as excinfo:
        client.content_play(1000003957)

    assert excinfo.value.missing == "entitlement"
    assert len(transport.requests) == before


def test_content_play(registered_client, transport, make_token):
    transport.add("ALL/CONTENT/PLAY", FakeResponse(200, envelope({
        "entitlementToken": "play-ent",
        "url": "https://example.invalid/manifest.mpd",
        "streamType": "DASHWV",
        "drmType": "widevine",
        "laURL": "https://example.invalid/license",
    })))

    result = registered_client.content_play(1000003957, channel_id=1011, platform=Platform.WEB_HLS)

    recorded = transport.find("ALL/CONTENT/PLAY")[-1]
    assert recorded.url == (f"{BASE}/2.0/R/ENG/WEB_HLS/ALL/CONTENT/PLAY"
                            "?contentId=1000003957&channelId=1011")
    assert recorded.headers["ascendontoken"] == registered_client.ascendon
    assert recorded.headers["entitlementtoken"] == "ent-token-1"

    assert result.result_code == "OK"
    assert result.result_obj.url == "https://example.invalid/manifest.mpd"
    assert result.result_obj.stream_type == "DASHWV"
    assert result.result_obj.is_drm_protected


def test_content_video_not_found(registered_client, transport):
    transport.add("ALL/CONTENT/VIDEO", FakeResponse(404, text='{"error":"not found"}'))

    with pytest.raises(UpstreamError) as excinfo:
        registered_client.content_video(1000003957)

    assert excinfo.value.status_code == 404
    assert excinfo.value.body == '{"error":"not found"}'
    assert str(excinfo.value) == 'Failed to get video content (Status Code 404): {"error":"not found"}'


def test_content_video_url(registered_client, transport):
    transport.add("ALL/CONTENT/VIDEO",
                  FakeResponse(200, envelope({"containers": [_container(1000003957, "Race")]})))

    selection = registered_client.content_video(1000003957)

    recorded = transport.find("ALL/CONTENT/VIDEO")[-1]
    assert recorded.url == f"{BASE}/4.0/R/ENG/WEB_DASH/ALL/CONTENT/VIDEO/1000003957/PRO/2"
    assert recorded.headers["entitlementtoken"] == "ent-token-1"
    assert selection.container.content_id == 1000003957
    assert selection.container.title == "Race"
    assert not selection.ambiguous


def test_content_video_non_object_result(registered_client, transport):
    transport.add("ALL/CONTENT/VIDEO", FakeResponse(200, {"resultObj": [_container(1, "Race")]}))

    with pytest.raises(UpstreamError) as excinfo:
        registered_client.content_video(1)

    assert excinfo.value.status_code == 200
    assert "resultObj" in excinfo.value.body


def test_live_now_non_object_body(registered_client, transport):
    transport.add("ALL/EVENTS/LIVENOW", FakeResponse(200, [{"id": "live-1"}]))

    with pytest.raises(UpstreamError):
        registered_client.live_now()


def test_content_video_empty(registered_client, transport):
    transport.add("ALL/CONTENT/VIDEO", FakeResponse(200, envelope({"containers": []})))

    with pytest.raises(EmptyResult):
        registered_client.content_video(1000003957)


def test_content_video_multiple_containers(registered_client, transport, caplog):
    transport.add("ALL/CONTENT/VIDEO", FakeResponse(200, envelope({"containers": [
        _container(1, "First"),
        _container(2, "Second"),
        _container(3, "Third"),
    ]})))

    with caplog.at_level(logging.WARNING):
        selection = registered_client.content_video(1)

    assert selection.container.title == "First"
    assert selection.discarded == 2
    assert selection.ambiguous
    assert selection.to_dict()["ambiguous"] is True
    assert any("Multiple containers" in record.getMessage() for record in caplog.records)


def test_content_video_anonymous_warns_without_entitlement(anonymous_client, transport, caplog):
    transport.add("ALL/CONTENT/VIDEO",
                  FakeResponse(200, envelope({"containers": [_container(5, "Highlights")]})))

    with caplog.at_level(logging.WARNING):
        anonymous_client.content_video(5)

    recorded = transport.find("ALL/CONTENT/VIDEO")[-1]
    assert recorded.url == f"{BASE}/4.0/A/ENG/WEB_DASH/ALL/CONTENT/VIDEO/5/ANONYMOUS/1"
    assert "entitlementtoken" not in recorded.headers
    assert any("entitlement token is not set" in record.getMessage() for record in caplog.records)


def test_actions_require_location(client_factory, transport):
    client = client_factory(auto_refresh=False)

    for action in (lambda: client.content_video(1), client.live_now, client.search_vod):
        with pytest.raises(PreconditionNotMet) as excinfo:
            action()
        assert excinfo.value.missing == "location"

    assert transport.requests == []


def test_location_without_entries_is_not_enough(client_factory, transport):
    transport.add("ALL/USER/LOCATION", FakeResponse(200, envelope({"userLocation": []})))
    client = client_factory()
    client.initial_refresh.result(timeout=5)

    assert client.is_location_ready
    with pytest.raises(PreconditionNotMet):
        client.live_now()


def test_live_now(registered_client, transport):
    transport.add("ALL/EVENTS/LIVENOW", FakeResponse(200, envelope({
        "pollingEnabled": {"enabled": True},
        "pollingLower": 30,
        "pollingUpper": 60,
        "items": [{"id": "live-1"}],
    })))

    result = registered_client.live_now()

    assert transport.urls("LIVENOW") == [f"{BASE}/1.0/R/ENG/WEB_DASH/ALL/EVENTS/LIVENOW/PRO/2"]
    assert result.result_obj.is_live
    assert result.result_obj.polling_lower == 30


def test_search_vod_anonymous_url(anonymous_client, transport):
    transport.add("ALL/PAGE/SEARCH/VOD", FakeResponse(200, envelope({"total": 0, "containers": []})))

    result = anonymous_client.search_vod()

    assert transport.urls("SEARCH/VOD") == [f"{BASE}/2.0/A/ENG/WEB_DASH/ALL/PAGE/SEARCH/VOD/ANONYMOUS/1"]
    assert result.result_obj.total == 0


def test_search_vod_with_params(anonymous_client, transport):
    transport.add("ALL/PAGE/SEARCH/VOD", FakeResponse(200, envelope({"total": 1, "containers": [{}]})))

    anonymous_client.search_vod(SearchVodParams(filter_year="2023", maxResults="10", sortOrder="desc"))
    anonymous_client.search_vod({"filter_season": "2022"})

    first, second = transport.urls("SEARCH/VOD")
    assert first.endswith("/ANONYMOUS/1?filter_year=2023&maxResults=10&sortOrder=desc")
    assert second.endswith("/ANONYMOUS/1?filter_season=2022")


def test_search_vod_params_validate_sort_order():
    with pytest.raises(ValueError):
        SearchVodParams(sortOrder="sideways")


def test_picture(anonymous_client, transport):
    transport.add("image-resizer", FakeResponse(200, content=b"\x89PNG", headers={"Content-Type": "image/png"}))

    picture = anonymous_client.picture("1000003957-abc", 1280, 720, quality="HI", orientation="L", fallback=True)

    recorded = transport.find("image-resizer")[-1]
    assert recorded.url == (f"{BASE}/image-resizer/image/1000003957-abc"
                            "?width=1280&height=720&q=HI&o=L&fallback=true")
    assert recorded.operation == "image"
    assert picture.content == b"\x89PNG"
    assert picture.content_type == "image/png"
    assert len(picture) == 4


def test_picture_error(anonymous_client, transport):
    transport.add("image-resizer", FakeResponse(404, text="missing"))

    with pytest.raises(UpstreamError) as excinfo:
        anonymous_client.picture("nope", 10, 10)

    assert excinfo.value.status_code == 404


def test_picture_url_without_options(anonymous_client):
    assert anonymous_client.picture_url("slug", 640, 360) == \
        f"{BASE}/image-resizer/image/slug?width=640&height=360"
