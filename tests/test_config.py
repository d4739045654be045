import json

import pytest

from f1tv_api.base.utils.environment import EnvironmentManager, get_environment_manager
from f1tv_api.f1tv.constants import F1TVConfig, Language, LoginStatus, Platform, encode_query


@pytest.fixture
def env_manager(tmp_path, monkeypatch):
    for name in ("F1TV_LANGUAGE", "F1TV_PLATFORM", "F1TV_ASCENDON", "F1TV_SERVER_PORT", "F1TV_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("F1TV_CONFIG_DIR", str(tmp_path))
    EnvironmentManager.reset()
    yield get_environment_manager
    EnvironmentManager.reset()


def test_defaults(env_manager):
    manager = env_manager()

    assert manager.get_config("language") == "ENG"
    assert manager.get_config("platform") == "WEB_DASH"
    assert manager.get_config("server_port") == 7778


def test_environment_overrides_file(env_manager, tmp_path, monkeypatch):
    (tmp_path / "config.json").write_text(json.dumps({"language": "DEU", "server_port": 9000}))
    monkeypatch.setenv("F1TV_LANGUAGE", "FRA")

    manager = env_manager()

    assert manager.get_config("language") == "FRA"
    assert manager.get_config("server_port") == 9000


def test_invalid_number_keeps_default(env_manager, monkeypatch):
    monkeypatch.setenv("F1TV_SERVER_PORT", "eighty")

    assert env_manager().get_config("server_port") == 7778


def test_ascendon_is_never_persisted(env_manager, tmp_path):
    manager = env_manager()

    manager.set_config("ascendon", "secret-token")
    manager.set_config("language", "NLD")

    saved = json.loads((tmp_path / "config.json").read_text())
    assert saved == {"language": "NLD"}
    assert manager.get_config("ascendon") == "secret-token"
    assert "ascendon" not in manager.debug_info()["config_summary"]


def test_ascendon_in_file_is_ignored(env_manager, tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"ascendon": "from-file"}))

    assert env_manager().get_config("ascendon") is None


def test_config_from_environment(env_manager, monkeypatch):
    monkeypatch.setenv("F1TV_PLATFORM", "WEB_HLS")
    monkeypatch.setenv("F1TV_TIMEOUT", "12")

    config = F1TVConfig.from_environment(env_manager())

    assert config.platform is Platform.WEB_HLS
    assert config.language is Language.ENGLISH
    assert config.timeout == 12


def test_build_api_url_is_deterministic():
    config = F1TVConfig()

    url = config.build_api_url("content_video", LoginStatus.REGISTERED, Language.GERMAN, Platform.MOBILE_HLS,
                               1000003957, "PRO", 2)

    assert url == "https://f1tv.formula1.com/4.0/R/DEU/MOBILE_HLS/ALL/CONTENT/VIDEO/1000003957/PRO/2"


def test_build_api_url_quotes_segments_and_query():
    config = F1TVConfig({"base_url": "https://f1tv.example.test/"})

    url = config.build_api_url("search_vod", "A", "ENG", "WEB_DASH", "A B", 1,
                               params={"filter_year": 2023, "orderBy": None})

    assert url == "https://f1tv.example.test/2.0/A/ENG/WEB_DASH/ALL/PAGE/SEARCH/VOD/A%20B/1?filter_year=2023"


def test_encode_query():
    assert encode_query(None) == ""
    assert encode_query({}) == ""
    assert encode_query({"a": None}) == ""
    assert encode_query({"a": 1, "b": "x y"}) == "a=1&b=x+y"


def test_auth_headers_only_for_set_tokens():
    config = F1TVConfig()

    assert config.get_auth_headers() == {}
    assert config.get_auth_headers(ascendon="a", entitlement="e") == {
        "ascendontoken": "a",
        "entitlementtoken": "e",
    }
