import pytest

from src.timetable.config import TimetableConfig, get_config
from src.timetable.schemas import BOOKINGS_V2, PUBLIC_CALENDAR_V1, SCHEMAS, get_schema


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    config = TimetableConfig()

    assert config.feed_schema == "v1"
    assert config.max_fetch_attempts == 3
    assert config.room_allow_list() is None


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TIMETABLE_FEED_URL", "https://example.test/pub?output=csv")
    monkeypatch.setenv("TIMETABLE_ALLOWED_ROOMS", " Main Hall ,Studio,, ")
    monkeypatch.setenv("TIMETABLE_LOG_JSON", "true")

    config = TimetableConfig()

    assert config.feed_url == "https://example.test/pub?output=csv"
    assert config.room_allow_list() == frozenset({"Main Hall", "Studio"})
    assert config.log_json is True


def test_get_config_is_a_singleton(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    assert get_config() is get_config()


def test_known_layouts():
    assert set(SCHEMAS) == {"v1", "v2"}
    assert PUBLIC_CALENDAR_V1.min_width == 10
    assert BOOKINGS_V2.min_width == 15
    assert PUBLIC_CALENDAR_V1.allowed_rooms is None
    assert "Main Hall" in BOOKINGS_V2.allowed_rooms


def test_get_schema_override_leaves_registry_untouched():
    schema = get_schema("v2", allowed_rooms=frozenset({"Field"}))

    assert schema.allowed_rooms == frozenset({"Field"})
    assert SCHEMAS["v2"].allowed_rooms == BOOKINGS_V2.allowed_rooms


def test_unknown_schema():
    with pytest.raises(ValueError, match="Unknown schema"):
        get_schema("v9")
