import json
import logging

import pytest

from mapstitch.config import API_KEY_ENV
from mapstitch.errors import ConfigError
from mapstitch.models import GeoCoord
from mapstitch.settings import DEFAULT_CONFIG, load_config, parse_config


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadConfig:
    @pytest.fixture(autouse=True)
    def no_api_key(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)

    def test_full_config(self, tmp_path):
        path = write_config(
            tmp_path,
            {
                "width": 1600,
                "height": 900,
                "zoom": 14,
                "scale": 2,
                "center": {"lat": 51.5, "lng": -0.12},
                "options": {"maptype": "terrain"},
            },
        )
        config = load_config(path)

        assert (config.width, config.height, config.zoom, config.scale) == (1600, 900, 14, 2)
        assert config.center == GeoCoord(lat=51.5, lng=-0.12)
        assert config.options == {"maptype": "terrain"}
        assert config.canvas_size == (3200, 1800)

    def test_defaults_with_notice(self, tmp_path, caplog):
        path = write_config(tmp_path, {"width": 1000})
        with caplog.at_level(logging.WARNING, logger="mapstitch.settings"):
            config = load_config(path)

        assert config.width == 1000
        assert config.height == DEFAULT_CONFIG["height"]
        assert config.center == GeoCoord(**DEFAULT_CONFIG["center"])
        assert config.options == {}
        assert "height, zoom, scale, center" in caplog.text

    def test_zero_values_fall_back(self):
        config = parse_config({"width": 0, "scale": 0, "zoom": 5})
        assert config.width == 640
        assert config.scale == 1

    def test_zoom_zero_is_kept(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mapstitch.settings"):
            config = parse_config({"zoom": 0})
        assert config.zoom == 0
        assert "zoom" not in caplog.text

    def test_null_zoom_falls_back(self):
        assert parse_config({"zoom": None}).zoom == 1

    def test_negative_values_are_kept(self):
        assert parse_config({"width": -5}).width == -5

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "secret")
        assert parse_config({}).options == {"key": "secret"}
        assert parse_config({"options": {"key": "mine"}}).options == {"key": "mine"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as info:
            load_config(tmp_path / "missing.json")
        assert info.value.code == "ERR_CONFIG_READ"

    def test_not_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{width: 12", encoding="utf-8")
        with pytest.raises(ConfigError) as info:
            load_config(path)
        assert info.value.code == "ERR_CONFIG_PARSE"

    @pytest.mark.parametrize(
        "data",
        [
            [1, 2, 3],
            {"width": "wide"},
            {"center": {"lat": "north"}},
            {"options": ["maptype"]},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            parse_config(data)
