import pytest

from mapstitch.errors import QueryError
from mapstitch.models import GeoCoord, MapConfig
from mapstitch.services.query import build_overlay_params, build_query


def make_config(**options):
    return MapConfig(
        width=640,
        height=640,
        zoom=12,
        scale=2,
        center=GeoCoord(lat=40.7128, lng=-74.006),
        options=options,
    )


class TestBuildQuery:
    def test_base_params(self):
        params = build_query(GeoCoord(lat=40.7128, lng=-74.006), make_config())
        assert params == [
            ("center", "40.712800,-74.006000"),
            ("zoom", "12"),
            ("scale", "2"),
            ("size", "640x640"),
        ]

    def test_custom_size(self):
        params = dict(build_query(GeoCoord(lat=0, lng=0), make_config(), size=(320, 240)))
        assert params["size"] == "320x240"

    def test_passthrough_options(self):
        params = build_query(
            GeoCoord(lat=0, lng=0), make_config(maptype="satellite", key="abc")
        )
        assert params[-2:] == [("maptype", "satellite"), ("key", "abc")]

    def test_passthrough_scalars_keep_json_spelling(self):
        params = build_query(
            GeoCoord(lat=0, lng=0),
            make_config(visual_refresh=True, sensor=False, ratio=1.0, level=2.5),
        )
        assert params[-4:] == [
            ("visual_refresh", "true"),
            ("sensor", "false"),
            ("ratio", "1"),
            ("level", "2.5"),
        ]

    def test_boolean_styler(self):
        params = build_overlay_params(
            {"style": [{"stylers": [{"invert_lightness": True}]}]}
        )
        assert params == [("style", "invert_lightness:true")]


class TestOverlays:
    def test_style(self):
        params = build_overlay_params(
            {
                "style": [
                    {"featureType": "poi", "elementType": "labels", "stylers": [{"visibility": "off"}]},
                    {"stylers": [{"hue": "#00ffe6"}, {"saturation": -20}]},
                ]
            }
        )
        assert params == [
            ("style", "feature:poi|element:labels|visibility:off"),
            ("style", "hue:#00ffe6|saturation:-20"),
        ]

    def test_styled_marker(self):
        params = build_overlay_params(
            {
                "markers": [
                    {
                        "style": {"size": "mid", "color": "#ff0000", "label": "A"},
                        "locations": [{"lat": 40.5, "lng": -74.25}, "Brooklyn, NY"],
                    }
                ]
            }
        )
        assert params == [
            ("markers", "size:mid|color:0xff0000|label:A|40.5,-74.25|Brooklyn, NY")
        ]

    def test_icon_marker(self):
        params = build_overlay_params(
            {
                "markers": [
                    {
                        "style": {"icon": "https://example.com/pin.png", "anchor": "bottom"},
                        "locations": ["Queens, NY"],
                    }
                ]
            }
        )
        assert params == [
            ("markers", "icon:https://example.com/pin.png|anchor:bottom|Queens, NY")
        ]

    def test_marker_without_style(self):
        params = build_overlay_params({"markers": [{"locations": [{"lat": 1, "lng": 2}]}]})
        assert params == [("markers", "1.0,2.0")]

    def test_path(self):
        params = build_overlay_params(
            {
                "path": [
                    {
                        "weight": 5,
                        "color": "#0000ff80",
                        "geodesic": True,
                        "locations": [{"lat": 40.0, "lng": -73.0}, "Boston, MA"],
                    }
                ]
            }
        )
        assert params == [
            ("path", "weight:5|color:0x0000ff80|geodesic:true|40.0,-73.0|Boston, MA")
        ]

    @pytest.mark.parametrize(
        "options",
        [
            {"markers": [{"style": {"label": "ab"}, "locations": []}]},
            {"markers": [{"style": {"icon": "x", "anchor": "middle"}, "locations": []}]},
            {"markers": {"locations": []}},
            {"path": [{"weight": 3}]},
            {"style": [{"featureType": "road"}]},
        ],
    )
    def test_malformed_overlay(self, options):
        with pytest.raises(QueryError) as info:
            build_overlay_params(options)
        assert info.value.code == "ERR_QUERY_MALFORMED"
        assert next(iter(options)) in info.value.details
