"""
Tests for color parsing and WCAG contrast math.
"""

import pytest

from wcag_engine.analyzers.color import (
    background_color,
    contrast_ratio,
    inline_style,
    is_large_text,
    meets_wcag_aa,
    meets_wcag_aaa,
    parse_color,
    relative_luminance,
)


# Format: (value, expected_rgb, description)
PARSE_CASES = [
    ("#fff", (255, 255, 255), "Short hex"),
    ("#1A2b3C", (26, 43, 60), "Mixed-case long hex"),
    ("rgb(10, 20, 30)", (10, 20, 30), "rgb()"),
    ("rgba(10,20,30,1)", (10, 20, 30), "Opaque rgba()"),
    ("rgba(10, 20, 30, 100%)", (10, 20, 30), "Opaque percentage alpha"),
    ("  Grey ", (128, 128, 128), "Named color with whitespace"),
    ("rgba(0, 0, 0, 0.5)", None, "Translucent rgba()"),
    ("rgb(300, 0, 0)", None, "Channel out of range"),
    ("inherit", None, "Cascade keyword"),
    ("var(--brand)", None, "CSS variable"),
    ("#ffff", None, "Four-digit hex"),
    ("", None, "Empty"),
    (None, None, "None"),
]

# Format: (style, expected_large, description)
LARGE_TEXT_CASES = [
    ({"font-size": "24px"}, True, "24px"),
    ({"font-size": "23px"}, False, "Just below 24px"),
    ({"font-size": "19px", "font-weight": "bold"}, True, "Bold 19px"),
    ({"font-size": "19px", "font-weight": "700"}, True, "Numeric bold 19px"),
    ({"font-size": "19px", "font-weight": "400"}, False, "Normal 19px"),
    ({"font-size": "18pt"}, True, "18pt converts to 24px"),
    ({"font-size": "2em"}, False, "Relative units not understood"),
    ({}, False, "No font size"),
]


class TestParseColor:
    @pytest.mark.parametrize(
        "value,expected,description",
        PARSE_CASES,
        ids=[case[-1] for case in PARSE_CASES]
    )
    def test_parse(self, value, expected, description):
        assert parse_color(value) == expected


class TestContrast:
    def test_luminance_extremes(self):
        assert relative_luminance((0, 0, 0)) == 0
        assert relative_luminance((255, 255, 255)) == pytest.approx(1.0)

    def test_black_on_white_is_21(self):
        assert contrast_ratio((0, 0, 0), (255, 255, 255)) == pytest.approx(21.0)

    def test_ratio_is_symmetric(self):
        first, second = (119, 119, 119), (255, 255, 255)
        assert contrast_ratio(first, second) == contrast_ratio(second, first)

    def test_mid_gray_on_white_just_fails_aa(self):
        ratio = contrast_ratio(parse_color("#777"), parse_color("#fff"))
        assert ratio == pytest.approx(4.48, abs=0.01)
        assert not meets_wcag_aa(ratio)
        assert meets_wcag_aa(ratio, large_text=True)

    def test_aaa_thresholds(self):
        assert meets_wcag_aaa(7.0)
        assert not meets_wcag_aaa(6.9)
        assert meets_wcag_aaa(4.5, large_text=True)


class TestStyleHelpers:
    @pytest.mark.parametrize(
        "style,expected,description",
        LARGE_TEXT_CASES,
        ids=[case[-1] for case in LARGE_TEXT_CASES]
    )
    def test_large_text(self, style, expected, description):
        assert is_large_text(style) is expected

    def test_inline_style_parsing(self, find):
        p = find('<p style="COLOR: #777 !important; background:white;;junk">x</p>', "p")
        assert inline_style(p) == {"color": "#777", "background": "white"}

    def test_background_shorthand_only_when_plain_color(self):
        assert background_color({"background-color": "#000", "background": "red"}) == "#000"
        assert background_color({"background": "white"}) == "white"
        assert background_color({"background": "url(a.png) no-repeat"}) is None
        assert background_color({}) is None
