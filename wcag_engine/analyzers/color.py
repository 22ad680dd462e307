"""
Color utilities - inline color parsing and WCAG contrast math.

Only explicit inline values are understood. Anything that would need the
cascade (inherit, currentColor, CSS variables) or compositing (alpha below 1)
parses to None and the caller reports nothing.
"""

import re
from typing import Dict, Optional, Tuple

from bs4 import Tag

RGB = Tuple[int, int, int]

NAMED_COLORS: Dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "gray": "#808080",
    "grey": "#808080",
}

HEX_COLOR = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
RGB_COLOR = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)

AA_NORMAL = 4.5
AA_LARGE = 3.0
AAA_NORMAL = 7.0
AAA_LARGE = 4.5


def inline_style(element: Tag) -> Dict[str, str]:
    """
    Parse an element's style attribute into {property: value}.

    Property names are lower-cased; !important is dropped.
    """
    declarations = {}
    for declaration in (element.get("style") or "").split(";"):
        if ":" not in declaration:
            continue
        name, value = declaration.split(":", 1)
        name = name.strip().lower()
        value = value.replace("!important", "").strip()
        if name and value:
            declarations[name] = value
    return declarations


def hex_to_rgb(value: str) -> RGB:
    hex_value = value.lstrip("#")
    if len(hex_value) == 3:
        hex_value = "".join(ch * 2 for ch in hex_value)
    return (
        int(hex_value[0:2], 16),
        int(hex_value[2:4], 16),
        int(hex_value[4:6], 16),
    )


def parse_color(value: Optional[str]) -> Optional[RGB]:
    """
    Parse a CSS color value.

    Supports #rgb, #rrggbb, rgb(), opaque rgba() and a basic named-color
    set. Returns None for anything else.
    """
    if not value:
        return None
    color = value.strip().lower()
    color = NAMED_COLORS.get(color, color)

    if HEX_COLOR.match(color):
        return hex_to_rgb(color)

    match = RGB_COLOR.match(color)
    if match:
        alpha = match.group(4)
        if alpha is not None and not _is_opaque(alpha):
            return None
        channels = tuple(int(match.group(i)) for i in (1, 2, 3))
        if any(channel > 255 for channel in channels):
            return None
        return channels
    return None


def _is_opaque(alpha: str) -> bool:
    try:
        if alpha.endswith("%"):
            return float(alpha[:-1]) >= 100
        return float(alpha) >= 1
    except ValueError:
        return False


def _linearize(channel: int) -> float:
    c = channel / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: RGB) -> float:
    """WCAG relative luminance of an sRGB color."""
    r, g, b = (_linearize(channel) for channel in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(first: RGB, second: RGB) -> float:
    """(L1 + 0.05) / (L2 + 0.05) with L1 the lighter color."""
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    if l2 > l1:
        l1, l2 = l2, l1
    return (l1 + 0.05) / (l2 + 0.05)


def meets_wcag_aa(ratio: float, large_text: bool = False) -> bool:
    return ratio >= (AA_LARGE if large_text else AA_NORMAL)


def meets_wcag_aaa(ratio: float, large_text: bool = False) -> bool:
    return ratio >= (AAA_LARGE if large_text else AAA_NORMAL)


def is_large_text(style: Dict[str, str]) -> bool:
    """
    Large text per WCAG: at least 24px, or at least 18.66px when bold.

    Only px and pt font sizes are understood.
    """
    size = _font_size_px(style.get("font-size", ""))
    if size is None:
        return False
    weight = style.get("font-weight", "").lower()
    bold = weight in ("bold", "bolder") or (weight.isdigit() and int(weight) >= 700)
    return size >= 24 or (bold and size >= 18.66)


def _font_size_px(value: str) -> Optional[float]:
    match = re.match(r"^\s*([\d.]+)\s*(px|pt)\s*$", value, re.IGNORECASE)
    if not match:
        return None
    size = float(match.group(1))
    if match.group(2).lower() == "pt":
        size *= 4 / 3
    return size


def background_color(style: Dict[str, str]) -> Optional[str]:
    """background-color, or the `background` shorthand when it is a single color."""
    if "background-color" in style:
        return style["background-color"]
    shorthand = style.get("background", "")
    if shorthand and parse_color(shorthand) is not None:
        return shorthand
    return None
