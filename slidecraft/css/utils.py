# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/utils.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from slidecraft.css.config import CSSEntries

_NUMBER_RE = re.compile(r"^-?(?:\d+(?:\.\d+)?|\.\d+)$")
_UNIT_RE = re.compile(r"^(-?(?:\d+(?:\.\d+)?|\.\d+))(px|rem|em|%|vh|vw|vmin|vmax|ch|ex|pt|cm|mm|in|dvh|svh|lvh|fr|deg|s|ms)$")
_FRACTION_RE = re.compile(r"^(\d+)/(\d+)$")
_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_FN_RE = re.compile(r"^rgba?\(\s*(\d+)[\s,]+(\d+)[\s,]+(\d+)(?:\s*[,/]\s*([\d.]+%?))?\s*\)$")
_GLOBAL_KEYWORDS = ("inherit", "initial", "revert", "revert-layer", "unset")


def regex(pattern: str, flags: str = "") -> re.Pattern:
    """Compile a rule/shortcut matcher; ``flags`` uses letters i, m, s, x."""
    value = 0
    for letter in flags:
        try:
            value |= {"i": re.I, "m": re.M, "s": re.S, "x": re.X}[letter]
        except KeyError:
            raise ValueError(f"unknown regex flag {letter!r}") from None
    return re.compile(pattern, value)


def fmt_number(value: float) -> str:
    text = f"{round(value, 10):.10f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


# --------------------------------------------------------------------------------------
# Selectors / bodies
# --------------------------------------------------------------------------------------

def escape_selector(text: str) -> str:
    """CSS.escape()"""
    out = []
    for i, ch in enumerate(text):
        code = ord(ch)
        if code == 0:
            out.append("\ufffd")
        elif 0x1 <= code <= 0x1F or code == 0x7F \
                or (i == 0 and "0" <= ch <= "9") \
                or (i == 1 and "0" <= ch <= "9" and text[0] == "-"):
            out.append(f"\\{code:x} ")
        elif i == 0 and ch == "-" and len(text) == 1:
            out.append("\\-")
        elif code >= 0x80 or ch in "-_" or ("0" <= ch <= "9") or ("a" <= ch <= "z") or ("A" <= ch <= "Z"):
            out.append(ch)
        else:
            out.append("\\" + ch)
    return "".join(out)


_ATTRIBUTIFY_SELECTOR_RE = re.compile(r'^\[(.+?)(~?=)"(.*)"\]$')


def to_escaped_selector(raw: str) -> str:
    m = _ATTRIBUTIFY_SELECTOR_RE.match(raw)
    if m:
        return f'[{escape_selector(m.group(1))}{m.group(2)}"{escape_selector(m.group(3))}"]'
    return "." + escape_selector(raw)


def normalize_entries(body: Union[Mapping[str, Any], Sequence[Tuple[str, Any]], None]) -> CSSEntries:
    if body is None:
        return []
    items = body.items() if isinstance(body, Mapping) else body
    out: CSSEntries = []
    for key, value in items:
        if value is None or value is False:
            continue
        if isinstance(value, bool):
            value = "1"
        elif isinstance(value, (int, float)):
            value = fmt_number(value)
        out.append((str(key), str(value)))
    return out


def entries_to_css(entries: Iterable[Tuple[str, str]]) -> str:
    return "".join(f"{key}:{value};" for key, value in entries)


# --------------------------------------------------------------------------------------
# Value handlers
# --------------------------------------------------------------------------------------

class ValueHandlers:
    """Utility value parsers. Each returns the CSS value or None.

        h.rem("4")      -> "1rem"
        h.fraction("1/2") -> "50%"
        h.chain("bracket", "fraction", "rem")("[10px]") -> "10px"
    """

    @staticmethod
    def number(s: str) -> Optional[str]:
        if s and _NUMBER_RE.match(s):
            return fmt_number(float(s))
        return None

    @staticmethod
    def rem(s: str) -> Optional[str]:
        if not s:
            return None
        if s == "px":
            return "1px"
        if _NUMBER_RE.match(s):
            n = float(s)
            return "0" if n == 0 else f"{fmt_number(n / 4)}rem"
        m = _UNIT_RE.match(s)
        if m:
            return f"{fmt_number(float(m.group(1)))}{m.group(2)}"
        return None

    @staticmethod
    def px(s: str) -> Optional[str]:
        if s and _NUMBER_RE.match(s):
            n = float(s)
            return "0" if n == 0 else f"{fmt_number(n)}px"
        m = _UNIT_RE.match(s or "")
        if m:
            return f"{fmt_number(float(m.group(1)))}{m.group(2)}"
        return None

    @staticmethod
    def percent(s: str) -> Optional[str]:
        s = (s or "").rstrip("%")
        if _NUMBER_RE.match(s):
            return f"{fmt_number(float(s) / 100)}"
        return None

    @staticmethod
    def fraction(s: str) -> Optional[str]:
        if s == "full":
            return "100%"
        m = _FRACTION_RE.match(s or "")
        if m and int(m.group(2)) != 0:
            return f"{fmt_number(int(m.group(1)) / int(m.group(2)) * 100)}%"
        return None

    @staticmethod
    def bracket(s: str) -> Optional[str]:
        if s and s.startswith("[") and s.endswith("]") and len(s) > 2:
            inner = s[1:-1]
            inner = re.sub(r"(?<!\\)_", " ", inner).replace("\\_", "_")
            return inner
        return None

    @staticmethod
    def cssvar(s: str) -> Optional[str]:
        if s and s.startswith("$") and len(s) > 1:
            return f"var(--{escape_selector(s[1:])})"
        return None

    @staticmethod
    def time(s: str) -> Optional[str]:
        if s and _NUMBER_RE.match(s):
            return f"{fmt_number(float(s))}ms"
        m = _UNIT_RE.match(s or "")
        if m and m.group(2) in ("s", "ms"):
            return s
        return None

    @staticmethod
    def degree(s: str) -> Optional[str]:
        if s and _NUMBER_RE.match(s):
            n = float(s)
            return "0" if n == 0 else f"{fmt_number(n)}deg"
        m = _UNIT_RE.match(s or "")
        if m and m.group(2) == "deg":
            return s
        return None

    @staticmethod
    def auto(s: str) -> Optional[str]:
        return "auto" if s == "auto" else None

    @staticmethod
    def global_keyword(s: str) -> Optional[str]:
        return s if s in _GLOBAL_KEYWORDS else None

    def chain(self, *names: str) -> Callable[[str], Optional[str]]:
        fns = [getattr(self, name) for name in names]

        def _handle(s: str) -> Optional[str]:
            for fn in fns:
                value = fn(s)
                if value is not None:
                    return value
            return None
        return _handle


h = ValueHandlers()


# --------------------------------------------------------------------------------------
# Colors
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ParsedColor:
    name: str
    rgb: Optional[Tuple[int, int, int]]
    css: str
    alpha: Optional[str] = None


def hex_to_rgb(value: str) -> Optional[Tuple[Tuple[int, int, int], Optional[str]]]:
    m = _HEX_RE.match(value)
    if not m:
        return None
    digits = m.group(1)
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)
    rgb = tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
    alpha = fmt_number(int(digits[6:8], 16) / 255) if len(digits) == 8 else None
    return rgb, alpha  # type: ignore[return-value]


def _css_to_rgb(css: str) -> Tuple[Optional[Tuple[int, int, int]], Optional[str]]:
    parsed = hex_to_rgb(css) if css.startswith("#") else None
    if parsed:
        return parsed
    m = _RGB_FN_RE.match(css)
    if m:
        alpha = m.group(4)
        if alpha and alpha.endswith("%"):
            alpha = fmt_number(float(alpha[:-1]) / 100)
        return (int(m.group(1)), int(m.group(2)), int(m.group(3))), alpha
    return None, None


def _theme_color(colors: Mapping[str, Any], name: str) -> Optional[str]:
    parts = name.split("-")
    # longest color key first: "light-blue-500"
    for split in range(len(parts), 0, -1):
        key = "-".join(parts[:split])
        value = colors.get(key)
        if value is None:
            key = "".join(parts[:split])
            value = colors.get(key)
        if value is None:
            continue
        rest = parts[split:]
        if isinstance(value, str):
            return value if not rest else None
        if isinstance(value, Mapping):
            if not rest:
                return value.get("DEFAULT")
            return _theme_color(value, "-".join(rest))
    return None


def parse_color(body: str, theme: Mapping[str, Any]) -> Optional[ParsedColor]:
    if not body:
        return None
    opacity = None
    main = body
    if "/" in body and not body.startswith("["):
        main, _, opacity_raw = body.rpartition("/")
        opacity = h.bracket(opacity_raw) or h.percent(opacity_raw)
        if opacity is None:
            return None
    elif body.startswith("[") and "]/" in body:
        main, _, opacity_raw = body.rpartition("/")
        opacity = h.bracket(opacity_raw) or h.percent(opacity_raw)

    if main in ("transparent", "current", "currentColor", "inherit"):
        css = "currentColor" if main in ("current", "currentColor") else main
        return ParsedColor(main, None, css, opacity)

    css: Optional[str]
    if main.startswith("hex-"):
        css = "#" + main[4:]
    elif main.startswith("["):
        css = h.bracket(main)
    elif main.startswith("#"):
        css = main
    elif main.startswith("$"):
        return ParsedColor(main, None, h.cssvar(main) or main, opacity)
    else:
        css = _theme_color(theme.get("colors", {}), main)
    if css is None:
        return None

    rgb, hex_alpha = _css_to_rgb(css)
    if rgb is None and css.startswith("#"):
        return None
    return ParsedColor(main, rgb, css, opacity if opacity is not None else hex_alpha)


def color_entries(prop: str, var_name: str, color: ParsedColor) -> CSSEntries:
    if color.rgb is None:
        return [(prop, color.css)]
    r, g, b = color.rgb
    if color.alpha is not None:
        return [(prop, f"rgb({r} {g} {b} / {color.alpha})")]
    return [
        (f"--un-{var_name}-opacity", "1"),
        (prop, f"rgb({r} {g} {b} / var(--un-{var_name}-opacity))"),
    ]


def color_resolver(prop: str, var_name: str) -> Callable[[re.Match, Any], Optional[CSSEntries]]:
    """Rule handler ``(match, ctx)`` for ``<prefix>-<color>[/<opacity>]`` utilities."""
    def _resolve(match: re.Match, ctx: Any) -> Optional[CSSEntries]:
        color = parse_color(match.group(1), ctx.theme)
        if color is None:
            return None
        return color_entries(prop, var_name, color)
    return _resolve


def theme_value(theme: Mapping[str, Any], section: str, key: str) -> Any:
    values = theme.get(section) or {}
    if not isinstance(values, Mapping):
        return None
    return values.get(key if key else "DEFAULT")


def direction_map() -> Dict[str, Tuple[str, ...]]:
    return {
        "": ("",),
        "x": ("-left", "-right"),
        "y": ("-top", "-bottom"),
        "t": ("-top",),
        "r": ("-right",),
        "b": ("-bottom",),
        "l": ("-left",),
        "s": ("-inline-start",),
        "e": ("-inline-end",),
    }


# --------------------------------------------------------------------------------------
# Variant groups
# --------------------------------------------------------------------------------------

VARIANT_GROUP_RE = re.compile(
    r"((?:[!@\w+:_-]|\[[^\]\s]*\])+?)([:-])\(((?:[~!<>\w\s:/\\,%#.$?-]|\[[^\]]*?\])+?)\)"
)


def _expand_group(match: re.Match) -> str:
    prefix, sep, body = match.group(1), match.group(2), match.group(3)
    items = []
    for item in body.split():
        if item == "~":
            items.append(prefix)
        elif item.startswith("!"):
            items.append(f"!{prefix}{sep}{item[1:]}")
        else:
            items.append(f"{prefix}{sep}{item}")
    return " ".join(items)


def expand_variant_group(text: str, depth: int = 5) -> str:
    """``hover:(bg-red text-white)`` -> ``hover:bg-red hover:text-white``"""
    for _ in range(depth):
        expanded = VARIANT_GROUP_RE.sub(_expand_group, text)
        if expanded == text:
            break
        text = expanded
    return text
