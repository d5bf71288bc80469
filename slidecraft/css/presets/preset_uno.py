# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/presets/preset_uno.py
"""
Default utility preset: spacing, sizing, layout, typography, colors,
borders, effects, transforms, filters and transitions, plus the custom
property reset every composed utility (transform, ring, shadow, filter)
relies on.
"""
from __future__ import annotations

from typing import Any, List, Optional

from slidecraft.css.config import CSSEntries, Preflight, Preset, RuleContext
from slidecraft.css.theme import default_theme
from slidecraft.css.utils import (
    color_entries,
    color_resolver,
    direction_map,
    entries_to_css,
    h,
    parse_color,
    regex,
    theme_value,
)
from slidecraft.css.variants import default_variants

_DIRS = direction_map()

PREFLIGHT_ENTRIES: CSSEntries = [
    ("--un-rotate", "0"),
    ("--un-rotate-x", "0"),
    ("--un-rotate-y", "0"),
    ("--un-rotate-z", "0"),
    ("--un-scale-x", "1"),
    ("--un-scale-y", "1"),
    ("--un-scale-z", "1"),
    ("--un-skew-x", "0"),
    ("--un-skew-y", "0"),
    ("--un-translate-x", "0"),
    ("--un-translate-y", "0"),
    ("--un-translate-z", "0"),
    ("--un-pan-x", " "),
    ("--un-pan-y", " "),
    ("--un-pinch-zoom", " "),
    ("--un-scroll-snap-strictness", "proximity"),
    ("--un-ordinal", " "),
    ("--un-slashed-zero", " "),
    ("--un-numeric-figure", " "),
    ("--un-numeric-spacing", " "),
    ("--un-numeric-fraction", " "),
    ("--un-border-spacing-x", "0"),
    ("--un-border-spacing-y", "0"),
    ("--un-ring-offset-shadow", "0 0 rgb(0 0 0 / 0)"),
    ("--un-ring-shadow", "0 0 rgb(0 0 0 / 0)"),
    ("--un-shadow-inset", " "),
    ("--un-shadow", "0 0 rgb(0 0 0 / 0)"),
    ("--un-ring-inset", " "),
    ("--un-ring-offset-width", "0px"),
    ("--un-ring-offset-color", "#fff"),
    ("--un-ring-width", "0px"),
    ("--un-ring-color", "rgb(147 197 253 / 0.5)"),
    ("--un-blur", " "),
    ("--un-brightness", " "),
    ("--un-contrast", " "),
    ("--un-drop-shadow", " "),
    ("--un-grayscale", " "),
    ("--un-hue-rotate", " "),
    ("--un-invert", " "),
    ("--un-saturate", " "),
    ("--un-sepia", " "),
    ("--un-backdrop-blur", " "),
    ("--un-backdrop-brightness", " "),
    ("--un-backdrop-contrast", " "),
    ("--un-backdrop-grayscale", " "),
    ("--un-backdrop-hue-rotate", " "),
    ("--un-backdrop-invert", " "),
    ("--un-backdrop-opacity", " "),
    ("--un-backdrop-saturate", " "),
    ("--un-backdrop-sepia", " "),
]


def preflight_css() -> str:
    body = entries_to_css(PREFLIGHT_ENTRIES)
    return f"*,::before,::after{{{body}}}::backdrop{{{body}}}"


TRANSFORM = (
    "translateX(var(--un-translate-x)) translateY(var(--un-translate-y)) translateZ(var(--un-translate-z)) "
    "rotate(var(--un-rotate)) rotateX(var(--un-rotate-x)) rotateY(var(--un-rotate-y)) rotateZ(var(--un-rotate-z)) "
    "skewX(var(--un-skew-x)) skewY(var(--un-skew-y)) "
    "scaleX(var(--un-scale-x)) scaleY(var(--un-scale-y)) scaleZ(var(--un-scale-z))"
)
FILTER = (
    "var(--un-blur) var(--un-brightness) var(--un-contrast) var(--un-drop-shadow) var(--un-grayscale) "
    "var(--un-hue-rotate) var(--un-invert) var(--un-saturate) var(--un-sepia)"
)
BACKDROP_FILTER = (
    "var(--un-backdrop-blur) var(--un-backdrop-brightness) var(--un-backdrop-contrast) "
    "var(--un-backdrop-grayscale) var(--un-backdrop-hue-rotate) var(--un-backdrop-invert) "
    "var(--un-backdrop-opacity) var(--un-backdrop-saturate) var(--un-backdrop-sepia)"
)
BOX_SHADOW = "var(--un-ring-offset-shadow), var(--un-ring-shadow), var(--un-shadow)"

_size_value = h.chain("bracket", "cssvar", "auto", "fraction", "rem")
_inset_value = h.chain("bracket", "cssvar", "auto", "fraction", "rem")
_number_or_bracket = h.chain("bracket", "cssvar", "number")


# --------------------------------------------------------------------------------------
# Spacing / sizing
# --------------------------------------------------------------------------------------

def _spacing(prop: str):
    def handle(m, ctx: RuleContext) -> Optional[CSSEntries]:
        value = _size_value(m.group(2))
        if value is None:
            return None
        return [(f"{prop}{suffix}", value) for suffix in _DIRS[m.group(1) or ""]]
    return handle


def _gap(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = h.chain("bracket", "cssvar", "rem")(m.group(2))
    if value is None:
        return None
    prop = {"": "gap", "x": "column-gap", "y": "row-gap"}[m.group(1) or ""]
    return [(prop, value)]


def _size(m, ctx: RuleContext) -> Optional[CSSEntries]:
    minmax, axis, s = m.group(1) or "", m.group(2), m.group(3)
    prop = f"{minmax}{'width' if axis == 'w' else 'height'}"
    value: Optional[str] = None
    if s == "screen":
        value = "100vw" if axis == "w" else "100vh"
    elif s in ("min", "max", "fit"):
        value = f"{s}-content"
    elif minmax == "max-" and axis == "w":
        value = theme_value(ctx.theme, "maxWidth", s)
    if value is None:
        value = _size_value(s)
    return [(prop, value)] if value is not None else None


# --------------------------------------------------------------------------------------
# Typography
# --------------------------------------------------------------------------------------

def _font_size(m, ctx: RuleContext) -> Optional[CSSEntries]:
    s = m.group(1)
    themed = theme_value(ctx.theme, "fontSize", s)
    if themed is not None:
        if isinstance(themed, (list, tuple)):
            return [("font-size", themed[0]), ("line-height", themed[1])]
        return [("font-size", themed)]
    if s.startswith("size-"):
        s = s[len("size-"):]
    elif not s.startswith("["):
        return None
    value = h.chain("bracket", "rem")(s)
    if value is None or value.startswith(("#", "rgb", "hsl", "var(")):
        return None
    return [("font-size", value)]


def _font(m, ctx: RuleContext) -> Optional[CSSEntries]:
    s = m.group(1)
    weight = theme_value(ctx.theme, "fontWeight", s)
    if weight is not None:
        return [("font-weight", weight)]
    family = theme_value(ctx.theme, "fontFamily", s)
    if family is not None:
        return [("font-family", family)]
    if h.number(s) is not None:
        return [("font-weight", h.number(s))]
    value = h.bracket(s)
    return [("font-family", value)] if value is not None else None


def _leading(m, ctx: RuleContext) -> Optional[CSSEntries]:
    s = m.group(1)
    value = theme_value(ctx.theme, "lineHeight", s) or h.chain("bracket", "cssvar", "rem")(s)
    return [("line-height", value)] if value is not None else None


def _tracking(m, ctx: RuleContext) -> Optional[CSSEntries]:
    s = m.group(1)
    value = theme_value(ctx.theme, "letterSpacing", s) or h.chain("bracket", "cssvar", "rem")(s)
    return [("letter-spacing", value)] if value is not None else None


def _opacity_var(var_name: str):
    def handle(m, ctx: RuleContext) -> Optional[CSSEntries]:
        value = h.chain("bracket", "percent")(m.group(1))
        return [(f"--un-{var_name}-opacity", value)] if value is not None else None
    return handle


# --------------------------------------------------------------------------------------
# Borders / radius
# --------------------------------------------------------------------------------------

_BORDER_STYLES = ("solid", "dashed", "dotted", "double", "hidden", "none", "groove", "ridge", "inset", "outset")

_CORNERS = {
    "": ("",),
    "t": ("-top-left", "-top-right"),
    "r": ("-top-right", "-bottom-right"),
    "b": ("-bottom-left", "-bottom-right"),
    "l": ("-top-left", "-bottom-left"),
    "tl": ("-top-left",),
    "tr": ("-top-right",),
    "bl": ("-bottom-left",),
    "br": ("-bottom-right",),
    "s": ("-start-start", "-end-start"),
    "e": ("-start-end", "-end-end"),
}


def _border(m, ctx: RuleContext) -> Optional[CSSEntries]:
    suffixes = _DIRS[m.group(1) or ""]
    s = m.group(2)
    if s is None:
        return [(f"border{sfx}-width", "1px") for sfx in suffixes]
    if s in _BORDER_STYLES:
        return [(f"border{sfx}-style", s) for sfx in suffixes]
    width = h.px(s) if h.number(s) is not None else None
    if width is not None:
        return [(f"border{sfx}-width", width) for sfx in suffixes]
    color = parse_color(s, ctx.theme)
    if color is not None:
        out: CSSEntries = []
        for sfx in suffixes:
            for key, value in color_entries(f"border{sfx}-color", "border", color):
                if (key, value) not in out:
                    out.append((key, value))
        return out
    value = h.chain("bracket", "cssvar")(s)
    if value is not None:
        return [(f"border{sfx}-width", value) for sfx in suffixes]
    return None


def _rounded(m, ctx: RuleContext) -> Optional[CSSEntries]:
    corners = _CORNERS[m.group(1) or ""]
    s = m.group(2) or "DEFAULT"
    value = theme_value(ctx.theme, "borderRadius", s)
    if value is None:
        value = h.chain("bracket", "cssvar", "fraction", "rem")(s)
    if value is None:
        return None
    return [(f"border{corner}-radius", value) for corner in corners]


# --------------------------------------------------------------------------------------
# Effects
# --------------------------------------------------------------------------------------

def _shadow(m, ctx: RuleContext) -> Optional[CSSEntries]:
    s = m.group(1) or "DEFAULT"
    if s == "inset":
        return [("--un-shadow-inset", "inset")]
    templates = theme_value(ctx.theme, "boxShadow", s)
    if templates is not None:
        alpha = theme_value(ctx.theme, "shadowAlpha", s) or "0.1"
        color = f"var(--un-shadow-color, rgb(0 0 0 / {alpha}))"
        return [
            ("--un-shadow", ",".join(t.replace("{c}", color) for t in templates)),
            ("box-shadow", BOX_SHADOW),
        ]
    color = parse_color(s, ctx.theme)
    if color is None:
        return None
    return color_entries("--un-shadow-color", "shadow", color)


def _ring(m, ctx: RuleContext) -> Optional[CSSEntries]:
    s = m.group(1)
    if s is None or h.number(s) is not None or s.startswith("["):
        width = h.chain("bracket", "px")(s) if s else "3px"
        if width is None:
            return None
        return [
            ("--un-ring-width", width),
            ("--un-ring-offset-shadow",
             "var(--un-ring-inset) 0 0 0 var(--un-ring-offset-width) var(--un-ring-offset-color)"),
            ("--un-ring-shadow",
             "var(--un-ring-inset) 0 0 0 calc(var(--un-ring-width) + var(--un-ring-offset-width)) var(--un-ring-color)"),
            ("box-shadow", BOX_SHADOW),
        ]
    if s == "inset":
        return [("--un-ring-inset", "inset")]
    color = parse_color(s, ctx.theme)
    return color_entries("--un-ring-color", "ring", color) if color is not None else None


def _color_stop(color) -> str:
    if color.rgb is None:
        return color.css
    r, g, b = color.rgb
    alpha = color.alpha if color.alpha is not None else "1"
    return f"rgb({r} {g} {b} / {alpha})"


def _transparent_stop(color) -> str:
    if color.rgb is None:
        return "rgb(255 255 255 / 0)"
    r, g, b = color.rgb
    return f"rgb({r} {g} {b} / 0)"


def _gradient_stop(m, ctx: RuleContext) -> Optional[CSSEntries]:
    position, s = m.group(1), m.group(2)
    color = parse_color(s, ctx.theme)
    if color is None:
        return None
    stop = _color_stop(color)
    if position == "from":
        return [
            ("--un-gradient-from", stop),
            ("--un-gradient-to", _transparent_stop(color)),
            ("--un-gradient-stops", "var(--un-gradient-from), var(--un-gradient-to)"),
        ]
    if position == "via":
        return [
            ("--un-gradient-to", _transparent_stop(color)),
            ("--un-gradient-stops", f"var(--un-gradient-from), {stop}, var(--un-gradient-to)"),
        ]
    return [("--un-gradient-to", stop)]


_GRADIENT_DIRECTIONS = {
    "t": "top", "tr": "top right", "r": "right", "br": "bottom right",
    "b": "bottom", "bl": "bottom left", "l": "left", "tl": "top left",
}


def _gradient(m, ctx: RuleContext) -> Optional[CSSEntries]:
    direction = _GRADIENT_DIRECTIONS.get(m.group(1))
    if direction is None:
        return None
    return [("background-image", f"linear-gradient(to {direction}, var(--un-gradient-stops))")]


def _opacity(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = h.chain("bracket", "percent", "cssvar")(m.group(1))
    return [("opacity", value)] if value is not None else None


# --------------------------------------------------------------------------------------
# Transforms / filters / transitions
# --------------------------------------------------------------------------------------

def _scale(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = h.chain("bracket", "cssvar", "percent")(m.group(2))
    if value is None:
        return None
    axes = (m.group(1),) if m.group(1) else ("x", "y")
    return [(f"--un-scale-{axis}", value) for axis in axes] + [("transform", TRANSFORM)]


def _rotate(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = h.chain("bracket", "cssvar", "degree")(m.group(2))
    if value is None:
        return None
    key = f"--un-rotate-{m.group(1)}" if m.group(1) else "--un-rotate"
    return [(key, value), ("transform", TRANSFORM)]


def _translate(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = h.chain("bracket", "cssvar", "fraction", "rem")(m.group(2))
    if value is None:
        return None
    return [(f"--un-translate-{m.group(1)}", value), ("transform", TRANSFORM)]


def _skew(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = h.chain("bracket", "cssvar", "degree")(m.group(2))
    if value is None:
        return None
    return [(f"--un-skew-{m.group(1)}", value), ("transform", TRANSFORM)]


_FILTER_DEFAULTS = {"grayscale": "1", "invert": "1", "sepia": "1"}


def _filter(m, ctx: RuleContext) -> Optional[CSSEntries]:
    backdrop, name, s = bool(m.group(1)), m.group(2), m.group(3)
    if name == "blur":
        value = theme_value(ctx.theme, "blur", s or "") or h.chain("bracket", "cssvar", "px")(s or "")
    elif name == "hue-rotate":
        value = h.chain("bracket", "cssvar", "degree")(s or "")
    elif s is None:
        value = _FILTER_DEFAULTS.get(name)
    else:
        value = h.chain("bracket", "cssvar", "percent")(s)
    if value is None:
        return None
    prefix = "--un-backdrop-" if backdrop else "--un-"
    entries: CSSEntries = [(f"{prefix}{name}", f"{name}({value})")]
    if backdrop:
        entries += [("-webkit-backdrop-filter", BACKDROP_FILTER), ("backdrop-filter", BACKDROP_FILTER)]
    else:
        entries.append(("filter", FILTER))
    return entries


_TRANSITION_PROPS = {
    "": "color,background-color,border-color,text-decoration-color,fill,stroke,opacity,box-shadow,transform,filter,backdrop-filter",
    "all": "all",
    "colors": "color,background-color,border-color,text-decoration-color,fill,stroke",
    "opacity": "opacity",
    "shadow": "box-shadow",
    "transform": "transform",
}


def _transition(m, ctx: RuleContext) -> Optional[CSSEntries]:
    s = m.group(1) or ""
    if s == "none":
        return [("transition", "none")]
    props = _TRANSITION_PROPS.get(s)
    if props is None:
        return None
    return [
        ("transition-property", props),
        ("transition-timing-function", theme_value(ctx.theme, "easing", "DEFAULT")),
        ("transition-duration", theme_value(ctx.theme, "duration", "DEFAULT")),
    ]


def _duration(prop: str):
    def handle(m, ctx: RuleContext) -> Optional[CSSEntries]:
        value = h.chain("bracket", "cssvar", "time")(m.group(1))
        return [(prop, value)] if value is not None else None
    return handle


def _ease(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = theme_value(ctx.theme, "easing", m.group(1) or "") or h.bracket(m.group(1) or "")
    return [("transition-timing-function", value)] if value is not None else None


# --------------------------------------------------------------------------------------
# Positioning
# --------------------------------------------------------------------------------------

def _inset(m, ctx: RuleContext) -> Optional[CSSEntries]:
    side, axis, s = m.group(1), m.group(2), m.group(3)
    value = _inset_value(s)
    if value is None:
        return None
    if side != "inset":
        return [(side, value)]
    props = {"": ("top", "right", "bottom", "left"), "x": ("left", "right"), "y": ("top", "bottom")}[axis or ""]
    return [(prop, value) for prop in props]


def _z(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = h.chain("bracket", "cssvar", "auto", "number")(m.group(1))
    return [("z-index", value)] if value is not None else None


def _grid_template(m, ctx: RuleContext) -> Optional[CSSEntries]:
    prop = "grid-template-columns" if m.group(1) == "cols" else "grid-template-rows"
    s = m.group(2)
    if s == "none":
        return [(prop, "none")]
    if h.number(s) is not None:
        return [(prop, f"repeat({s},minmax(0,1fr))")]
    value = h.bracket(s)
    return [(prop, value)] if value is not None else None


def _grid_span(m, ctx: RuleContext) -> Optional[CSSEntries]:
    prop = "grid-column" if m.group(1) == "col" else "grid-row"
    s = m.group(2)
    if s == "full":
        return [(prop, "1/-1")]
    if h.number(s) is not None:
        return [(prop, f"span {s}/span {s}")]
    return None


def _basis(m, ctx: RuleContext) -> Optional[CSSEntries]:
    value = _size_value(m.group(1))
    return [("flex-basis", value)] if value is not None else None


_CURSORS = (
    "auto", "default", "none", "context-menu", "help", "pointer", "progress", "wait", "cell", "crosshair",
    "text", "vertical-text", "alias", "copy", "move", "no-drop", "not-allowed", "grab", "grabbing",
    "all-scroll", "col-resize", "row-resize", "n-resize", "e-resize", "s-resize", "w-resize",
    "ne-resize", "nw-resize", "se-resize", "sw-resize", "ew-resize", "ns-resize", "nesw-resize",
    "nwse-resize", "zoom-in", "zoom-out",
)

_ALIGNS = {
    "start": "flex-start", "end": "flex-end", "center": "center", "baseline": "baseline",
    "stretch": "stretch",
}
_JUSTIFIES = {
    "start": "flex-start", "end": "flex-end", "center": "center", "between": "space-between",
    "around": "space-around", "evenly": "space-evenly", "stretch": "stretch",
}


def _static(mapping: dict) -> List[list]:
    return [[name, body] for name, body in mapping.items()]


def _rules() -> List[Any]:
    rules: List[Any] = []

    # display / position
    rules += _static({
        "block": {"display": "block"},
        "inline-block": {"display": "inline-block"},
        "inline": {"display": "inline"},
        "flex": {"display": "flex"},
        "inline-flex": {"display": "inline-flex"},
        "grid": {"display": "grid"},
        "inline-grid": {"display": "inline-grid"},
        "table": {"display": "table"},
        "contents": {"display": "contents"},
        "flow-root": {"display": "flow-root"},
        "list-item": {"display": "list-item"},
        "hidden": {"display": "none"},
        "static": {"position": "static"},
        "fixed": {"position": "fixed"},
        "absolute": {"position": "absolute"},
        "relative": {"position": "relative"},
        "sticky": {"position": "sticky"},
        "visible": {"visibility": "visible"},
        "invisible": {"visibility": "hidden"},
        "box-border": {"box-sizing": "border-box"},
        "box-content": {"box-sizing": "content-box"},
        "sr-only": {
            "position": "absolute", "width": "1px", "height": "1px", "padding": "0", "margin": "-1px",
            "overflow": "hidden", "clip": "rect(0,0,0,0)", "white-space": "nowrap", "border-width": "0",
        },
        "aspect-square": {"aspect-ratio": "1/1"},
        "aspect-video": {"aspect-ratio": "16/9"},
    })
    rules.append([regex(r"^(top|right|bottom|left|inset)(?:-([xy]))?-(.+)$"), _inset,
                  {"autocomplete": ("inset-<num>", "top-<num>", "left-<num>", "right-<num>", "bottom-<num>")}])
    rules.append([regex(r"^z-(.+)$"), _z, {"autocomplete": "z-<num>"}])
    rules.append([regex(r"^overflow(?:-([xy]))?-(auto|hidden|clip|visible|scroll)$"),
                  lambda m, ctx: [(f"overflow-{m.group(1)}" if m.group(1) else "overflow", m.group(2))],
                  {"autocomplete": "overflow-(auto|hidden|visible|scroll)"}])

    # flex / grid
    rules += _static({
        "flex-row": {"flex-direction": "row"},
        "flex-row-reverse": {"flex-direction": "row-reverse"},
        "flex-col": {"flex-direction": "column"},
        "flex-col-reverse": {"flex-direction": "column-reverse"},
        "flex-wrap": {"flex-wrap": "wrap"},
        "flex-wrap-reverse": {"flex-wrap": "wrap-reverse"},
        "flex-nowrap": {"flex-wrap": "nowrap"},
        "flex-1": {"flex": "1 1 0%"},
        "flex-auto": {"flex": "1 1 auto"},
        "flex-initial": {"flex": "0 1 auto"},
        "flex-none": {"flex": "none"},
        "grow": {"flex-grow": "1"},
        "grow-0": {"flex-grow": "0"},
        "shrink": {"flex-shrink": "1"},
        "shrink-0": {"flex-shrink": "0"},
    })
    rules.append([regex(r"^basis-(.+)$"), _basis, {"autocomplete": "basis-<num>"}])
    rules.append([regex(r"^items-(start|end|center|baseline|stretch)$"),
                  lambda m, ctx: [("align-items", _ALIGNS[m.group(1)])]])
    rules.append([regex(r"^self-(auto|start|end|center|baseline|stretch)$"),
                  lambda m, ctx: [("align-self", _ALIGNS.get(m.group(1), m.group(1)))]])
    rules.append([regex(r"^justify-(start|end|center|between|around|evenly|stretch)$"),
                  lambda m, ctx: [("justify-content", _JUSTIFIES[m.group(1)])]])
    rules.append([regex(r"^content-(start|end|center|between|around|evenly|stretch)$"),
                  lambda m, ctx: [("align-content", _JUSTIFIES[m.group(1)])]])
    rules.append([regex(r"^place-(items|content|self)-(start|end|center|stretch)$"),
                  lambda m, ctx: [(f"place-{m.group(1)}", m.group(2))]])
    rules.append([regex(r"^gap-?([xy])?-(.+)$"), _gap, {"autocomplete": ("gap-<num>", "gap-x-<num>", "gap-y-<num>")}])
    rules.append([regex(r"^grid-(cols|rows)-(.+)$"), _grid_template, {"autocomplete": ("grid-cols-<num>", "grid-rows-<num>")}])
    rules.append([regex(r"^(col|row)-span-(.+)$"), _grid_span, {"autocomplete": ("col-span-<num>", "row-span-<num>")}])

    # spacing / sizing
    rules.append([regex(r"^p([xytrblse]?)-?(.+)$"), _spacing("padding"), {"autocomplete": "p<directions>-<num>"}])
    rules.append([regex(r"^m([xytrblse]?)-?(.+)$"), _spacing("margin"), {"autocomplete": "m<directions>-<num>"}])
    rules.append([regex(r"^(min-|max-)?([wh])-(.+)$"), _size,
                  {"autocomplete": ("w-<num>", "h-<num>", "w-full", "h-full", "w-screen", "h-screen", "max-w-$maxWidth")}])

    # typography
    rules += _static({
        "italic": {"font-style": "italic"},
        "not-italic": {"font-style": "normal"},
        "underline": {"text-decoration-line": "underline"},
        "line-through": {"text-decoration-line": "line-through"},
        "no-underline": {"text-decoration": "none"},
        "uppercase": {"text-transform": "uppercase"},
        "lowercase": {"text-transform": "lowercase"},
        "capitalize": {"text-transform": "capitalize"},
        "normal-case": {"text-transform": "none"},
        "truncate": {"overflow": "hidden", "text-overflow": "ellipsis", "white-space": "nowrap"},
        "break-words": {"overflow-wrap": "break-word"},
        "break-all": {"word-break": "break-all"},
        "list-none": {"list-style-type": "none"},
        "list-disc": {"list-style-type": "disc"},
        "list-decimal": {"list-style-type": "decimal"},
        "antialiased": {"-webkit-font-smoothing": "antialiased", "-moz-osx-font-smoothing": "grayscale"},
    })
    rules.append([regex(r"^text-(left|center|right|justify|start|end)$"),
                  lambda m, ctx: [("text-align", m.group(1))]])
    rules.append([regex(r"^text-(.+)$"), color_resolver("color", "text"), {"autocomplete": "text-$colors"}])
    rules.append([regex(r"^text-(.+)$"), _font_size, {"autocomplete": "text-$fontSize"}])
    rules.append([regex(r"^text-op(?:acity)?-?(.+)$"), _opacity_var("text"), {"autocomplete": "text-opacity-<percent>"}])
    rules.append([regex(r"^font-(.+)$"), _font, {"autocomplete": ("font-$fontWeight", "font-$fontFamily")}])
    rules.append([regex(r"^leading-(.+)$"), _leading, {"autocomplete": "leading-$lineHeight"}])
    rules.append([regex(r"^tracking-(.+)$"), _tracking, {"autocomplete": "tracking-$letterSpacing"}])
    rules.append([regex(r"^whitespace-(normal|nowrap|pre|pre-line|pre-wrap|break-spaces)$"),
                  lambda m, ctx: [("white-space", m.group(1))]])

    # backgrounds
    rules.append([regex(r"^bg-(.+)$"), color_resolver("background-color", "bg"), {"autocomplete": "bg-$colors"}])
    rules.append([regex(r"^bg-op(?:acity)?-?(.+)$"), _opacity_var("bg"), {"autocomplete": "bg-opacity-<percent>"}])
    rules.append([regex(r"^bg-gradient-to-([trbl]{1,2})$"), _gradient,
                  {"autocomplete": "bg-gradient-to-(t|tr|r|br|b|bl|l|tl)"}])
    rules.append([regex(r"^(from|via|to)-(.+)$"), _gradient_stop,
                  {"autocomplete": ("from-$colors", "via-$colors", "to-$colors")}])

    # borders
    rules.append([regex(r"^border(?:-([xytrblse]))?(?:-(.+))?$"), _border,
                  {"autocomplete": ("border", "border-<num>", "border-$colors", "border-(solid|dashed|dotted)")}])
    rules.append([regex(r"^border-op(?:acity)?-?(.+)$"), _opacity_var("border")])
    rules.append([regex(r"^rounded(?:-(tl|tr|bl|br|[trblse]))?(?:-(.+))?$"), _rounded,
                  {"autocomplete": ("rounded", "rounded-$borderRadius")}])

    # effects
    rules.append([regex(r"^op(?:acity)?-?(.+)$"), _opacity, {"autocomplete": "opacity-<percent>"}])
    rules.append([regex(r"^shadow(?:-(.+))?$"), _shadow, {"autocomplete": ("shadow", "shadow-$boxShadow")}])
    rules.append([regex(r"^ring(?:-(.+))?$"), _ring, {"autocomplete": ("ring", "ring-<num>", "ring-$colors")}])
    rules.append([regex(r"^(backdrop-)?(blur|brightness|contrast|grayscale|hue-rotate|invert|saturate|sepia)(?:-(.+))?$"),
                  _filter, {"autocomplete": ("blur-$blur", "backdrop-blur-$blur", "grayscale", "invert")}])

    # transforms
    rules += _static({
        "transform": {"transform": TRANSFORM},
        "transform-none": {"transform": "none"},
    })
    rules.append([regex(r"^scale-?([xy])?-(.+)$"), _scale, {"autocomplete": "scale-<percent>"}])
    rules.append([regex(r"^rotate-?([xyz])?-(.+)$"), _rotate, {"autocomplete": "rotate-<num>"}])
    rules.append([regex(r"^translate-([xyz])-(.+)$"), _translate, {"autocomplete": "translate-(x|y)-<num>"}])
    rules.append([regex(r"^skew-([xy])-(.+)$"), _skew])

    # transitions
    rules.append([regex(r"^transition(?:-(.+))?$"), _transition,
                  {"autocomplete": ("transition", "transition-(all|colors|opacity|shadow|transform|none)")}])
    rules.append([regex(r"^duration-(.+)$"), _duration("transition-duration"), {"autocomplete": "duration-<num>"}])
    rules.append([regex(r"^delay-(.+)$"), _duration("transition-delay"), {"autocomplete": "delay-<num>"}])
    rules.append([regex(r"^ease(?:-(.+))?$"), _ease, {"autocomplete": "ease-$easing"}])

    # interactivity
    rules.append([regex(r"^cursor-(.+)$"),
                  lambda m, ctx: [("cursor", m.group(1))] if m.group(1) in _CURSORS else None,
                  {"autocomplete": "cursor-(pointer|default|text|move|not-allowed)"}])
    rules.append([regex(r"^pointer-events-(auto|none)$"), lambda m, ctx: [("pointer-events", m.group(1))]])
    rules.append([regex(r"^select-(none|text|all|auto)$"), lambda m, ctx: [("user-select", m.group(1))]])
    rules.append([regex(r"^object-(contain|cover|fill|none|scale-down)$"), lambda m, ctx: [("object-fit", m.group(1))]])
    return rules


def preset_uno(**options: Any) -> Preset:
    preflights = [] if options.get("preflight") is False else [Preflight(lambda ctx: preflight_css())]
    return Preset(
        name="atomic/preset-uno",
        rules=_rules(),
        variants=default_variants(),
        preflights=preflights,
        theme=default_theme(),
        options=dict(options),
    )
