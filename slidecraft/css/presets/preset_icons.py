# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/presets/preset_icons.py
"""
Pure-CSS icons from iconify collections.

``i-<collection>-<icon>`` (or ``i-<collection>:<icon>``) renders the SVG as a
CSS mask when the icon paints with ``currentColor``, otherwise as a
background image. Collections come from the ``collections`` option
(name -> iconify JSON) or are fetched once per process from
``<cdn>@iconify-json/<collection>/icons.json``.
"""
from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict, Mapping, Optional, Tuple

import aiohttp

from slidecraft.config import get_settings
from slidecraft.css.config import CSSEntries, Preset, RuleContext
from slidecraft.css.utils import fmt_number, regex
from slidecraft.net import cdn_url, fetch_json
from slidecraft.runtime.modules import ModuleCache

logger = logging.getLogger(__name__)

_ICON_RE = regex(r"^i-([a-z0-9]+(?:-[a-z0-9]+)*)(?::([a-z0-9]+(?:-[a-z0-9]+)*))?$")
_ENCODE = (("\"", "'"), ("%", "%25"), ("#", "%23"), ("{", "%7B"), ("}", "%7D"), ("<", "%3C"), (">", "%3E"))


def encode_svg_for_css(svg: str) -> str:
    svg = re.sub(r"\s+", " ", svg)
    for src, dst in _ENCODE:
        svg = svg.replace(src, dst)
    return svg


def icon_to_svg(collection: Mapping[str, Any], name: str, scale: float = 1.0) -> Optional[str]:
    icons = collection.get("icons") or {}
    aliases = collection.get("aliases") or {}
    seen = set()
    while name not in icons and name in aliases and name not in seen:
        seen.add(name)
        name = aliases[name].get("parent", "")
    icon = icons.get(name)
    if icon is None:
        return None
    width = icon.get("width", collection.get("width", 16))
    height = icon.get("height", collection.get("height", 16))
    size = f"{fmt_number(scale)}em"
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width} {height}" '
        f'width="{size}" height="{size}">{icon["body"]}</svg>'
    )


def icon_entries(svg: str, mode: str = "auto", scale: float = 1.0) -> CSSEntries:
    url = f'url("data:image/svg+xml;utf8,{encode_svg_for_css(svg)}")'
    size = f"{fmt_number(scale)}em"
    if mode == "mask" or (mode == "auto" and "currentColor" in svg):
        return [
            ("--un-icon", url),
            ("-webkit-mask", "var(--un-icon) no-repeat"),
            ("mask", "var(--un-icon) no-repeat"),
            ("-webkit-mask-size", "100% 100%"),
            ("mask-size", "100% 100%"),
            ("background-color", "currentColor"),
            ("color", "inherit"),
            ("width", size),
            ("height", size),
        ]
    return [
        ("background", f"{url} no-repeat"),
        ("background-size", "100% 100%"),
        ("background-color", "transparent"),
        ("width", size),
        ("height", size),
    ]


class IconLoader:
    """Collection name -> iconify JSON, from the explicit mapping or the CDN."""

    # url -> collection (None when unavailable), shared by every loader in the process
    remote = ModuleCache()

    def __init__(self, collections: Optional[Mapping[str, Any]] = None, cdn: Optional[str] = None):
        self.collections: Dict[str, Any] = dict(collections or {})
        self.cdn = cdn

    @staticmethod
    async def _fetch(name: str, url: str) -> Optional[Mapping[str, Any]]:
        try:
            return await fetch_json(url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug("Icon collection %s unavailable: %s", name, e)
            return None

    async def get(self, name: str) -> Optional[Mapping[str, Any]]:
        if name in self.collections:
            return self.collections[name]
        if self.cdn is None:
            return None
        url = cdn_url(f"@iconify-json/{name}/icons.json", base=self.cdn)
        return await self.remote.load(url, lambda: self._fetch(name, url))

    def candidates(self, body: str, explicit: Optional[str]) -> Tuple[Tuple[str, str], ...]:
        if explicit:
            return ((body, explicit),)
        parts = body.split("-")
        return tuple(("-".join(parts[:i]), "-".join(parts[i:])) for i in range(1, len(parts)))


def preset_icons(**options: Any) -> Preset:
    scale = float(options.get("scale", 1.0))
    mode = options.get("mode", "auto")
    cdn = options.get("cdn")
    if cdn is True:
        cdn = get_settings().CDN_BASE
    loader = IconLoader(options.get("collections"), cdn)

    async def handle(m, ctx: RuleContext) -> Optional[CSSEntries]:
        for collection_name, icon_name in loader.candidates(m.group(1), m.group(2)):
            collection = await loader.get(collection_name)
            if collection is None:
                continue
            svg = icon_to_svg(collection, icon_name, scale)
            if svg is not None:
                return icon_entries(svg, mode, scale)
        return None

    return Preset(
        name="atomic/preset-icons",
        rules=[[_ICON_RE, handle, {"layer": "icons"}]],
        layers={"icons": -30},
        options={**options, "loader": loader},
    )
