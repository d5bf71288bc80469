# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/net.py
from __future__ import annotations

import logging
from typing import Any, Optional

import aiohttp

from slidecraft.config import get_settings

logger = logging.getLogger(__name__)


def cdn_url(path: str, base: Optional[str] = None) -> str:
    base = base if base is not None else get_settings().CDN_BASE
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


async def fetch_text(url: str, timeout_sec: Optional[float] = None) -> str:
    timeout_sec = timeout_sec if timeout_sec is not None else get_settings().FETCH_TIMEOUT_S
    logger.debug("Fetching %s", url)
    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout_sec)) as sess:
        async with sess.get(url) as resp:
            resp.raise_for_status()
            return await resp.text()


async def fetch_json(url: str, timeout_sec: Optional[float] = None) -> Any:
    timeout_sec = timeout_sec if timeout_sec is not None else get_settings().FETCH_TIMEOUT_S
    logger.debug("Fetching %s", url)
    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout_sec)) as sess:
        async with sess.get(url) as resp:
            resp.raise_for_status()
            return await resp.json(content_type=None)
