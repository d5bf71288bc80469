# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/presets/__init__.py
from slidecraft.css.presets.preset_attributify import preset_attributify
from slidecraft.css.presets.preset_icons import preset_icons
from slidecraft.css.presets.preset_uno import preset_uno

__all__ = ["preset_uno", "preset_attributify", "preset_icons"]
