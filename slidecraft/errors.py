# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/errors.py
from __future__ import annotations

from typing import Any, List, Optional


class SlidecraftError(Exception):
    """Base error for the slide compilation pipeline"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ComponentSourceError(SlidecraftError):
    """Raised when a component-source document is missing a required block"""
    def __init__(self, message: str, slide_index: Optional[int] = None):
        self.slide_index = slide_index
        super().__init__(message)


class SlideCompileError(SlidecraftError):
    """Raised when a compile attempt produced errors instead of runnable code"""
    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        self.errors = list(errors or [])
        super().__init__(message)


class ModuleResolutionError(SlidecraftError):
    """Raised when compiled code imports a specifier nobody registered"""
    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(f"Module not found: {specifier!r}")


class SandboxError(SlidecraftError):
    """Raised when sandboxed configuration code uses a construct outside the whitelist"""
    def __init__(self, message: str, lineno: Optional[int] = None):
        self.lineno = lineno
        if lineno is not None:
            message = f"{message} (line {lineno})"
        super().__init__(message)


class ConfigEvaluationError(SlidecraftError):
    """Raised when a user configuration cannot be evaluated"""


class EngineNotInitializedError(SlidecraftError):
    """Raised when the CSS engine is used before init()"""
    def __init__(self, what: str = "generator"):
        super().__init__(f"Failed to initialize {what}")
