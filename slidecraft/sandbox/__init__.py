# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/sandbox/__init__.py
from slidecraft.sandbox.evaluator import clear_global_module_cache, evaluate_user_config, get_global_module_cache
from slidecraft.sandbox.interpreter import SandboxInterpreter
from slidecraft.sandbox.rewrite import rewrite_config_source

__all__ = [
    "SandboxInterpreter",
    "clear_global_module_cache",
    "evaluate_user_config",
    "get_global_module_cache",
    "rewrite_config_source",
]
