# SPDX-License-Identifier: MIT

import pytest

from slidecraft.sandbox.rewrite import rewrite_config_source


@pytest.mark.parametrize("source, expected", [
    ("from atomic import define_config",
     'define_config = (await __import__("atomic")).define_config'),
    ("from atomic import define_config, preset_uno as uno",
     'define_config = (await __import__("atomic")).define_config; uno = (await __import__("atomic")).preset_uno'),
    ("from 'atomic.core' import h",
     'h = (await __import__("atomic.core")).h'),
    ("import atomic.core as core",
     'core = await __import__("atomic.core")'),
    ("import atomic",
     'atomic = await __import__("atomic")'),
    ('theme = (await import("theme.json")).default',
     'theme = (await __import__("theme.json")).default'),
    ("export default define_config()",
     "return define_config()"),
])
def test_rewrite_forms(source, expected):
    assert rewrite_config_source(source) == expected


def test_multiline_import_keeps_line_numbers():
    source = "from atomic import (\n    define_config,\n    preset_uno,\n)\nexport default 1\n"
    rewritten = rewrite_config_source(source)
    assert rewritten.count("\n") == source.count("\n")
    assert rewritten.splitlines()[4] == "return 1"
    assert rewritten.splitlines()[0] == (
        'define_config = (await __import__("atomic")).define_config; '
        'preset_uno = (await __import__("atomic")).preset_uno'
    )


def test_only_first_export_default_is_rewritten():
    rewritten = rewrite_config_source("export default 1\nexport default 2")
    assert rewritten == "return 1\nexport default 2"


def test_unrecognized_import_names_are_left_alone():
    source = "from atomic import *"
    assert rewrite_config_source(source) == source
