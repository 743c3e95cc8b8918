import os
from textwrap import dedent

from natives.engine import DetectionContext, IdiomDetector, rewrite
from natives.spec import VIRTUAL_PREFIX, BinaryIdentity, ResolvedMatch

ROOT = os.path.abspath(os.path.join(os.sep, "proj"))
LOCATOR_DESCRIPTOR = os.path.join(ROOT, "node_modules", "@mapbox", "node-pre-gyp", "package.json")


def identity(name):
    return BinaryIdentity(
        source_path=os.path.join(ROOT, "build", "Release", name),
        virtual_id=VIRTUAL_PREFIX + "./" + name,
        output_name="./" + name,
        output_path=os.path.join(os.sep, "out", name),
    )


def resolve_all(text, binary_name, *existing):
    ctx = DetectionContext(
        file_path=os.path.join(ROOT, "lib", "index.js"),
        exists=set(existing).__contains__,
        locate_root=lambda p: ROOT,
    )
    return [ResolvedMatch(m, identity(binary_name)) for m in IdiomDetector().detect(text, ctx)]


def test_generic_lookup_becomes_virtual_require():
    text = "const addon = require('bindings')('addon');\nmodule.exports = addon;\n"

    patch, changed = rewrite(text, resolve_all(text, "addon.node"))

    assert changed
    assert patch.to_string() == (
        'const addon = require("\\u0000natives:./addon.node");\nmodule.exports = addon;\n'
    )


def test_nothing_resolved_means_no_change():
    text = "module.exports = require('./lib');\n"

    patch, changed = rewrite(text, [])

    assert not changed
    assert patch.to_string() == text


def test_pre_gyp_pair_is_rewritten_and_unused_locator_import_removed():
    # 1. Arrange
    text = dedent(
        """\
        var binary = require('@mapbox/node-pre-gyp');
        var path = require('path');
        var binding_path = binary.find(path.resolve(path.join(__dirname, '../package.json')));
        var binding = require(binding_path);
        module.exports = binding;
        """
    )
    resolved = resolve_all(text, "node_sqlite3.node", LOCATOR_DESCRIPTOR)

    # 2. Act
    patch, changed = rewrite(text, resolved)

    # 3. Assert
    assert changed
    assert patch.to_string() == (
        "var path = require('path');\n"
        'var binding_path = "./node_sqlite3.node";'
        'var binding = require("\\u0000natives:./node_sqlite3.node");\n'
        "module.exports = binding;\n"
    )


def test_locator_import_is_kept_while_still_referenced():
    text = dedent(
        """\
        var binary = require('@mapbox/node-pre-gyp');
        var binding_path = binary.find(path.join(__dirname, '../package.json'));
        var binding = require(binding_path);
        binding.version = binary.version;
        """
    )

    patch, _ = rewrite(text, resolve_all(text, "addon.node", LOCATOR_DESCRIPTOR))

    assert patch.to_string().startswith("var binary = require('@mapbox/node-pre-gyp');\n")
    assert 'var binding = require("\\u0000natives:./addon.node");' in patch.to_string()


def test_undoing_every_rewrite_restores_the_input():
    text = "a = require('bindings')('x');\nb = require('bindings')('y');\n"
    patch, _ = rewrite(text, resolve_all(text, "x.node"))

    patch.reset(0, len(text))

    assert patch.to_string() == text
