"""Tests for grammar evaluation against version profiles."""

import pytest

from escheck.grammar import CONFORMANT, NonConformant, evaluate
from escheck.profiles import resolve_profile, version_table

ALL_VERSIONS = [spec.aliases[0] for spec in version_table()]


def _conforms(source: str, version: str, module: bool = False, allow_hash_bang: bool = False) -> bool:
    profile = resolve_profile(version, module=module, allow_hash_bang=allow_hash_bang)
    return evaluate(source, profile).conformant


def _min_version(source: str, module: bool = False) -> str | None:
    """Lowest version the source conforms to."""
    for version in ALL_VERSIONS:
        if _conforms(source, version, module=module):
            return version
    return None


# Source -> lowest conforming version (script grammar)
MINIMUM_VERSIONS = [
    ("var x = 1;\nfunction f() { return x; }\n", "es3"),
    ("var o = { get x() { return 1; } };\n", "es5"),
    ("a.default = 1;\n", "es5"),
    ("var o = { a: 1, };\n", "es5"),
    ("const f = () => 1;\n", "es6"),
    ("var s = `a`;\n", "es6"),
    ("class A {}\n", "es6"),
    ("var o = { a };\n", "es6"),
    ("var f = function (a = 1) { return a; };\n", "es6"),
    ("var y = 2 ** 3;\n", "es7"),
    ("async function f() { await g(); }\n", "es8"),
    ("f(1, 2,);\n", "es8"),
    ("var a = { ...b };\n", "es9"),
    ("var r = /a/s;\n", "es9"),
    ("try { f(); } catch { g(); }\n", "es10"),
    ("var a = b?.c;\n", "es11"),
    ("var a = b ?? c;\n", "es11"),
    ("var n = 10n;\n", "es11"),
    ("a ||= b;\n", "es12"),
    ("var n = 1_000;\n", "es12"),
    ("class A { x = 1; }\n", "es13"),
    ("class A { #x = 1; }\n", "es13"),
]


class TestVersionGates:
    """Each construct is rejected below its version and accepted from it on."""

    @pytest.mark.parametrize("source,minimum", MINIMUM_VERSIONS)
    def test_minimum_version(self, source, minimum):
        assert _min_version(source) == minimum

    @pytest.mark.parametrize("source,minimum", MINIMUM_VERSIONS)
    def test_monotonic(self, source, minimum):
        """Conformance under a version implies conformance under every later one."""
        start = ALL_VERSIONS.index(minimum)
        assert all(_conforms(source, version) for version in ALL_VERSIONS[start:])

    @pytest.mark.parametrize("source,minimum", MINIMUM_VERSIONS)
    @pytest.mark.parametrize("short,year", [("es6", "es2015"), ("es7", "es2016"), ("es11", "es2020")])
    def test_aliases_agree(self, source, minimum, short, year):
        """Aliases of one level give identical results."""
        assert evaluate(source, resolve_profile(short)) == evaluate(source, resolve_profile(year))


class TestSpecExamples:
    """Core conformance examples."""

    def test_es5_source_everywhere(self, es5_source):
        """Plain ES5 source conforms to es5 and every later version."""
        for version in ALL_VERSIONS[ALL_VERSIONS.index("es5"):]:
            assert evaluate(es5_source, resolve_profile(version)) == CONFORMANT

    def test_arrow_function(self, arrow_source):
        """Arrow functions fail es5 and pass es6."""
        assert not _conforms(arrow_source, "es5")
        assert _conforms(arrow_source, "es6")

    def test_import_needs_module(self):
        """import/export fail script grammar and pass module grammar."""
        source = "import x from './x.js';\nexport default x;\n"
        assert not _conforms(source, "es6")
        assert _conforms(source, "es6", module=True)

    def test_import_message_in_script(self):
        result = evaluate("import x from './x.js';\n", resolve_profile("es2020"))
        assert isinstance(result, NonConformant)
        assert "sourceType: module" in result.message
        assert result.required_level is None

    def test_hash_bang(self):
        """A #! line fails unless the prefix is allowed."""
        source = "#!/usr/bin/env node\nvar x = 1;\n"
        for version in ("es5", "es2015", "es2022"):
            assert not _conforms(source, version)
        assert _conforms(source, "es5", allow_hash_bang=True)

    def test_hash_bang_fault_position(self):
        result = evaluate("#!/usr/bin/env node\nvar x = 1;\n", resolve_profile("es5"))
        assert isinstance(result, NonConformant)
        assert (result.line, result.column) == (1, 0)
        assert result.code == "#!/usr/bin/env node"


class TestDiagnostics:
    """Fault position, excerpt and message."""

    def test_first_fault_position(self):
        """Line is 1-based and column 0-based."""
        result = evaluate("var a = 1;\nlet b = 2;\nlet c = 3;\n", resolve_profile("es5"))
        assert isinstance(result, NonConformant)
        assert result.line == 2
        assert result.column == 0
        assert result.code == "let b = 2;"

    def test_message_names_version_and_position(self, arrow_source):
        result = evaluate(arrow_source, resolve_profile("es5"))
        assert isinstance(result, NonConformant)
        assert result.message.endswith("(1:0)")
        assert "es5" in result.message
        assert result.required_level == 6
        assert result.code.startswith("const f")

    def test_column_counts_characters(self):
        """Multi-byte characters count as one column."""
        result = evaluate("var s = 'é'; var t = `x`;\n", resolve_profile("es5"))
        assert isinstance(result, NonConformant)
        assert result.column == 21
        assert result.code == "`x`"

    def test_operator_fault_points_at_expression(self):
        result = evaluate("var y = 2 ** 3;\n", resolve_profile("es6"))
        assert isinstance(result, NonConformant)
        assert (result.line, result.column) == (1, 8)
        assert result.code == "2 ** 3"

    def test_earliest_fault_wins(self):
        """With several faults only the first in the document is reported."""
        source = "var a = 1;\nvar b = `x`;\nconst c = 2;\n"
        result = evaluate(source, resolve_profile("es5"))
        assert isinstance(result, NonConformant)
        assert result.line == 2

    def test_syntax_error(self):
        """Malformed source is non-conformant under every version."""
        for version in ("es5", "es2024"):
            result = evaluate("var = ;\n", resolve_profile(version))
            assert isinstance(result, NonConformant)
            assert result.line == 1

    def test_deterministic(self, arrow_source):
        """Evaluating twice gives equal results."""
        profile = resolve_profile("es5")
        assert evaluate(arrow_source, profile) == evaluate(arrow_source, profile)

    def test_empty_source_conforms(self):
        assert evaluate("", resolve_profile("es3")) == CONFORMANT


class TestContextRules:
    """Rules that depend on function or module context."""

    def test_await_outside_async(self):
        result = evaluate("function f() { await g(); }\n", resolve_profile("es2017"))
        assert isinstance(result, NonConformant)
        assert result.line == 1

    def test_top_level_await_script(self):
        assert not _conforms("await g();\n", "es2022")

    def test_top_level_await_module(self):
        assert not _conforms("await g();\n", "es2021", module=True)
        assert _conforms("await g();\n", "es2022", module=True)

    def test_async_arrow(self):
        source = "var f = async () => { await g(); };\n"
        assert not _conforms(source, "es2016")
        assert _conforms(source, "es2017")

    def test_dynamic_import(self):
        source = "import('./a.js');\n"
        assert not _conforms(source, "es2019")
        assert _conforms(source, "es2020")

    def test_jsx_never_conforms(self):
        assert not _conforms("var a = <div />;\n", "es2024")


# (source, version, module) that no grammar accepts in that context
CONTEXT_FAULTS = [
    ("return 1;\n", "es5", False),
    ("break;\n", "es5", False),
    ("continue;\n", "es5", False),
    ("while (a) { function f() { break; } }\n", "es5", False),
    ("switch (a) { case 1: continue; }\n", "es5", False),
    ("a: { continue a; }\n", "es5", False),
    ("for (;;) { break b; }\n", "es5", False),
    ("new.target;\n", "es6", False),
    ("var f = () => new.target;\n", "es6", False),
    ("super.x();\n", "es6", False),
    ("var o = { m: function () { return super.x; } };\n", "es6", False),
    ("function f() { for await (const x of y) {} }\n", "es2018", False),
    ("for await (const x of y) {}\n", "es2024", False),
    ("with (a) { b; }\n", "es6", True),
    ("'use strict';\nwith (a) { b; }\n", "es5", False),
    ("var x = 010;\n", "es6", True),
    ("function f() { 'use strict'; return 010; }\n", "es5", False),
    ("class A { m() { return 010; } }\n", "es6", False),
    ("'use strict';\nvar a;\ndelete a;\n", "es5", False),
    ("delete (a);\n", "es6", True),
    ("var o = { __proto__: a, __proto__: b };\n", "es5", False),
]

# Sources that stay valid in the given context
CONTEXT_VALID = [
    ("function f() { return 1; }\n", "es5", False),
    ("for (;;) { break; }\n", "es5", False),
    ("while (a) { continue; }\n", "es5", False),
    ("switch (a) { case 1: break; }\n", "es5", False),
    ("a: { break a; }\n", "es5", False),
    ("outer: for (;;) { for (;;) { continue outer; } }\n", "es5", False),
    ("function f() { return new.target; }\n", "es6", False),
    ("function f() { var g = () => new.target; }\n", "es6", False),
    ("class A extends B { m() { return super.m(); } }\n", "es6", False),
    ("var o = { m() { return super.x; } };\n", "es6", False),
    ("async function f() { for await (const x of y) {} }\n", "es2018", False),
    ("for await (const x of y) {}\n", "es2022", True),
    ("with (a) { b; }\n", "es5", False),
    ("var x = 010;\n", "es5", False),
    ("var x = 0.5, y = 0;\n", "es6", True),
    ("var o = { a: 1 };\ndelete o.a;\n", "es6", True),
    ("var a;\ndelete a;\n", "es5", False),
    ("var o = { __proto__: a, b: 1 };\n", "es5", False),
]


class TestEarlyErrors:
    """Statements and literals their surrounding context forbids."""

    @pytest.mark.parametrize("source,version,module", CONTEXT_FAULTS)
    def test_rejected(self, source, version, module):
        result = evaluate(source, resolve_profile(version, module=module))
        assert isinstance(result, NonConformant)
        assert result.required_level is None

    @pytest.mark.parametrize("source,version,module", CONTEXT_VALID)
    def test_accepted(self, source, version, module):
        assert evaluate(source, resolve_profile(version, module=module)) == CONFORMANT

    def test_return_message(self):
        result = evaluate("var a = 1;\nreturn a;\n", resolve_profile("es5"))
        assert isinstance(result, NonConformant)
        assert result.message == "'return' outside of function (2:0)"
        assert result.code == "return a;"

    def test_with_message(self):
        result = evaluate("with (a) { b; }\n", resolve_profile("es6", module=True))
        assert isinstance(result, NonConformant)
        assert result.message.startswith("'with' in strict mode")


class TestAwaitIdentifier:
    """``await`` is an ordinary identifier in script code outside async functions."""

    def test_await_call_in_script(self):
        assert evaluate("var r = await(x);\n", resolve_profile("es5")) == CONFORMANT

    def test_await_call_inside_sync_function(self):
        assert evaluate("function f() { return await(x); }\n", resolve_profile("es5")) == CONFORMANT

    def test_await_operand_in_script(self):
        result = evaluate("var r = await x;\n", resolve_profile("es2017"))
        assert isinstance(result, NonConformant)
        assert "outside an async function" in result.message

    def test_await_call_in_module_is_reserved(self):
        assert not _conforms("function f() { return await(x); }\n", "es2022", module=True)


class TestRegexGroups:
    """Regular expression features are found by scanning, not substring search."""

    def test_group_syntax_in_class(self):
        assert evaluate("var r = /[(?<]/;\n", resolve_profile("es5")) == CONFORMANT

    def test_real_named_group(self):
        assert not _conforms("var r = /(?<y>a)/;\n", "es2017")
        assert _conforms("var r = /(?<y>a)/;\n", "es2018")

    def test_property_escape_without_unicode_flag(self):
        assert evaluate("var r = /\\p{L}/;\n", resolve_profile("es5")) == CONFORMANT

    def test_property_escape_with_unicode_flag(self):
        assert not _conforms("var r = /\\p{L}/u;\n", "es2017")
        assert _conforms("var r = /\\p{L}/u;\n", "es2018")


class TestModuleBelowEs6:
    """Module grammar below ES2015 reports the version, not the grammar mismatch."""

    def test_version_message(self):
        result = evaluate("export var a = 1;\n", resolve_profile("es5", module=True))
        assert isinstance(result, NonConformant)
        assert result.message.startswith("'import/export' is not supported by es5")
        assert result.required_level == 6


@pytest.mark.slow
class TestLargeInput:
    """Whole-file walks over large sources."""

    def test_large_conformant_source(self):
        """A large file is walked completely."""
        source = "".join(f"function f{i}(a, b) {{ return a + b * {i}; }}\n" for i in range(20_000))
        assert evaluate(source, resolve_profile("es5")) == CONFORMANT

    def test_fault_at_end_of_large_source(self):
        body = "".join(f"var v{i} = {i};\n" for i in range(20_000))
        result = evaluate(body + "let last = 1;\n", resolve_profile("es5"))
        assert isinstance(result, NonConformant)
        assert result.line == 20_001
