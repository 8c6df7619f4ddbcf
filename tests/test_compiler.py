"""
Lingual Compiler Driver Test Suite
==================================

Tests for the full front end pipeline and the pieces around it.

Test Organization
-----------------
- TestCompilerOptions: Configuration validation
- TestCompileSource: End-to-end compilation
- TestCompileContext: Diagnostic accumulation and reports
- TestCompilerErrors: Exception formatting
- TestLanguages: Target profiles and the emitter boundary
- TestASTPrinter: Debug output
"""

from pathlib import Path

import pytest

from lingual import LingualError, __version__
from lingual.compiler import (
    ASTPrinter,
    CompilationFailedError,
    CompileContext,
    Compiler,
    CompilerOptions,
    Diagnostic,
    DiagnosticCode,
    Severity,
    compile_lingual,
)
from lingual.compiler.ast import (
    FunctionDeclaration,
    MacroCall,
    MacroDefinition,
    Program,
    ReturnStatement,
    VariableDeclaration,
)
from lingual.compiler.errors import CompilerError, MacroExpansionError
from lingual.compiler.parser import parse_source
from lingual.compiler.visitor import walk
from lingual.errors import SourcePosition, SourceSpan
from lingual.languages import (
    LanguageProfile,
    TargetLanguage,
    available_targets,
    get_language,
    get_profile,
    register_language,
    render_call_template,
    render_property_template,
)
from lingual.languages.profiles import PROFILES


# =============================================================================
# Options Tests
# =============================================================================

class TestCompilerOptions:
    """Test CompilerOptions validation."""

    def test_defaults(self):
        """JavaScript is the default target."""
        options = CompilerOptions()
        assert options.target == "javascript"
        assert options.expand_inline_macros
        assert options.max_expansion_passes == 64
        assert options.filename == "<input>"
        assert options.middleware_names == ["variable-renamer", "hoister"]

    def test_unknown_target(self):
        """Unknown targets are rejected up front."""
        with pytest.raises(ValueError) as exc_info:
            CompilerOptions(target="cobol")
        assert "cobol" in str(exc_info.value)

    def test_pass_limit_must_be_positive(self):
        """At least one expansion pass is needed."""
        with pytest.raises(ValueError):
            CompilerOptions(max_expansion_passes=0)

    def test_middleware_override(self):
        """An explicit list replaces the target's own."""
        options = CompilerOptions(target="typescript", middleware=["hoister"])
        assert options.middleware_names == ["hoister"]

    @pytest.mark.parametrize("target,expected", [
        ("typescript", ["variable-renamer", "type-checker", "hoister"]),
        ("csharp", ["variable-renamer", "type-checker"]),
        ("python", ["variable-renamer", "hoister"]),
        ("gdscript", ["variable-renamer", "hoister"]),
    ])
    def test_target_middleware(self, target, expected):
        """Each target names its passes."""
        assert CompilerOptions(target=target).middleware_names == expected


# =============================================================================
# Pipeline Tests
# =============================================================================

class TestCompileSource:
    """End-to-end compilation through Compiler."""

    def test_add_function(self):
        """A typed function compiles cleanly and its body is typed."""
        compiler = Compiler(CompilerOptions(target="typescript"))
        result = compiler.compile_source("fn add(a: number, b: number): number { return a + b; }")
        assert result.success
        assert result.errors == []

        func = result.program.body[0]
        assert isinstance(func, FunctionDeclaration)
        ret = func.body.statements[0]
        assert isinstance(ret, ReturnStatement)
        assert ret.value.inferred_type == "number"

    def test_let_sum(self):
        """let x = 1 + 2 has no errors and type number."""
        result = Compiler(CompilerOptions(target="typescript")).compile_source("let x = 1 + 2;")
        assert result.errors == []
        decl = result.program.body[0]
        assert isinstance(decl, VariableDeclaration)
        assert decl.inferred_type == "number"

    def test_result_keeps_every_stage(self):
        """Tokens, the parsed tree and the final tree are all available."""
        result = Compiler().compile_source("macro m() { go(); } end @m();")
        assert result.token_count == len(result.tokens) > 0
        assert any(isinstance(n, MacroDefinition) for n in walk(result.ast))
        assert not any(isinstance(n, (MacroDefinition, MacroCall)) for n in walk(result.program))

    def test_parse_error_becomes_diagnostic(self):
        """A syntax error stops the build and is reported, not raised."""
        result = Compiler().compile_source("let x = ;", filename="bad.lin")
        assert not result.success
        assert result.program is None
        assert result.ast is None
        error = result.errors[0]
        assert error.code == DiagnosticCode.PARSE_ERROR
        assert error.location == SourcePosition(1, 9)
        assert result.context.filename == "bad.lin"

    def test_deep_nesting_becomes_diagnostic(self):
        """Excessive nesting fails the build with a parse error."""
        depth = 200
        source = "let x = " + "(" * depth + "1" + ")" * depth + ";"
        result = Compiler().compile_source(source)
        assert not result.success
        assert [e.code for e in result.errors] == [DiagnosticCode.PARSE_ERROR]
        assert result.errors[0].message == "Expression nested too deeply"

    def test_failing_inline_macro_becomes_diagnostic(self):
        """Exceptions from registered inline macros do not escape."""
        compiler = Compiler()
        compiler.inline_macros.register("lookup", lambda key: {}[key])
        result = compiler.compile_source('let s = @lookup("x");')
        assert not result.success
        assert [e.code for e in result.errors] == [DiagnosticCode.INLINE_MACRO_ERROR]

    def test_default_filename_from_options(self):
        """Diagnostics use the configured filename when none is passed."""
        result = Compiler(CompilerOptions(filename="app.lin")).compile_source("let x = ;")
        assert result.filename == "app.lin"
        assert result.context.filename == "app.lin"

    def test_type_error_fails_build(self):
        """Type errors make success False but the program is still built."""
        result = Compiler(CompilerOptions(target="typescript")).compile_source('let y = 1 - "x";')
        assert not result.success
        assert result.program is not None
        assert result.errors[0].code == DiagnosticCode.TYPE_ERROR

    def test_javascript_skips_type_checker(self):
        """Targets without the type checker do not report type errors."""
        result = Compiler(CompilerOptions(target="javascript")).compile_source('let y = 1 - "x";')
        assert result.success
        assert result.program.body[0].inferred_type is None

    def test_warnings_do_not_fail(self):
        """Renaming warnings leave success True."""
        result = Compiler().compile_source("let total = 0;")
        assert result.success
        assert [w.code for w in result.warnings] == [DiagnosticCode.VARIABLES_RENAMED]

    def test_macro_and_type_errors_together(self):
        """One run reports problems from every stage."""
        result = Compiler(CompilerOptions(target="typescript")).compile_source(
            '@nope(); let y = 1 - "x";'
        )
        codes = [e.code for e in result.errors]
        assert codes == [DiagnosticCode.UNDEFINED_MACRO, DiagnosticCode.TYPE_ERROR]

    def test_hoisting_applied(self):
        """The javascript chain hoists declarations."""
        result = Compiler().compile_source("f(); let x = 1;")
        assert isinstance(result.program.body[0], VariableDeclaration)

    def test_custom_inline_macro(self):
        """Inline macros registered on the compiler are used."""
        compiler = Compiler(CompilerOptions(middleware=[]))
        compiler.inline_macros.register("greet", lambda name: f"hello {name}")
        result = compiler.compile_source('let s = @greet("bob");')
        assert result.program.body[0].initializer.value == "hello bob"

    def test_inline_macros_disabled(self):
        """expand_inline_macros=False leaves builtins undefined."""
        compiler = Compiler(CompilerOptions(expand_inline_macros=False))
        result = compiler.compile_source('let s = @upper("x");')
        assert result.errors[0].code == DiagnosticCode.UNDEFINED_MACRO

    def test_pass_limit_option(self):
        """max_expansion_passes bounds recursive macros."""
        compiler = Compiler(CompilerOptions(max_expansion_passes=2))
        result = compiler.compile_source("macro r() { @r(); } end @r();")
        assert [e.code for e in result.errors] == [DiagnosticCode.MACRO_RECURSION_LIMIT]

    def test_compile_file(self, tmp_path: Path):
        """Files are read and named in the result."""
        source = tmp_path / "app.lin"
        source.write_text("fn main() { return 0; }", encoding="utf-8")
        result = Compiler().compile_file(source)
        assert result.success
        assert result.filename == str(source)

    def test_compile_missing_file(self, tmp_path: Path):
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Compiler().compile_file(tmp_path / "missing.lin")

    def test_compile_lingual(self):
        """The convenience function returns the program."""
        program = compile_lingual("let x = 1;", target="python")
        assert isinstance(program, Program)
        assert program.body[0].name == "_x_0"

    def test_compile_lingual_raises(self):
        """The convenience function raises with the full report."""
        with pytest.raises(CompilationFailedError) as exc_info:
            compile_lingual('let y = 1 - "x";', target="typescript", filename="m.lin")
        error = exc_info.value
        assert error.error_count == 1
        assert "m.lin:1:9: error: Invalid operation: number - string [TYPE_ERROR]" in str(error)
        assert isinstance(error, LingualError)


# =============================================================================
# Context Tests
# =============================================================================

class TestCompileContext:
    """Test diagnostic accumulation."""

    def test_empty(self):
        """A fresh context has nothing recorded."""
        context = CompileContext()
        assert not context.has_errors()
        assert context.error_count() == 0
        assert context.warning_count() == 0
        assert context.macros == {}

    def test_add_error_and_warning(self):
        """Errors and warnings are kept apart, in order."""
        context = CompileContext()
        first = context.add_error("one", DiagnosticCode.TYPE_ERROR, SourcePosition(1, 2))
        context.add_warning("two", DiagnosticCode.VARIABLES_RENAMED)
        context.add_error("three", DiagnosticCode.PARSE_ERROR)
        assert [e.message for e in context.errors] == ["one", "three"]
        assert [w.message for w in context.warnings] == ["two"]
        assert first.severity == Severity.ERROR
        assert context.warnings[0].severity == Severity.WARNING

    def test_diagnostic_format(self):
        """Diagnostics format as file:line:col: severity: message [CODE]."""
        diagnostic = Diagnostic("bad", DiagnosticCode.TYPE_ERROR, SourcePosition(3, 4))
        assert diagnostic.format("a.lin") == "a.lin:3:4: error: bad [TYPE_ERROR]"

    def test_diagnostic_without_location(self):
        """Without a position only the severity prefix is shown."""
        diagnostic = Diagnostic("x", DiagnosticCode.MIDDLEWARE_NOT_FOUND, severity=Severity.WARNING)
        assert str(diagnostic) == "warning: x [MIDDLEWARE_NOT_FOUND]"

    def test_report(self):
        """The report lists errors, then warnings, then a summary."""
        context = CompileContext(filename="main.lin")
        context.add_error("bad", DiagnosticCode.TYPE_ERROR, SourcePosition(1, 5))
        context.add_warning("meh", DiagnosticCode.VARIABLES_RENAMED)
        lines = context.report().splitlines()
        assert lines[0] == "main.lin:1:5: error: bad [TYPE_ERROR]"
        assert lines[1] == "warning: meh [VARIABLES_RENAMED]"
        assert lines[-1] == "1 error, 1 warning"

    def test_report_plural(self):
        """The summary pluralises."""
        context = CompileContext()
        context.add_error("a", DiagnosticCode.TYPE_ERROR)
        context.add_error("b", DiagnosticCode.TYPE_ERROR)
        assert context.report().splitlines()[-1] == "2 errors, 0 warnings"

    def test_raise_if_errors(self):
        """raise_if_errors() only raises when errors exist."""
        context = CompileContext()
        context.add_warning("w", DiagnosticCode.VARIABLES_RENAMED)
        context.raise_if_errors()

        context.add_error("e", DiagnosticCode.TYPE_ERROR)
        with pytest.raises(CompilationFailedError) as exc_info:
            context.raise_if_errors()
        assert exc_info.value.error_count == 1
        assert exc_info.value.report == context.report()


# =============================================================================
# Error Tests
# =============================================================================

class TestCompilerErrors:
    """Test exception formatting and hierarchy."""

    def test_location(self):
        """location combines file and position."""
        error = CompilerError("oops", SourcePosition(2, 3), filename="f.lin")
        assert error.location == "f.lin:2:3"
        assert str(error) == "f.lin:2:3: error: oops"

    def test_without_position(self):
        """Errors without a position have no location prefix."""
        assert str(CompilerError("oops")) == "error: oops"

    def test_hint(self):
        """Hints are appended on their own line."""
        error = CompilerError("oops", SourcePosition(1, 1), hint="try this")
        assert str(error).splitlines()[-1] == "hint: try this"

    def test_macro_error_message(self):
        """Macro errors name the macro."""
        error = MacroExpansionError("upper", "failed")
        assert error.message == "macro 'upper': failed"
        assert error.macro_name == "upper"

    def test_hierarchy(self):
        """Every compiler error is a LingualError."""
        assert issubclass(CompilerError, LingualError)
        assert issubclass(CompilationFailedError, CompilerError)


class TestSourceSpan:
    """Test position helpers."""

    def test_positions_order(self):
        """Positions compare by line, then column."""
        assert SourcePosition(1, 9) < SourcePosition(2, 1)
        assert SourcePosition(2, 1) < SourcePosition(2, 2)

    def test_encloses(self):
        """A span encloses spans inside it, including itself."""
        outer = SourceSpan(SourcePosition(1, 1), SourcePosition(3, 1))
        inner = SourceSpan(SourcePosition(2, 1), SourcePosition(2, 5))
        assert outer.encloses(inner)
        assert outer.encloses(outer)
        assert not inner.encloses(outer)

    def test_merge(self):
        """merge covers both spans."""
        a = SourceSpan(SourcePosition(1, 5), SourcePosition(1, 8))
        b = SourceSpan(SourcePosition(1, 1), SourcePosition(1, 3))
        assert a.merge(b) == SourceSpan(SourcePosition(1, 1), SourcePosition(1, 8))
        assert str(a) == "1:5-1:8"


# =============================================================================
# Language Tests
# =============================================================================

class FakeLanguage(TargetLanguage):
    """Minimal emitter used to exercise the boundary."""
    profile = LanguageProfile(
        name="fake",
        display_name="Fake",
        description="Test target",
        file_extension=".fake",
        middleware_dependencies=("hoister",),
        function_mappings=get_profile("typescript").function_mappings,
        property_mappings=get_profile("python").property_mappings,
    )

    def transpile(self, program, context):
        return "\n".join(type(stmt).__name__ for stmt in program.body)

    def generate_package_files(self, output_dir, base_name):
        (output_dir / f"{base_name}.manifest").write_text("fake", encoding="utf-8")


@pytest.fixture
def fake_language():
    language = FakeLanguage()
    register_language(language)
    yield language
    PROFILES.pop("fake", None)
    from lingual import languages
    languages._LANGUAGES.pop("fake", None)


class TestLanguages:
    """Test target profiles and the emitter boundary."""

    def test_available_targets(self):
        """The built-in targets are listed in order."""
        assert available_targets()[:5] == [
            "javascript", "typescript", "python", "csharp", "gdscript",
        ]

    def test_unknown_profile(self):
        """Unknown targets raise KeyError."""
        with pytest.raises(KeyError):
            get_profile("cobol")

    def test_profile_lookup(self):
        """Mappings are found by dotted pattern."""
        profile = get_profile("python")
        mapping = profile.find_function("Math.floor")
        assert mapping.template == "math.floor({args})"
        assert mapping.imports == ("import math",)
        assert profile.find_function("nope.nothing") is None

    def test_async_mappings(self):
        """http calls are awaited on every target."""
        for name in ("javascript", "typescript", "python", "csharp", "gdscript"):
            assert get_profile(name).find_function("http.get").is_async

    def test_render_call_template(self):
        """{args} and {args[i]} are filled in."""
        assert render_call_template("f({args})", ["a", "b"]) == "f(a, b)"
        assert render_call_template("post({args[0]}, {args[1]})", ["u", "d"]) == "post(u, d)"

    def test_render_property_template(self):
        """Method properties get a call suffix."""
        assert render_property_template("len({object})", "xs") == "len(xs)"
        assert render_property_template("{object}.json", "r", is_method=True) == "r.json()"

    def test_register_language(self, fake_language):
        """Registered emitters become targets."""
        assert "fake" in available_targets()
        assert get_language("fake") is fake_language
        assert CompilerOptions(target="fake").middleware_names == ["hoister"]

    def test_language_properties(self, fake_language):
        """Profile data is exposed on the emitter."""
        assert fake_language.name == "fake"
        assert fake_language.display_name == "Fake"
        assert fake_language.middleware_dependencies == ["hoister"]
        assert len(fake_language.function_mappings) == 8

    def test_transpile_bridges(self, fake_language):
        """Call and property bridges use the profile tables."""
        assert fake_language.transpile_call("Math", "floor", ["x"]) == "Math.floor(x)"
        assert fake_language.transpile_property("response", "json") == "await response.json()"
        assert fake_language.transpile_property("data", "length") == "len(data)"
        assert fake_language.transpile_call("unknown", "call", []) is None

    def test_emitter_consumes_final_program(self, fake_language, tmp_path):
        """An emitter receives the program after middleware."""
        result = Compiler(CompilerOptions(target="fake")).compile_source("f(); let x = 1;")
        assert fake_language.transpile(result.program, result.context) == (
            "VariableDeclaration\nExpressionStatement"
        )
        fake_language.generate_package_files(tmp_path, "app")
        assert (tmp_path / "app.manifest").exists()

    def test_unregistered_language(self):
        """Profiles without an emitter have no language object."""
        assert get_language("typescript") is None


# =============================================================================
# Printer Tests
# =============================================================================

class TestASTPrinter:
    """Test the debug printer."""

    def test_function(self):
        """Functions show their signature."""
        program = parse_source("fn add(a: number, b: number): number { return a + b; }")
        lines = ASTPrinter().print(program).splitlines()
        assert lines[0] == "Program"
        assert lines[1] == "  Function: add(a: number, b: number): number"
        assert lines[2] == "    Block"
        assert lines[3] == "      Return (a + b)"

    def test_inferred_types_shown(self):
        """Types appear after typed nodes."""
        program = compile_lingual("let x = 1 + 2;", target="typescript")
        output = ASTPrinter().print(program)
        assert "Variable (let): _x_0 = (1 + 2) : number : number" in output

    def test_types_hidden(self):
        """show_types=False omits types."""
        program = compile_lingual("let x = 1;", target="typescript")
        assert ": number" not in ASTPrinter(show_types=False).print(program)

    def test_declarative_forms(self):
        """Types, imports, apis and macros are printed."""
        program = parse_source('''
            import { a, b } from "m";
            type User { name: string }
            api ping { method: post path: "/p" }
            macro m(x) { x; } end
        ''')
        output = ASTPrinter().print(program)
        assert "Import: a, b from 'm'" in output
        assert "Type: User { name: string }" in output
        assert "Api: ping POST '/p'" in output
        assert "Macro: m(x)" in output


class TestVersion:
    """Test package metadata."""

    def test_version(self):
        """The package exposes its version."""
        assert __version__ == "1.0.0"
