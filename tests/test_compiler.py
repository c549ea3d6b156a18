# =============================================================================
# test_compiler.py - Compiler Driver Tests
# =============================================================================
# Tests for the end-to-end transpilation pipeline.
#
# Test coverage includes:
#   - ZenoCompiler.compile_source / compile_file results
#   - Convenience functions transpile() and transpile_file()
#   - Error aggregation into ZenoCompilationError
#   - End-to-end scenarios from source text to Rust
# =============================================================================

import pytest
from zeno import (
    CompilerOptions,
    ZenoCompilationError,
    ZenoCompiler,
    transpile,
    transpile_file,
)
from zeno.ast import Program
from zeno.lexer import TokenType


# =============================================================================
# Compiler Class Tests
# =============================================================================

class TestZenoCompiler:
    """Test the ZenoCompiler class."""

    def test_compile_source_result(self):
        """A successful compile fills in every result field."""
        result = ZenoCompiler().compile_source("let x = 1;", "prog.zn")
        assert result.success
        assert result.filename == "prog.zn"
        assert isinstance(result.ast, Program)
        assert result.token_count == 6
        assert result.tokens[-1].type == TokenType.EOF
        assert result.errors == []
        assert "let x = 1_i64;" in result.rust_source

    def test_options_indent(self):
        """CompilerOptions.indent reaches the generator."""
        compiler = ZenoCompiler(CompilerOptions(indent="  "))
        result = compiler.compile_source("print(1)")
        assert '  print!("{}", 1_i64);' in result.rust_source.splitlines()

    def test_default_options(self):
        """Defaults match rustc's usual invocation."""
        options = CompilerOptions()
        assert options.rustc == "rustc"
        assert options.opt_level == 2
        assert options.indent == "    "

    def test_parse_errors_are_aggregated(self):
        """All parse errors end up in one ZenoCompilationError."""
        with pytest.raises(ZenoCompilationError) as exc_info:
            ZenoCompiler().compile_source("let = 1\nlet y 2", "bad.zn")
        error = exc_info.value
        assert len(error.errors) == 3
        report = str(error)
        assert "bad.zn:1:5: error: expected next token to be IDENTIFIER" in report
        assert report.endswith("3 errors generated")

    def test_unterminated_string_is_fatal(self):
        """An unterminated string stops compilation before parsing."""
        with pytest.raises(ZenoCompilationError) as exc_info:
            ZenoCompiler().compile_source('println("oops)', "str.zn")
        assert exc_info.value.errors == ["Unterminated string literal"]
        assert "str.zn:1:9: error: Unterminated string literal" in str(exc_info.value)
        assert str(exc_info.value).endswith("1 error generated")

    def test_compiler_is_reusable_after_error(self):
        """Errors from one compile do not leak into the next."""
        compiler = ZenoCompiler()
        with pytest.raises(ZenoCompilationError):
            compiler.compile_source("let = 1")
        assert compiler.compile_source("let x = 1").success

    def test_compile_file(self, tmp_path):
        """compile_file reads UTF-8 source from disk."""
        source = tmp_path / "hello.zn"
        source.write_text('println("héllo")', encoding="utf-8")
        result = ZenoCompiler().compile_file(source)
        assert result.filename == str(source)
        assert 'println!("{}", "h\\u{e9}llo");' in result.rust_source

    def test_compile_file_missing(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ZenoCompiler().compile_file(tmp_path / "nope.zn")


# =============================================================================
# Convenience Function Tests
# =============================================================================

class TestConvenienceFunctions:
    """Test transpile() and transpile_file()."""

    def test_transpile(self):
        assert transpile("let x = 1 + 2") == "fn main() {\n    let x = (1_i64 + 2_i64);\n}\n"

    def test_transpile_error(self):
        with pytest.raises(ZenoCompilationError):
            transpile("if x { ")

    def test_transpile_long_chain(self):
        """A thousand-term sum transpiles without exhausting the stack."""
        output = transpile("let x = " + " + ".join(["1"] * 1000))
        assert output.count("1_i64") == 1000

    def test_transpile_deep_nesting_error(self):
        """Excessive nesting is a compilation error with a clear message."""
        with pytest.raises(ZenoCompilationError) as exc_info:
            transpile("let x = " + "(" * 500 + "1" + ")" * 500)
        assert "Expression nested too deeply" in str(exc_info.value)

    def test_transpile_file_writes_output(self, tmp_path):
        """transpile_file writes the Rust source when asked to."""
        source = tmp_path / "prog.zn"
        source.write_text("print(true)", encoding="utf-8")
        output = tmp_path / "prog.rs"
        rust_source = transpile_file(source, output)
        assert output.read_text(encoding="utf-8") == rust_source
        assert 'print!("{}", true);' in rust_source

    def test_transpile_file_without_output(self, tmp_path):
        """Without output_path nothing is written."""
        source = tmp_path / "prog.zn"
        source.write_text("print(1)", encoding="utf-8")
        transpile_file(source)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["prog.zn"]


# =============================================================================
# End-to-End Scenarios
# =============================================================================

class TestScenarios:
    """Whole programs from Zeno source to Rust text."""

    def test_fizzbuzz(self):
        source = """
// FizzBuzz up to 15
for mut i = 1; i <= 15; i = i + 1 {
    if i % 15 == 0 {
        println("FizzBuzz");
    } else if i % 3 == 0 {
        println("Fizz");
    } else if i % 5 == 0 {
        println("Buzz");
    } else {
        println(i);
    }
}
"""
        assert transpile(source) == (
            "fn main() {\n"
            "    let mut i = 1_i64;\n"
            "    while (i <= 15_i64) {\n"
            "        if ((i % 15_i64) == 0_i64) {\n"
            '            println!("{}", "FizzBuzz");\n'
            "        } else if ((i % 3_i64) == 0_i64) {\n"
            '            println!("{}", "Fizz");\n'
            "        } else if ((i % 5_i64) == 0_i64) {\n"
            '            println!("{}", "Buzz");\n'
            "        } else {\n"
            '            println!("{}", i);\n'
            "        }\n"
            "        i = (i + 1_i64);\n"
            "    }\n"
            "}\n"
        )

    def test_comments_and_floats(self):
        source = """
/* compute an average */
let total: float = 7.5 + 2.5  // no semicolon
let avg = total / 2.0;
println(avg)
"""
        assert transpile(source) == (
            "fn main() {\n"
            "    let total: f64 = (7.5_f64 + 2.5_f64);\n"
            "    let avg = (total / 2.0_f64);\n"
            '    println!("{}", avg);\n'
            "}\n"
        )

    def test_only_comment(self):
        """An unterminated block comment yields an empty main."""
        assert transpile("/* unterminated") == "fn main() {\n}\n"
