# plugins/core_config_editor/tests/test_config_literal.py
import pytest

from backend.core.errors import ParseError
from plugins.core_config_editor.extractor import extract_config, render_config
from plugins.core_config_editor.literal import format_literal, parse_literal


class TestLiteralGrammar:
    def test_relaxed_object_syntax(self):
        text = """{
          // comment
          name: 'demo',
          "quoted key": "x",
          count: 3,
          ratio: -0.5,
          big: 1e3,
          hex: 0x1F,
          flags: [true, false, null,],
          nested: { a: { b: [] } }, /* trailing */
        }"""
        assert parse_literal(text) == {
            "name": "demo",
            "quoted key": "x",
            "count": 3,
            "ratio": -0.5,
            "big": 1000.0,
            "hex": 31,
            "flags": [True, False, None],
            "nested": {"a": {"b": []}},
        }

    def test_string_escapes(self):
        assert parse_literal(r"""'it\'s \"ok\"\n\té\x41\u{1F600}'""") == "it's \"ok\"\n\té" + "A" + "\U0001F600"

    def test_numeric_key_becomes_string(self):
        assert parse_literal("{1: 'a'}") == {"1": "a"}

    @pytest.mark.parametrize("text", [
        "{ fn: function () {} }",
        "{ run() {} }",
        "{ [key]: 1 }",
        "{ ...base }",
        "{ value: someIdentifier }",
        "{ value: undefined }",
        "{ value: `template` }",
        "[1,,2]",
        "{ a: 1 b: 2 }",
        "{ a: 'unterminated }",
        "{ a: NaN }",
        "{ a: -Infinity }",
        "{ big: 1e400 }",
        "{ small: -1e400 }",
        "{ s: '\\uD800' }",
        "{ s: '\\uDC00' }",
        "{ s: '\\uD800\\u0041' }",
        "{ s: '\\u{D83D}' }",
        "{ a: 1 } extra",
        "",
    ])
    def test_outside_grammar_raises(self, text):
        with pytest.raises(ParseError):
            parse_literal(text)

    def test_surrogate_pair_escape(self):
        assert parse_literal(r"'\uD83D\uDE00'") == "\U0001F600"

    def test_overflowing_number_points_at_the_number(self):
        with pytest.raises(ParseError, match="Non-finite") as exc_info:
            parse_literal("{ big: 1e400 }")
        assert exc_info.value.position == 7

    def test_error_carries_offset(self):
        with pytest.raises(ParseError) as exc_info:
            parse_literal("{ a: oops }")
        assert exc_info.value.position == 5
        assert "(at offset 5)" in exc_info.value.message

    def test_format_is_two_space_json(self):
        assert format_literal({"a": [1, "é"], "b": {}}) == '{\n  "a": [\n    1,\n    "é"\n  ],\n  "b": {}\n}'

    def test_format_refuses_non_finite_floats(self):
        with pytest.raises(ValueError):
            format_literal({"big": float("inf")})


class TestExtractor:
    SOURCE = (
        "// header { not a brace that counts\n"
        "const helper = 1;\n"
        "export const GAME_CONFIG = {\n"
        "  title: 'Tap }; Tap',\n"
        "  speed: 2, // fast\n"
        "};\n"
        "export default GAME_CONFIG;\n"
    )

    def test_extracts_value_prefix_and_suffix(self):
        extracted = extract_config(self.SOURCE)
        assert extracted.export_identifier == "GAME_CONFIG"
        assert extracted.export_kind == "const"
        assert extracted.value == {"title": "Tap }; Tap", "speed": 2}
        assert extracted.prefix == "// header { not a brace that counts\nconst helper = 1;\n"
        assert extracted.suffix == "\nexport default GAME_CONFIG;\n"

    def test_round_trip_keeps_prefix_and_suffix(self):
        extracted = extract_config(self.SOURCE)
        rendered = render_config(extracted.prefix, extracted.export_identifier, extracted.value, extracted.suffix)

        assert rendered.startswith(extracted.prefix + "export const GAME_CONFIG = {\n  \"title\"")
        assert rendered.endswith("};" + extracted.suffix)
        reparsed = extract_config(rendered)
        assert reparsed.value == extracted.value
        assert reparsed.prefix == extracted.prefix
        assert reparsed.suffix == extracted.suffix

    def test_let_and_var_are_rewritten_as_const(self):
        extracted = extract_config("export let settings = { a: 1 };")
        assert extracted.export_kind == "let"
        assert render_config(extracted.prefix, extracted.export_identifier, extracted.value, extracted.suffix) == \
            'export const settings = {\n  "a": 1\n};'

    def test_statement_without_semicolon_is_skipped(self):
        source = "export const first = { a: 1 }\nexport const second = { b: 2 };\n"
        extracted = extract_config(source)
        assert extracted.export_identifier == "second"
        assert extracted.prefix == "export const first = { a: 1 }\n"

    def test_export_inside_comment_is_ignored(self):
        source = "/* export const old = { a: 1 }; */\nexport const cfg = { b: 2 };"
        assert extract_config(source).export_identifier == "cfg"

    def test_no_export_statement(self):
        with pytest.raises(ParseError, match="No valid config export found"):
            extract_config("const config = { a: 1 };")

    def test_parse_error_offset_is_file_relative(self):
        source = "// x\nexport const cfg = { a: nope };"
        with pytest.raises(ParseError) as exc_info:
            extract_config(source)
        assert exc_info.value.position == source.index("nope")
