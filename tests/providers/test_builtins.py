"""Tests for the built-in providers."""

import pytest

from treelex import ParseFailure, ScriptTokenizer, SourcePosition, TokenType, tokenize
from treelex.context import ScopeKind
from treelex.providers.builtins import NUMBER_FORMATS, builtin_providers


def _only_child(source: str):
    root = tokenize(source)
    assert len(root.children) == 1, root.children
    return root.children[0]


class TestBuiltinSet:
    def test_fresh_instances(self) -> None:
        first = builtin_providers()
        second = builtin_providers()
        assert [p.name for p in first] == [p.name for p in second]
        assert all(a is not b for a, b in zip(first, second))

    def test_number_format_order(self) -> None:
        assert [name for name, _ in NUMBER_FORMATS] == [
            "decimal",
            "hexadecimal",
            "exponential",
            "binary",
            "octal",
        ]


class TestNumber:
    """Numeric literals and their formats."""

    @pytest.mark.parametrize(
        ("source", "number_format"),
        [
            ("0", "decimal"),
            ("5", "decimal"),
            ("1_000", "decimal"),
            ("3.14", "decimal"),
            ("0.5", "decimal"),
            ("0x1F", "hexadecimal"),
            ("0XabC", "hexadecimal"),
            ("1e5", "exponential"),
            ("2.5E-3", "exponential"),
            ("0b1010", "binary"),
            ("0o17", "octal"),
        ],
    )
    def test_formats(self, source: str, number_format: str) -> None:
        token = _only_child(source)
        assert token.type is TokenType.NUMBER
        assert token.format == number_format
        assert token.value == source
        assert token.is_big is False

    @pytest.mark.parametrize(
        ("source", "number_format"),
        [("10n", "decimal"), ("0xFFn", "hexadecimal"), ("0b1n", "binary")],
    )
    def test_big_literals(self, source: str, number_format: str) -> None:
        token = _only_child(source)
        assert token.format == number_format
        assert token.is_big is True

    def test_followed_by_punctuation(self) -> None:
        root = tokenize("f(0x10);")
        assert [child.raw for child in root.children] == ["f", "(", "0x10", ")", ";"]

    @pytest.mark.parametrize("source", ["123abc", "0x", "0b2", "1e"])
    def test_malformed(self, source: str) -> None:
        failure = tokenize(source)
        assert isinstance(failure, ParseFailure)
        assert failure.failed_at == SourcePosition(0, 0, 0)


class TestIdentifier:
    @pytest.mark.parametrize("source", ["foo", "_tmp", "$el", "a1$", "café", "classify"])
    def test_identifiers(self, source: str) -> None:
        token = _only_child(source)
        assert token.type is TokenType.IDENTIFIER
        assert token.name == source

    @pytest.mark.parametrize("source", ["return", "If", "THIS", "extends"])
    def test_reserved_words(self, source: str) -> None:
        token = _only_child(source)
        assert token.type is TokenType.RESERVED_WORD
        assert token.name == source

    @pytest.mark.parametrize("source", ["\u00b2x", "\u00bdx", "\u2163"])
    def test_letter_required_at_start(self, source: str) -> None:
        """Word characters that are not letters never start an identifier."""
        failure = tokenize(source)
        assert isinstance(failure, ParseFailure)
        assert failure.failed_at == SourcePosition(0, 0, 0)

    def test_non_letter_word_characters_continue(self) -> None:
        token = _only_child("x\u00b2")
        assert token.type is TokenType.IDENTIFIER
        assert token.name == "x\u00b2"


class TestOperators:
    @pytest.mark.parametrize("operator", ["=", "+=", "-=", "**=", ">>>=", "<<=", "&&=", "??="])
    def test_assignment(self, operator: str) -> None:
        root = tokenize(f"x {operator} 1")
        token = root.children[1]
        assert token.type is TokenType.ASSIGNMENT
        assert token.operator == operator

    @pytest.mark.parametrize("operator", ["==", "===", "!=", "!=="])
    def test_equality(self, operator: str) -> None:
        root = tokenize(f"x {operator} 1")
        token = root.children[1]
        assert token.type is TokenType.EQUALITY
        assert token.operator == operator

    def test_adjacent_equals(self) -> None:
        """A bare = never swallows the start of ==."""
        root = tokenize("a==b")
        assert [child.raw for child in root.children] == ["a", "==", "b"]


class TestComments:
    def test_inline(self) -> None:
        root = tokenize("x // trailing\ny")
        assert [child.token_name for child in root.children] == [
            "IDENTIFIER",
            "COMMENT_INLINE",
            "IDENTIFIER",
        ]
        assert root.children[1].raw == "// trailing"

    def test_inline_at_end(self) -> None:
        assert _only_child("// last").raw == "// last"

    def test_block(self) -> None:
        token = _only_child("/* a\n * b\n */")
        assert token.type is TokenType.COMMENT_BLOCK

    def test_block_ends_at_first_close(self) -> None:
        root = tokenize("/* a */ x /* b */")
        assert [child.raw for child in root.children] == ["/* a */", "x", "/* b */"]

    def test_unterminated_block(self) -> None:
        failure = tokenize("x /* open")
        assert isinstance(failure, ParseFailure)
        assert failure.failed_at == SourcePosition(0, 2, 2)
        assert failure.snippet == "/* open"


class TestPunctuation:
    def test_plain_punctuation(self) -> None:
        root = tokenize("(;){}")
        assert [child.token_name for child in root.children] == [
            "PARENTHESIS",
            "SEMICOLON",
            "PARENTHESIS",
            "CURLY_BRACE",
            "CURLY_BRACE",
        ]

    def test_stray_closing_brace(self) -> None:
        """A } with no matching { is an ordinary token."""
        root = tokenize("}")
        assert root.children[0].raw == "}"
        assert not root.is_open


class TestGlobal:
    def test_root_is_zero_width(self) -> None:
        root = tokenize("x")
        assert root.raw == ""
        assert root.start == SourcePosition(0, 0, 0)
        assert root.provider == "Global"
        assert root.end == SourcePosition(0, 1, 1)

    def test_pushes_global_scope(self) -> None:
        tokenizer = ScriptTokenizer("x")
        root = tokenizer.tokenize()
        assert tokenizer.context.scope is ScopeKind.GLOBAL
        assert tokenizer.context.owner is root


class TestClass:
    def test_extends(self) -> None:
        cls = _only_child("class Foo extends Bar {}")
        assert cls.type is TokenType.CLASS
        assert cls.raw == "class"
        assert cls.name == cls.class_name == "Foo"
        assert cls.super_class.type is TokenType.IDENTIFIER
        assert cls.super_class.parent is None
        assert cls.end == SourcePosition(0, 24, 24)

    def test_extends_keyword_is_detached(self) -> None:
        tokenizer = ScriptTokenizer("class Foo extends Bar {}")
        root = tokenizer.tokenize()
        (keyword,) = [t for t in tokenizer.all_tokens if t.raw == "extends"]
        assert keyword.type is TokenType.RESERVED_WORD
        assert keyword.name == "extends"
        assert keyword.parent is None
        assert keyword not in root.children[0].children

    def test_extends_prefix_is_not_a_keyword(self) -> None:
        cls = _only_child("class Foo extendsBar {}")
        assert cls.super_class is None
        assert [child.raw for child in cls.children] == ["extendsBar", "{", "}"]

    def test_without_extends(self) -> None:
        cls = _only_child("class Foo { x }")
        assert cls.class_name == "Foo"
        assert cls.super_class is None
        assert cls.super_class_name is None
        assert [child.raw for child in cls.children] == ["{", "x", "}"]

    def test_anonymous(self) -> None:
        cls = _only_child("class extends Base {}")
        assert cls.class_name is None
        assert cls.super_class_name == "Base"

    def test_nested_braces(self) -> None:
        root = tokenize("class A { { } } y")
        cls, y = root.children
        assert [child.raw for child in cls.children] == ["{", "{", "}", "}"]
        assert y.parent is root

    def test_unclosed_class_leaves_root_open(self) -> None:
        root = tokenize("class A { x")
        cls = root.children[0]
        assert cls.is_open
        assert root.is_open

    def test_binding(self) -> None:
        tokenizer = ScriptTokenizer("class Foo {}")
        root = tokenizer.tokenize()
        assert tokenizer.context.bindings["Foo"] is root.children[0]
        assert tokenizer.contexts.resolve("Foo") is root.children[0]

    def test_lossless_header(self) -> None:
        source = "class  Foo\nextends\tBar {}"
        tokenizer = ScriptTokenizer(source)
        tokenizer.tokenize()
        assert "".join(t.raw for t in tokenizer.all_tokens) == source


class TestFunction:
    def test_declaration(self) -> None:
        fn = _only_child("function add(a) { return a; }")
        assert fn.type is TokenType.FUNCTION
        assert fn.name == "add"
        assert [child.raw for child in fn.children] == [
            "(",
            "a",
            ")",
            "{",
            "return",
            "a",
            ";",
            "}",
        ]
        assert fn.children[1].type is TokenType.PARAMETER
        assert fn.children[5].type is TokenType.IDENTIFIER
        assert not fn.is_open

    def test_parameter_binding(self) -> None:
        tokenizer = ScriptTokenizer("function f(a) {")
        tokenizer.tokenize()
        frame = tokenizer.context
        assert frame.scope is ScopeKind.FUNCTION
        assert frame.bindings["a"].type is TokenType.PARAMETER
        assert frame.this_function.name == "f"

    def test_function_inside_class(self) -> None:
        cls = _only_child("class A { function m() { } }")
        fn = cls.children[1]
        assert fn.type is TokenType.FUNCTION
        assert fn.parent is cls
        assert [child.raw for child in cls.children] == ["{", "function", "}"]
        assert not cls.is_open

    def test_call_inside_body_is_plain(self) -> None:
        fn = _only_child("function f() { g(1); }")
        kinds = [child.token_name for child in fn.children]
        assert kinds == [
            "PARENTHESIS",
            "PARENTHESIS",
            "CURLY_BRACE",
            "IDENTIFIER",
            "PARENTHESIS",
            "NUMBER",
            "PARENTHESIS",
            "SEMICOLON",
            "CURLY_BRACE",
        ]
