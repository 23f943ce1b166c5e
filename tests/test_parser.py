"""Tests for the recursive-descent parser: roles, colors, constructs, totality."""

from __future__ import annotations

import pytest

from eqlens.palette import BLUE, CYAN, GRAY, GREEN, ORANGE, PINK, PURPLE, RED, TEAL
from eqlens.parser import MAX_DEPTH, Command, parse
from eqlens.tokens import ParsedEquation, TokenRole, walk_tokens


def _signature(tokens):
    return [
        (t.role, t.value, t.raw, t.color, _signature(t.children))
        for t in tokens
    ]


def _values(tokens):
    return [t.value for t in tokens]


# ---------------------------------------------------------------------------
# Role inference and color stability
# ---------------------------------------------------------------------------


class TestRoles:

    def test_same_variable_same_color(self):
        parsed = parse("y = x + x")
        y, eq, x1, plus, x2 = parsed.tokens
        assert x1.color == x2.color == ORANGE
        assert y.color == TEAL
        assert x1.color != y.color
        assert eq.role is TokenRole.OPERATOR

    def test_side_of_equals(self):
        parsed = parse("y = x^2")
        assert parsed.role_of("y") is TokenRole.RESULT_VAR
        assert parsed.role_of("x") is TokenRole.INPUT_VAR
        assert parsed.tokens[2].raw == "x^{2}"

    def test_index_names_are_case_sensitive(self):
        parsed = parse("y = n + N")
        assert parsed.role_of("n") is TokenRole.INDEX_VAR
        assert parsed.role_of("N") is TokenRole.INPUT_VAR

    def test_index_name_left_of_equals_is_result(self):
        parsed = parse("k = a")
        assert parsed.role_of("k") is TokenRole.RESULT_VAR

    def test_role_is_sticky_after_equals(self):
        parsed = parse("x + y = x")
        assert parsed.tokens[0].role is TokenRole.RESULT_VAR
        assert parsed.tokens[-1].role is TokenRole.RESULT_VAR
        assert parsed.tokens[-1].color == TEAL

    def test_subexpression_before_equals_is_left_hand(self):
        parsed = parse(r"\frac{a}{b} = c")
        assert parsed.role_of("a") is TokenRole.RESULT_VAR
        assert parsed.role_of("b") is TokenRole.RESULT_VAR
        assert parsed.role_of("c") is TokenRole.INPUT_VAR

    def test_equals_inside_subexpression_does_not_leak(self):
        parsed = parse(r"\frac{a=b}{c} d")
        assert parsed.role_of("a") is TokenRole.RESULT_VAR
        assert parsed.role_of("b") is TokenRole.INPUT_VAR
        assert parsed.role_of("c") is TokenRole.RESULT_VAR
        assert parsed.role_of("d") is TokenRole.RESULT_VAR

    def test_color_map_keyed_by_base_identity(self):
        parsed = parse("y = x_1 + x_2")
        assert parsed.color_map == {"y": TEAL, "x": ORANGE}
        assert parsed.tokens[2].value == "x_1"
        assert parsed.tokens[2].identity == "x"

    def test_nested_occurrence_keeps_color(self):
        parsed = parse(r"y = \frac{y}{2}")
        fraction = parsed.tokens[2]
        assert fraction.children[0].color == TEAL
        assert fraction.children[0].role is TokenRole.RESULT_VAR

    def test_greek_letters_are_variables(self):
        parsed = parse(r"\alpha = \beta + \alpha")
        alpha, _, beta, _, alpha2 = parsed.tokens
        assert alpha.role is TokenRole.RESULT_VAR
        assert alpha.identity == "alpha"
        assert alpha.raw == r"\alpha"
        assert beta.role is TokenRole.INPUT_VAR
        assert alpha2.color == alpha.color == TEAL
        assert parsed.color_map["beta"] == ORANGE


# ---------------------------------------------------------------------------
# Post-hoc index override on big-operator lower bounds
# ---------------------------------------------------------------------------


class TestIndexOverride:

    def test_sum_with_canonical_index(self):
        parsed = parse(r"\sum_{n=0}^{N-1} x_n")
        total = parsed.tokens[0]
        assert total.role is TokenRole.SUMMATION
        assert total.raw == r"\sum_{n=0}^{N-1}"
        assert total.bounds.lower == "n=0"
        assert total.bounds.upper == "N-1"
        assert parsed.role_of("n") is TokenRole.INDEX_VAR
        assert parsed.color_map["n"] == RED

    def test_override_fires_for_non_index_name(self):
        parsed = parse(r"y = \sum_{q=0}^{9} x_q")
        total = parsed.tokens[2]
        q = total.children[0]
        assert q.value == "q"
        assert q.role is TokenRole.INDEX_VAR
        assert q.color == RED
        assert parsed.color_map["q"] == RED
        assert parsed.role_of("q") is TokenRole.INDEX_VAR

    def test_override_left_of_equals(self):
        parsed = parse(r"\sum_{q=1}^{3} q")
        assert parsed.tokens[0].children[0].role is TokenRole.INDEX_VAR
        trailing = parsed.tokens[-1]
        assert trailing.role is TokenRole.INDEX_VAR
        assert trailing.color == RED

    def test_override_reaches_nested_variables(self):
        parsed = parse(r"y = \int_{\frac{a}{2}}^{b} t")
        assert parsed.role_of("a") is TokenRole.INDEX_VAR
        assert parsed.role_of("b") is TokenRole.INPUT_VAR

    def test_upper_bound_is_not_overridden(self):
        parsed = parse(r"y = \prod_{j=1}^{M} j")
        product = parsed.tokens[2]
        assert product.role is TokenRole.PRODUCT
        assert parsed.role_of("M") is TokenRole.INPUT_VAR
        assert parsed.role_of("j") is TokenRole.INDEX_VAR

    def test_bounds_are_optional(self):
        bare = parse(r"\int f").tokens[0]
        assert bare.raw == r"\int"
        assert bare.children == []
        assert bare.bounds.lower is None and bare.bounds.upper is None

        upper_only = parse(r"\sum^{N} a").tokens[0]
        assert upper_only.raw == r"\sum^{N}"
        assert upper_only.frame == (r"\sum^{", "}")

    def test_bounds_in_either_order(self):
        parsed = parse(r"y = \int^{b}_{q} t")
        integral = parsed.tokens[2]
        assert len(parsed.tokens) == 4
        assert integral.raw == r"\int_{q}^{b}"
        assert integral.bounds.lower == "q"
        assert integral.bounds.upper == "b"
        assert _values(integral.children) == ["q", "b"]
        assert parsed.role_of("q") is TokenRole.INDEX_VAR
        assert parsed.role_of("b") is TokenRole.INPUT_VAR

    def test_limit_lower_bound(self):
        parsed = parse(r"y = \lim_{h \to 0} h")
        limit = parsed.tokens[2]
        assert limit.role is TokenRole.LIMIT
        assert limit.color == PURPLE
        assert limit.raw == r"\lim_{h \to 0}"
        assert limit.bounds.lower == r"h \to 0"
        assert limit.bounds.upper is None
        # no override for limits
        assert parsed.role_of("h") is TokenRole.INPUT_VAR


# ---------------------------------------------------------------------------
# Constructs
# ---------------------------------------------------------------------------


class TestConstructs:

    def test_group_unwrapping(self):
        assert _signature(parse("{x}").tokens) == _signature(parse("x").tokens)

    def test_empty_group(self):
        parsed = parse("a{}b")
        assert _values(parsed.tokens) == ["a", "b"]

    def test_group_with_several_tokens(self):
        group = parse("{a+b}^2").tokens[0]
        assert group.role is TokenRole.GROUP
        assert group.raw == "{a+b}"
        assert _values(group.children) == ["a", "+", "b"]

    def test_fraction(self):
        fraction = parse(r"\frac{a}{b}").tokens[0]
        assert fraction.role is TokenRole.FRACTION
        assert fraction.value == "fraction"
        assert fraction.raw == r"\frac{a}{b}"
        assert _values(fraction.children) == ["a", "b"]
        assert fraction.slots == (1, 1)

    def test_fraction_bare_arguments(self):
        fraction = parse(r"\frac12").tokens[0]
        assert fraction.raw == r"\frac{1}{2}"
        assert _values(fraction.children) == ["1", "2"]

    def test_fraction_command_argument(self):
        fraction = parse(r"\frac\alpha{2}").tokens[0]
        assert fraction.raw == r"\frac{\alpha}{2}"
        assert fraction.children[0].identity == "alpha"

    def test_binom_is_function(self):
        binom = parse(r"\binom{n}{k}").tokens[0]
        assert binom.role is TokenRole.FUNCTION
        assert binom.value == "binom"
        assert binom.color == PINK
        assert binom.raw == r"\binom{n}{k}"

    def test_sqrt_with_degree(self):
        root = parse(r"\sqrt[3]{x}").tokens[0]
        assert root.role is TokenRole.SQRT
        assert root.raw == r"\sqrt[3]{x}"
        assert _values(root.children) == ["x"]

    def test_sqrt_plain(self):
        root = parse(r"\sqrt{b^2 - 4ac}").tokens[0]
        assert root.raw == r"\sqrt{b^2 - 4ac}"
        assert root.color == BLUE
        assert _values(root.children) == ["b", "-", "4", "a", "c"]

    def test_sqrt_escaped_brace_argument(self):
        parsed = parse(r"\sqrt\{x\}")
        root = parsed.tokens[0]
        assert root.raw == r"\sqrt{\{}"
        assert _values(root.children) == [r"\{"]
        assert _values(parsed.tokens[1:]) == ["x", r"\}"]
        assert parsed.colorized.count("{") - parsed.colorized.count(r"\{") == (
            parsed.colorized.count("}") - parsed.colorized.count(r"\}")
        )

    def test_standalone_exponent_and_subscript(self):
        parsed = parse("(a)^{2}_k")
        exponent = parsed.tokens[3]
        subscript = parsed.tokens[4]
        assert exponent.role is TokenRole.EXPONENT
        assert exponent.raw == "^{2}"
        assert exponent.color == CYAN
        assert subscript.role is TokenRole.SUBSCRIPT
        assert subscript.raw == "_{k}"
        assert subscript.color == GRAY

    def test_variable_with_sub_and_superscript(self):
        token = parse("x_{i}^{2}").tokens[0]
        assert token.value == "x_i"
        assert token.raw == "x_{i}^{2}"
        assert token.identity == "x"
        assert token.children == []

    def test_numbers(self):
        assert _values(parse("3.14").tokens) == ["3.14"]
        assert _values(parse("1.2.3").tokens) == ["1.2", "3"]
        assert parse("42").tokens[0].color == GREEN

    def test_functions(self):
        sin, x = parse(r"\sin x").tokens
        assert sin.role is TokenRole.FUNCTION
        assert sin.raw == r"\sin"
        assert x.value == "x"

    def test_log_base(self):
        assert parse(r"\log_2 x").tokens[0].raw == r"\log_{2}"
        assert parse(r"\log_{10} x").tokens[0].raw == r"\log_{10}"
        assert parse(r"\ln x").tokens[0].raw == r"\ln"

    @pytest.mark.parametrize(
        "latex,role,value",
        [
            (r"\infty", TokenRole.CONSTANT, "∞"),
            (r"\hbar", TokenRole.CONSTANT, "ℏ"),
            (r"\partial", TokenRole.OPERATOR, "∂"),
            (r"\cdot", TokenRole.OPERATOR, "cdot"),
            (r"\pm", TokenRole.OPERATOR, "pm"),
            (r"\rightarrow", TokenRole.OPERATOR, "rightarrow"),
        ],
    )
    def test_symbols(self, latex, role, value):
        token = parse(latex).tokens[0]
        assert token.role is role
        assert token.value == value
        assert token.raw == latex

    def test_hat(self):
        token = parse(r"\hat{x}").tokens[0]
        assert token.role is TokenRole.OPERATOR
        assert token.raw == r"\hat{x}"

    def test_hat_without_brace_falls_back(self):
        token = parse(r"\hat").tokens[0]
        assert token.value == "hat"
        assert token.raw == r"\hat"

    def test_unknown_command_is_operator(self):
        token = parse(r"\mathcal").tokens[0]
        assert token.role is TokenRole.OPERATOR
        assert token.value == "mathcal"
        assert token.raw == r"\mathcal"

    def test_escaped_character(self):
        parsed = parse(r"a \, b")
        assert parsed.tokens[1].value == r"\,"
        assert parsed.tokens[1].raw == r"\,"

    def test_operator_characters(self):
        parsed = parse("+-*/()[],!|<>")
        assert len(parsed.tokens) == 13
        assert all(t.role is TokenRole.OPERATOR for t in parsed.tokens)

    def test_unmatched_closing_brace_stops_scan(self):
        assert _values(parse("a}b").tokens) == ["a"]

    def test_unknown_characters_skipped(self):
        assert _values(parse("x @ # y").tokens) == ["x", "y"]


class TestCommand:

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("frac", Command.FRAC),
            ("sum", Command.SUM),
            ("lim", Command.LIM),
            ("log", Command.LOG),
            ("theta", Command.GREEK),
            ("Omega", Command.GREEK),
            ("cosh", Command.FUNCTION),
            ("infty", Command.SYMBOL),
            ("mathbb", Command.UNKNOWN),
            ("greek", Command.UNKNOWN),
        ],
    )
    def test_lookup(self, name, expected):
        assert Command.lookup(name) is expected


# ---------------------------------------------------------------------------
# Parse result and totality
# ---------------------------------------------------------------------------


class TestParseResult:

    def test_original_kept_verbatim(self):
        parsed = parse("  y = x  ")
        assert parsed.original == "  y = x  "

    def test_idempotent_reparse(self):
        latex = r"X_k = \sum_{n=0}^{N-1} x_n e^{-2\pi i k n / N}"
        first = parse(latex)
        second = parse(latex)
        assert _signature(first.tokens) == _signature(second.tokens)
        assert first.colorized == second.colorized
        assert first.color_map == second.color_map

    def test_token_ids_unique(self):
        parsed = parse(r"y = \frac{a+b}{\sqrt{c}} + \sum_{i=0}^{n} x_i")
        ids = [t.id for t in walk_tokens(parsed.tokens)]
        assert len(ids) == len(set(ids))
        assert all(i.startswith("token-") for i in ids)

    def test_to_dict(self):
        data = parse("y = 2").to_dict()
        assert data["originalLatex"] == "y = 2"
        assert data["colorMap"] == {"y": TEAL}
        assert data["roleMap"] == {"y": "result_var"}
        assert [t["type"] for t in data["tokens"]] == ["result_var", "operator", "constant"]
        assert data["colorizedLatex"].startswith("{\\color{")

    def test_bounds_in_dict(self):
        data = parse(r"\sum_{i=1}^{n} i").to_dict()
        assert data["tokens"][0]["bounds"] == {"lower": "i=1", "upper": "n"}

    def test_variables_listing(self):
        parsed = parse(r"y = \frac{a}{b}")
        assert [t.identity for t in parsed.variables()] == ["y", "a", "b"]

    @pytest.mark.parametrize(
        "latex",
        [
            "", " ", "\\", "{", "}", "}}}{{{", "^", "_", "x_", "x^",
            r"\frac", r"\frac{", r"\frac{a", r"\sqrt[", r"\sqrt[3",
            r"\sum_", r"\sum^", r"\lim_", r"\log_", r"\hat{", "=",
            "= = =", "@#$%&", r"\\", "1.", ".5", "\t\n",
        ],
    )
    def test_total_on_malformed_input(self, latex):
        parsed = parse(latex)
        assert isinstance(parsed, ParsedEquation)
        assert parsed.original == latex

    def test_deep_nesting_terminates(self):
        latex = "{" * (MAX_DEPTH + 100) + "x+y" + "}" * (MAX_DEPTH + 100)
        parsed = parse(latex)
        assert isinstance(parsed, ParsedEquation)
        assert parsed.tokens
