import pytest

from proofcore.basis import arithmetic
from proofcore.builder import DirectoryBuilder
from proofcore.errors import ContractViolation
from proofcore.helpers import app, arrow, defn, ground, sym, var, variable
from proofcore.language import (
    Application,
    Head,
    HeadKind,
    SymbolTerm,
    apply_head,
    binary,
    compatible,
    definitions_used,
    expand_definitions,
    simple_binary,
    spine,
    substitute,
    variables,
    walk,
)
from proofcore.refs import VariableRef

ARITH = arithmetic()
DIRECTORY = ARITH.build()
ZERO = sym(ARITH.zero)
FIVE = sym(ARITH.five)


def succ(f):
    return app(ARITH.succ, f)


def add(a, b):
    return app(ARITH.add, a, b)


def deep(n: int):
    f = ZERO
    for _ in range(n):
        f = succ(f)
    return f


class TestEquality:
    def test_structural(self) -> None:
        assert add(var(0), ZERO) == add(var(0), ZERO)
        assert add(var(0), ZERO) != add(ZERO, var(0))
        assert var(0) != sym(0)

    def test_hash_agrees_with_equality(self) -> None:
        assert hash(add(var(0), ZERO)) == hash(add(var(0), ZERO))
        assert len({succ(ZERO), succ(ZERO), succ(FIVE)}) == 2

    def test_definition_inputs_compared(self) -> None:
        assert defn(0, ZERO) == defn(0, ZERO)
        assert defn(0, ZERO) != defn(0, FIVE)
        assert defn(0, ZERO) != defn(0, ZERO, ZERO)

    def test_deep_trees_do_not_hit_recursion_limit(self) -> None:
        a, b = deep(20_000), deep(20_000)
        assert a == b
        assert hash(a) == hash(b)
        assert a != deep(19_999)


class TestSpine:
    def test_curried_symbol(self) -> None:
        assert spine(add(var(0), ZERO)) == (Head.symbol(ARITH.add), (var(0), ZERO))

    def test_constant(self) -> None:
        assert spine(ZERO) == (Head.symbol(ARITH.zero), ())

    def test_definition(self) -> None:
        head, inputs = spine(ARITH.doubled(ZERO))
        assert head.kind is HeadKind.DEFINITION
        assert inputs == (ZERO,)

    def test_variable_headed(self) -> None:
        assert spine(var(0)) is None
        assert spine(app(var(0), ZERO)) is None

    def test_apply_head_inverts_spine(self) -> None:
        for f in (add(var(0), ZERO), ARITH.doubled(FIVE), ZERO):
            head, inputs = spine(f)
            assert apply_head(head, inputs) == f

    def test_binary(self) -> None:
        assert binary(ARITH.equals(ZERO, FIVE)) == (Head.symbol(ARITH.eq), ZERO, FIVE)
        assert binary(succ(ZERO)) is None

    def test_simple_binary_needs_variables(self) -> None:
        assert simple_binary(ARITH.equals(var(1), var(0))) == (
            Head.symbol(ARITH.eq),
            VariableRef(1),
            VariableRef(0),
        )
        assert simple_binary(ARITH.equals(var(0), ZERO)) is None


class TestSubstitute:
    def test_replaces_mapped_variables_only(self) -> None:
        f = add(var(0), var(1))
        assert substitute(f, {VariableRef(0): FIVE}) == add(FIVE, var(1))

    def test_inside_definition_inputs(self) -> None:
        f = ARITH.doubled(var(0))
        assert substitute(f, {VariableRef(0): ZERO}) == ARITH.doubled(ZERO)

    def test_no_capture_of_substituted_terms(self) -> None:
        f = add(var(0), var(1))
        result = substitute(f, {VariableRef(0): var(1), VariableRef(1): var(0)})
        assert result == add(var(1), var(0))


class TestExpandDefinitions:
    def test_unfolds_with_inputs(self) -> None:
        assert expand_definitions(ARITH.doubled(FIVE), DIRECTORY) == add(FIVE, FIVE)

    def test_nested_definitions(self) -> None:
        b = DirectoryBuilder()
        s = b.add_system("s")
        nat = ground(b.add_type("Nat", s))
        f = b.add_symbol("f", s, arrow(nat, nat, nat))
        c = b.add_symbol("c", s, nat)
        inner = b.add_definition("inner", s, [variable("x", nat)], app(f, var(0), var(0)))
        outer = b.add_definition(
            "outer", s, [variable("y", nat)], defn(inner, app(f, var(0), sym(c)))
        )
        directory = b.build()
        fc = app(f, sym(c), sym(c))
        assert expand_definitions(defn(outer, sym(c)), directory) == app(f, fc, fc)

    def test_leaves_plain_formulas_alone(self) -> None:
        f = add(var(0), ZERO)
        assert expand_definitions(f, DIRECTORY) == f

    def test_unknown_definition_is_contract_violation(self) -> None:
        with pytest.raises(ContractViolation):
            expand_definitions(defn(99, ZERO), DIRECTORY)


class TestCompatible:
    def test_unfolding(self) -> None:
        assert compatible(ARITH.doubled(FIVE), add(FIVE, FIVE), DIRECTORY)
        assert not compatible(ARITH.doubled(FIVE), add(FIVE, ZERO), DIRECTORY)

    def test_is_an_equivalence(self) -> None:
        formulas = [
            ARITH.doubled(FIVE),
            add(FIVE, FIVE),
            ARITH.doubled(ZERO),
            add(ZERO, ZERO),
            succ(ARITH.doubled(FIVE)),
            succ(add(FIVE, FIVE)),
        ]
        for a in formulas:
            assert compatible(a, a, DIRECTORY)
            for b in formulas:
                assert compatible(a, b, DIRECTORY) == compatible(b, a, DIRECTORY)
                for c in formulas:
                    if compatible(a, b, DIRECTORY) and compatible(b, c, DIRECTORY):
                        assert compatible(a, c, DIRECTORY)


class TestQueries:
    def test_walk_paths(self) -> None:
        paths = [path for path, _ in walk(add(var(0), ZERO))]
        assert paths == [
            "",
            "function",
            "function.function",
            "function.argument",
            "argument",
        ]

    def test_variables_and_definitions(self) -> None:
        f = ARITH.equals(ARITH.doubled(var(1)), var(0))
        assert variables(f) == {VariableRef(0), VariableRef(1)}
        assert definitions_used(f) == {ARITH.double}

    def test_node_types(self) -> None:
        assert isinstance(ZERO, SymbolTerm)
        assert isinstance(succ(ZERO), Application)
