"""Formulas over a resolved directory.

A formula is a tree built from:
  - Symbol references         (``SymbolTerm``)
  - Variable references       (``VariableTerm``), local to the enclosing scope
  - Curried applications      (``Application(function, argument)``)
  - Definition applications   (``DefinitionTerm(definition, inputs)``)

Multi-argument application is curried: ``f(a, b)`` is
``Application(Application(SymbolTerm(f), a), b)``.  A definition is always
applied to all of its formal inputs at once.

Equality, hashing, substitution and definition expansion walk the tree with
an explicit stack, so formula depth never runs into the interpreter's
recursion limit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .errors import ContractViolation
from .refs import DefinitionRef, SymbolRef, VariableRef

if TYPE_CHECKING:
    from .directory import Directory


# ---------------------------------------------------------------------------
# Formula AST
# ---------------------------------------------------------------------------


class _Node:
    """Structural equality and hashing for formula nodes."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Node):
            return NotImplemented
        return _tree_equal(self, other)  # type: ignore[arg-type]

    def __hash__(self) -> int:
        return hash(_flatten(self))  # type: ignore[arg-type]


@dataclass(frozen=True, eq=False)
class SymbolTerm(_Node):
    """A reference to a declared symbol.

    Example: zero — SymbolTerm(SymbolRef(0))
    """

    symbol: SymbolRef


@dataclass(frozen=True, eq=False)
class VariableTerm(_Node):
    """A reference to a variable of the enclosing local scope."""

    variable: VariableRef


@dataclass(frozen=True, eq=False)
class Application(_Node):
    """Application of a function-typed formula to one argument.

    Example: succ(x) — Application(SymbolTerm(succ), VariableTerm(x))
    """

    function: Formula
    argument: Formula


@dataclass(frozen=True, eq=False)
class DefinitionTerm(_Node):
    """A definition applied to all of its formal inputs.

    Example: double(x) — DefinitionTerm(double, (VariableTerm(x),))
    """

    definition: DefinitionRef
    inputs: tuple[Formula, ...]


Formula = SymbolTerm | VariableTerm | Application | DefinitionTerm


def _flatten(formula: Formula) -> tuple[tuple[str, int], ...]:
    """Pre-order token sequence; unambiguous because every token fixes its arity."""
    tokens: list[tuple[str, int]] = []
    stack: list[Formula] = [formula]
    while stack:
        match stack.pop():
            case SymbolTerm(symbol):
                tokens.append(("symbol", symbol))
            case VariableTerm(variable):
                tokens.append(("variable", variable))
            case Application(function, argument):
                tokens.append(("application", 2))
                stack.append(argument)
                stack.append(function)
            case DefinitionTerm(definition, inputs):
                tokens.append(("definition", definition))
                tokens.append(("inputs", len(inputs)))
                stack.extend(reversed(inputs))
    return tuple(tokens)


def _tree_equal(left: Formula, right: Formula) -> bool:
    stack: list[tuple[Formula, Formula]] = [(left, right)]
    while stack:
        a, b = stack.pop()
        if a is b:
            continue
        match a, b:
            case SymbolTerm(x), SymbolTerm(y):
                if x != y:
                    return False
            case VariableTerm(x), VariableTerm(y):
                if x != y:
                    return False
            case Application(f, x), Application(g, y):
                stack.append((x, y))
                stack.append((f, g))
            case DefinitionTerm(d, xs), DefinitionTerm(e, ys):
                if d != e or len(xs) != len(ys):
                    return False
                stack.extend(zip(xs, ys))
            case _:
                return False
    return True


# ---------------------------------------------------------------------------
# Heads: the function or relation at the root of an application spine
# ---------------------------------------------------------------------------


class HeadKind(Enum):
    SYMBOL = "symbol"
    DEFINITION = "definition"


@dataclass(frozen=True)
class Head:
    """The symbol or definition at the root of ``f(a1, ..., an)``."""

    kind: HeadKind
    index: int

    @classmethod
    def symbol(cls, ref: SymbolRef) -> Head:
        return cls(HeadKind.SYMBOL, ref)

    @classmethod
    def definition(cls, ref: DefinitionRef) -> Head:
        return cls(HeadKind.DEFINITION, ref)


def spine(formula: Formula) -> tuple[Head, tuple[Formula, ...]] | None:
    """Split ``f(a1, ..., an)`` into its head and its inputs.

    Curried applications are unwound down to a symbol; a definition
    application is its own spine.  Returns None when the root of the spine
    is a variable or a definition applied to extra arguments.
    """
    match formula:
        case DefinitionTerm(definition, inputs):
            return Head.definition(definition), inputs
        case SymbolTerm(symbol):
            return Head.symbol(symbol), ()
        case Application():
            arguments: list[Formula] = []
            current: Formula = formula
            while isinstance(current, Application):
                arguments.append(current.argument)
                current = current.function
            if isinstance(current, SymbolTerm):
                return Head.symbol(current.symbol), tuple(reversed(arguments))
            return None
        case _:
            return None


def apply_head(head: Head, inputs: tuple[Formula, ...]) -> Formula:
    """Inverse of ``spine``."""
    match head.kind:
        case HeadKind.DEFINITION:
            return DefinitionTerm(DefinitionRef(head.index), inputs)
        case HeadKind.SYMBOL:
            result: Formula = SymbolTerm(SymbolRef(head.index))
            for argument in inputs:
                result = Application(result, argument)
            return result


def binary(formula: Formula) -> tuple[Head, Formula, Formula] | None:
    """Read ``R(a, b)`` as (R, a, b)."""
    split = spine(formula)
    if split is None:
        return None
    head, inputs = split
    if len(inputs) != 2:
        return None
    return head, inputs[0], inputs[1]


def simple_binary(formula: Formula) -> tuple[Head, VariableRef, VariableRef] | None:
    """Read ``R(x, y)`` where both arguments are bare variables."""
    split = binary(formula)
    if split is None:
        return None
    head, left, right = split
    if isinstance(left, VariableTerm) and isinstance(right, VariableTerm):
        return head, left.variable, right.variable
    return None


# ---------------------------------------------------------------------------
# Tree transforms
# ---------------------------------------------------------------------------


def _rebuild(
    formula: Formula,
    on_variable: Callable[[VariableTerm], Formula],
    on_definition: Callable[[DefinitionRef, tuple[Formula, ...]], Formula],
) -> Formula:
    """Post-order rebuild of a formula.

    ``on_definition`` receives the already-rebuilt inputs.
    """
    stack: list[tuple[Formula, bool]] = [(formula, False)]
    results: list[Formula] = []
    while stack:
        node, children_done = stack.pop()
        match node:
            case SymbolTerm():
                results.append(node)
            case VariableTerm():
                results.append(on_variable(node))
            case Application(function, argument):
                if children_done:
                    new_argument = results.pop()
                    new_function = results.pop()
                    results.append(Application(new_function, new_argument))
                else:
                    stack.append((node, True))
                    stack.append((argument, False))
                    stack.append((function, False))
            case DefinitionTerm(definition, inputs):
                if children_done:
                    count = len(inputs)
                    new_inputs = tuple(results[len(results) - count :])
                    del results[len(results) - count :]
                    results.append(on_definition(definition, new_inputs))
                else:
                    stack.append((node, True))
                    for item in reversed(inputs):
                        stack.append((item, False))
    assert len(results) == 1
    return results[0]


def substitute(formula: Formula, mapping: Mapping[VariableRef, Formula]) -> Formula:
    """Replace variable leaves according to ``mapping``.

    Variables missing from the mapping are left in place.
    """
    return _rebuild(
        formula,
        lambda node: mapping.get(node.variable, node),
        lambda definition, inputs: DefinitionTerm(definition, inputs),
    )


def expand_definitions(formula: Formula, directory: Directory) -> Formula:
    """Unfold every definition application, recursively.

    Terminates because a definition body may only use definitions declared
    before it (enforced by the verify phase).
    """

    def unfold(ref: DefinitionRef, inputs: tuple[Formula, ...]) -> Formula:
        definition = directory.get_definition(ref)
        if definition is None or len(inputs) != definition.arity:
            raise ContractViolation(f"cannot expand unverified definition #{ref}")
        mapping = {VariableRef(i): item for i, item in enumerate(inputs)}
        return expand_definitions(substitute(definition.expansion, mapping), directory)

    return _rebuild(formula, lambda node: node, unfold)


def compatible(left: Formula, right: Formula, directory: Directory) -> bool:
    """Equality after fully unfolding every definition on both sides."""
    if left == right:
        return True
    return expand_definitions(left, directory) == expand_definitions(right, directory)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def walk(formula: Formula) -> Iterator[tuple[str, Formula]]:
    """Yield ``(path, node)`` for every node, parents before children."""
    stack: list[tuple[str, Formula]] = [("", formula)]
    while stack:
        path, node = stack.pop()
        yield path, node
        match node:
            case Application(function, argument):
                stack.append((_join(path, "argument"), argument))
                stack.append((_join(path, "function"), function))
            case DefinitionTerm(_, inputs):
                for i in range(len(inputs) - 1, -1, -1):
                    stack.append((_join(path, f"inputs[{i}]"), inputs[i]))
            case _:
                pass


def _join(path: str, part: str) -> str:
    return f"{path}.{part}" if path else part


def variables(formula: Formula) -> frozenset[VariableRef]:
    return frozenset(
        node.variable for _, node in walk(formula) if isinstance(node, VariableTerm)
    )


def definitions_used(formula: Formula) -> frozenset[DefinitionRef]:
    return frozenset(
        node.definition for _, node in walk(formula) if isinstance(node, DefinitionTerm)
    )
