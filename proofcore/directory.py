"""Checked records of a resolved document.

The ``Directory`` is an append-only arena: every global entity is addressed
by its position in its arena.  Records here are frozen and fully linked;
incomplete records only exist in ``proofcore.builder``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from .language import Formula
from .refs import (
    AxiomRef,
    DefinitionRef,
    ProofRef,
    SymbolRef,
    SystemRef,
    TheoremRef,
    TypeRef,
    VariableRef,
)
from .types import TypeSignature


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class System:
    id: str


@dataclass(frozen=True)
class Type:
    id: str
    system: SystemRef


@dataclass(frozen=True)
class Symbol:
    id: str
    system: SystemRef
    type_signature: TypeSignature


@dataclass(frozen=True)
class Variable:
    id: str
    type_signature: TypeSignature


@dataclass(frozen=True)
class Definition:
    """A named abbreviation; formal input i is ``VariableRef(i)`` in the expansion."""

    id: str
    system: SystemRef
    inputs: tuple[Variable, ...]
    expansion: Formula

    @property
    def arity(self) -> int:
        return len(self.inputs)


class Flag(Enum):
    REFLEXIVE = "reflexive"
    SYMMETRIC = "symmetric"
    TRANSITIVE = "transitive"
    FUNCTION = "function"


@dataclass(frozen=True)
class Axiom:
    id: str
    system: SystemRef
    variables: tuple[Variable, ...]
    premises: tuple[Formula, ...]
    assertion: Formula
    flags: tuple[Flag, ...] = ()


@dataclass(frozen=True)
class Theorem:
    id: str
    system: SystemRef
    variables: tuple[Variable, ...]
    premises: tuple[Formula, ...]
    assertion: Formula
    flags: tuple[Flag, ...] = ()


Deductable = Axiom | Theorem


class DeductableKind(Enum):
    AXIOM = "axiom"
    THEOREM = "theorem"


@dataclass(frozen=True)
class DeductableRef:
    """A citable fact: an axiom or a theorem."""

    kind: DeductableKind
    index: int

    @classmethod
    def axiom(cls, ref: AxiomRef) -> DeductableRef:
        return cls(DeductableKind.AXIOM, ref)

    @classmethod
    def theorem(cls, ref: TheoremRef) -> DeductableRef:
        return cls(DeductableKind.THEOREM, ref)


# ---------------------------------------------------------------------------
# Proofs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ByDeductable:
    """Cite an axiom or theorem."""

    ref: DeductableRef


@dataclass(frozen=True)
class ByHypothesis:
    """Cite the theorem's n-th premise, counting from 1."""

    index: int


@dataclass(frozen=True)
class ByDefinition:
    pass


@dataclass(frozen=True)
class ByFunctionApplication:
    pass


@dataclass(frozen=True)
class BySubstitution:
    pass


Justification = (
    ByDeductable | ByHypothesis | ByDefinition | ByFunctionApplication | BySubstitution
)


@dataclass(frozen=True)
class ProofStep:
    justification: Justification
    formula: Formula


@dataclass(frozen=True)
class Proof:
    theorem: TheoremRef
    steps: tuple[ProofStep, ...]


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------


T = TypeVar("T")


def _get(items: tuple[T, ...], index: int) -> T | None:
    if 0 <= index < len(items):
        return items[index]
    return None


@dataclass(frozen=True)
class Directory:
    """Every entity of a resolved document, in declaration order."""

    systems: tuple[System, ...] = ()
    types: tuple[Type, ...] = ()
    symbols: tuple[Symbol, ...] = ()
    definitions: tuple[Definition, ...] = ()
    axioms: tuple[Axiom, ...] = ()
    theorems: tuple[Theorem, ...] = ()
    proofs: tuple[Proof, ...] = ()

    def get_system(self, ref: SystemRef) -> System | None:
        return _get(self.systems, ref)

    def get_type(self, ref: TypeRef) -> Type | None:
        return _get(self.types, ref)

    def get_symbol(self, ref: SymbolRef) -> Symbol | None:
        return _get(self.symbols, ref)

    def get_definition(self, ref: DefinitionRef) -> Definition | None:
        return _get(self.definitions, ref)

    def get_axiom(self, ref: AxiomRef) -> Axiom | None:
        return _get(self.axioms, ref)

    def get_theorem(self, ref: TheoremRef) -> Theorem | None:
        return _get(self.theorems, ref)

    def get_proof(self, ref: ProofRef) -> Proof | None:
        return _get(self.proofs, ref)

    def get_deductable(self, ref: DeductableRef) -> Deductable | None:
        match ref.kind:
            case DeductableKind.AXIOM:
                return self.get_axiom(AxiomRef(ref.index))
            case DeductableKind.THEOREM:
                return self.get_theorem(TheoremRef(ref.index))

    def first_proof(self, theorem: TheoremRef) -> ProofRef | None:
        """The authoritative proof of a theorem, if it has any."""
        for index, proof in enumerate(self.proofs):
            if proof.theorem == theorem:
                return ProofRef(index)
        return None

    def deductables(self) -> list[tuple[DeductableRef, Deductable]]:
        """Axioms then theorems, in declaration order."""
        result: list[tuple[DeductableRef, Deductable]] = []
        for i, axiom in enumerate(self.axioms):
            result.append((DeductableRef.axiom(AxiomRef(i)), axiom))
        for i, theorem in enumerate(self.theorems):
            result.append((DeductableRef.theorem(TheoremRef(i)), theorem))
        return result


def local_variable(scope: tuple[Variable, ...], ref: VariableRef) -> Variable | None:
    return _get(scope, ref)
