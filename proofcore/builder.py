"""Incremental construction of a ``Directory``.

The layer that resolves names hands entities over one at a time, and some
parts (a definition's expansion, an axiom's assertion, the steps of a
proof) may only be known after other entities have been added.  The builder
keeps open records with optional fields and ``build()`` links them into
frozen ``Directory`` records, failing if anything required is still
missing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .directory import (
    Axiom,
    Definition,
    Directory,
    Flag,
    Justification,
    Proof,
    ProofStep,
    Symbol,
    System,
    Theorem,
    Type,
    Variable,
)
from .language import Formula
from .refs import (
    AxiomRef,
    DefinitionRef,
    ProofRef,
    SymbolRef,
    SystemRef,
    TheoremRef,
    TypeRef,
)
from .types import TypeSignature


class BuilderError(ValueError):
    """A record was linked before all of its required parts were set."""


@dataclass
class DefinitionBuilder:
    id: str
    system: SystemRef
    inputs: tuple[Variable, ...]
    expansion: Formula | None = None

    def finish(self) -> Definition:
        if self.expansion is None:
            raise BuilderError(f"definition {self.id!r} has no expansion")
        return Definition(self.id, self.system, self.inputs, self.expansion)


@dataclass
class DeductableBuilder:
    id: str
    system: SystemRef
    variables: tuple[Variable, ...]
    flags: tuple[Flag, ...] = ()
    premises: list[Formula] = field(default_factory=list)
    assertion: Formula | None = None

    def _parts(self) -> tuple[Formula, ...]:
        if self.assertion is None:
            raise BuilderError(f"{self.id!r} has no assertion")
        return tuple(self.premises)

    def finish_axiom(self) -> Axiom:
        premises = self._parts()
        assert self.assertion is not None
        return Axiom(
            self.id, self.system, self.variables, premises, self.assertion, self.flags
        )

    def finish_theorem(self) -> Theorem:
        premises = self._parts()
        assert self.assertion is not None
        return Theorem(
            self.id, self.system, self.variables, premises, self.assertion, self.flags
        )


@dataclass
class ProofBuilder:
    theorem: TheoremRef
    steps: list[ProofStep] = field(default_factory=list)

    def finish(self) -> Proof:
        return Proof(self.theorem, tuple(self.steps))


@dataclass
class DirectoryBuilder:
    systems: list[System] = field(default_factory=list)
    types: list[Type] = field(default_factory=list)
    symbols: list[Symbol] = field(default_factory=list)
    definitions: list[DefinitionBuilder] = field(default_factory=list)
    axioms: list[DeductableBuilder] = field(default_factory=list)
    theorems: list[DeductableBuilder] = field(default_factory=list)
    proofs: list[ProofBuilder] = field(default_factory=list)

    # -- declarations -------------------------------------------------------

    def add_system(self, id: str) -> SystemRef:
        self.systems.append(System(id))
        return SystemRef(len(self.systems) - 1)

    def add_type(self, id: str, system: SystemRef) -> TypeRef:
        self.types.append(Type(id, system))
        return TypeRef(len(self.types) - 1)

    def add_symbol(
        self, id: str, system: SystemRef, type_signature: TypeSignature
    ) -> SymbolRef:
        self.symbols.append(Symbol(id, system, type_signature))
        return SymbolRef(len(self.symbols) - 1)

    def add_definition(
        self,
        id: str,
        system: SystemRef,
        inputs: Iterable[Variable] = (),
        expansion: Formula | None = None,
    ) -> DefinitionRef:
        self.definitions.append(DefinitionBuilder(id, system, tuple(inputs), expansion))
        return DefinitionRef(len(self.definitions) - 1)

    def set_expansion(self, ref: DefinitionRef, expansion: Formula) -> None:
        self.definitions[ref].expansion = expansion

    def add_axiom(
        self,
        id: str,
        system: SystemRef,
        variables: Iterable[Variable] = (),
        premises: Iterable[Formula] = (),
        assertion: Formula | None = None,
        flags: Iterable[Flag] = (),
    ) -> AxiomRef:
        self.axioms.append(
            DeductableBuilder(
                id, system, tuple(variables), tuple(flags), list(premises), assertion
            )
        )
        return AxiomRef(len(self.axioms) - 1)

    def add_theorem(
        self,
        id: str,
        system: SystemRef,
        variables: Iterable[Variable] = (),
        premises: Iterable[Formula] = (),
        assertion: Formula | None = None,
        flags: Iterable[Flag] = (),
    ) -> TheoremRef:
        self.theorems.append(
            DeductableBuilder(
                id, system, tuple(variables), tuple(flags), list(premises), assertion
            )
        )
        return TheoremRef(len(self.theorems) - 1)

    def add_axiom_premise(self, ref: AxiomRef, premise: Formula) -> None:
        self.axioms[ref].premises.append(premise)

    def set_axiom_assertion(self, ref: AxiomRef, assertion: Formula) -> None:
        self.axioms[ref].assertion = assertion

    def add_theorem_premise(self, ref: TheoremRef, premise: Formula) -> None:
        self.theorems[ref].premises.append(premise)

    def set_theorem_assertion(self, ref: TheoremRef, assertion: Formula) -> None:
        self.theorems[ref].assertion = assertion

    # -- proofs ---------------------------------------------------------------

    def add_proof(
        self, theorem: TheoremRef, steps: Iterable[ProofStep] = ()
    ) -> ProofRef:
        self.proofs.append(ProofBuilder(theorem, list(steps)))
        return ProofRef(len(self.proofs) - 1)

    def add_step(
        self, proof: ProofRef, justification: Justification, formula: Formula
    ) -> None:
        self.proofs[proof].steps.append(ProofStep(justification, formula))

    # -- linking ----------------------------------------------------------------

    def build(self) -> Directory:
        return Directory(
            systems=tuple(self.systems),
            types=tuple(self.types),
            symbols=tuple(self.symbols),
            definitions=tuple(d.finish() for d in self.definitions),
            axioms=tuple(a.finish_axiom() for a in self.axioms),
            theorems=tuple(t.finish_theorem() for t in self.theorems),
            proofs=tuple(p.finish() for p in self.proofs),
        )
