"""Matching template formulas against facts.

A ``Substitution`` binds the variables of a template (an axiom's assertion
or premise, say) to subformulas of a target so that substituting the bindings
back into the template reproduces the target, up to definition unfolding.

A ``SubstitutionList`` is a disjunction of substitutions.  ``find`` collects
every fact a premise could be discharged by, and ``merge`` keeps only the
combinations that agree on their shared variables, so the choice of fact for
one premise is never committed before the other premises are known.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from .language import (
    Application,
    DefinitionTerm,
    Formula,
    SymbolTerm,
    VariableTerm,
    compatible,
    substitute,
)
from .refs import VariableRef

if TYPE_CHECKING:
    from .directory import Directory


@dataclass(frozen=True)
class Substitution:
    bindings: Mapping[VariableRef, Formula]

    @classmethod
    def new(
        cls, template: Formula, target: Formula, directory: Directory
    ) -> Substitution | None:
        """Unify ``template`` against ``target``; None if they cannot match.

        Only the template's variables bind.  A variable seen twice must be
        bound to compatible targets both times.
        """
        bindings: dict[VariableRef, Formula] = {}
        stack: list[tuple[Formula, Formula]] = [(template, target)]

        while stack:
            pattern, candidate = stack.pop()
            match pattern:
                case SymbolTerm(symbol):
                    if not (isinstance(candidate, SymbolTerm) and candidate.symbol == symbol):
                        return None

                case VariableTerm(variable):
                    bound = bindings.get(variable)
                    if bound is None:
                        bindings[variable] = candidate
                    elif not compatible(bound, candidate, directory):
                        return None

                case Application(function, argument):
                    if not isinstance(candidate, Application):
                        return None
                    stack.append((function, candidate.function))
                    stack.append((argument, candidate.argument))

                case DefinitionTerm(definition, inputs):
                    if not (
                        isinstance(candidate, DefinitionTerm)
                        and candidate.definition == definition
                        and len(candidate.inputs) == len(inputs)
                    ):
                        return None
                    stack.extend(zip(inputs, candidate.inputs))

                case _:
                    raise TypeError(f"Unknown formula node: {type(pattern)}")

        return cls(MappingProxyType(bindings))

    def merge(self, other: Substitution, directory: Directory) -> Substitution | None:
        """Union of both binding sets, if they agree on shared variables.

        Where both sides bind a variable the left binding is kept.
        """
        for variable, formula in other.bindings.items():
            mine = self.bindings.get(variable)
            if mine is not None and not compatible(mine, formula, directory):
                return None
        return Substitution(MappingProxyType({**other.bindings, **self.bindings}))

    def apply(self, formula: Formula) -> Formula:
        return substitute(formula, self.bindings)

    def __getitem__(self, variable: VariableRef) -> Formula:
        return self.bindings[variable]

    def __contains__(self, variable: object) -> bool:
        return variable in self.bindings


@dataclass(frozen=True)
class SubstitutionList:
    substitutions: tuple[Substitution, ...]

    @classmethod
    def single(cls, substitution: Substitution) -> SubstitutionList:
        return cls((substitution,))

    @classmethod
    def find(
        cls, template: Formula, candidates: Iterable[Formula], directory: Directory
    ) -> SubstitutionList:
        """Every way ``template`` matches one of ``candidates``."""
        found = []
        for candidate in candidates:
            substitution = Substitution.new(template, candidate, directory)
            if substitution is not None:
                found.append(substitution)
        return cls(tuple(found))

    def merge(self, other: SubstitutionList, directory: Directory) -> SubstitutionList:
        """Every consistent pairing of one substitution from each side."""
        merged = []
        for left in self.substitutions:
            for right in other.substitutions:
                combined = left.merge(right, directory)
                if combined is not None:
                    merged.append(combined)
        return SubstitutionList(tuple(merged))

    def impossible(self) -> bool:
        return not self.substitutions

    def __iter__(self) -> Iterator[Substitution]:
        return iter(self.substitutions)

    def __len__(self) -> int:
        return len(self.substitutions)
