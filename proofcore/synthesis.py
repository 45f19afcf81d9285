"""Expansion of macro justifications into elementary steps.

"By function application" proves ``left ~ right`` for a registered preorder
``~`` by taking the structure of both sides apart:

    1. ``left ~ right`` is already a fact          -> nothing to emit
    2. ``left`` and ``right`` are identical        -> reflexivity
    3. ``right ~ left`` is a fact, ``~`` symmetric -> symmetry
    4. ``f(a1..an) ~ f(b1..bn)``                   -> prove every ``ai ~ bi``,
                                                      then congruence of ``f``

"By substitution" proves ``left ~ right`` from an earlier fact
``mid_left ~ mid_right``: both ``left ~ mid_left`` and ``mid_right ~ right``
are proved by function application and the pieces are joined with two
transitivity steps.

Both run on an explicit task stack.  Every emitted step only relies on
facts and on steps emitted before it, so the chain can be checked in order
like ordinary proof steps.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .directory import ByDeductable, DeductableRef, Directory, ProofStep
from .errors import ContractViolation, ErrorKind, Fault
from .language import Formula, Head, apply_head, binary, spine
from .properties import PropertyRegistry
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Prove:
    left: Formula
    right: Formula


@dataclass(frozen=True)
class _Emit:
    proof: DeductableRef
    formula: Formula


@dataclass
class _Chain:
    """Steps synthesized for one relation, plus every formula known so far."""

    relation: Head
    registry: PropertyRegistry
    directory: Directory
    known: set[Formula]
    steps: list[ProofStep] = field(default_factory=list)

    def relate(self, left: Formula, right: Formula) -> Formula:
        return apply_head(self.relation, (left, right))

    def emit(self, proof: DeductableRef, formula: Formula) -> None:
        if formula in self.known:
            return
        self.steps.append(ProofStep(ByDeductable(proof), formula))
        self.known.add(formula)

    def prove(self, left: Formula, right: Formula) -> Fault | None:
        """Extend the chain until ``left ~ right`` is known."""
        tasks: list[_Prove | _Emit] = [_Prove(left, right)]
        while tasks:
            match tasks.pop():
                case _Emit(proof, formula):
                    self.emit(proof, formula)

                case _Prove(a, b):
                    goal = self.relate(a, b)
                    if goal in self.known:
                        continue

                    reflexivity = self.registry.reflexivity(self.relation)
                    if a == b and reflexivity is not None:
                        self.emit(reflexivity, goal)
                        continue

                    symmetry = self.registry.symmetry(self.relation)
                    if symmetry is not None and self.relate(b, a) in self.known:
                        self.emit(symmetry, goal)
                        continue

                    decomposed = self._decompose(a, b)
                    match decomposed:
                        case Fault():
                            return decomposed
                        case (congruence, pairs):
                            tasks.append(_Emit(congruence, goal))
                            for pair in reversed(pairs):
                                tasks.append(_Prove(*pair))
        return None

    def _decompose(
        self, left: Formula, right: Formula
    ) -> Fault | tuple[DeductableRef, list[tuple[Formula, Formula]]]:
        left_spine = spine(left)
        right_spine = spine(right)
        if left_spine is None or right_spine is None:
            return Fault(ErrorKind.CONGRUENCE_NOT_DECOMPOSABLE)
        function, left_inputs = left_spine
        right_function, right_inputs = right_spine
        if function != right_function:
            return Fault(ErrorKind.CONGRUENCE_FUNCTION_MISMATCH)
        if len(left_inputs) != len(right_inputs):
            return Fault(ErrorKind.CONGRUENCE_ARITY_MISMATCH)
        congruence = self.registry.congruence(function, self.relation)
        if congruence is None:
            return Fault(ErrorKind.CONGRUENCE_UNREGISTERED)
        law = self.directory.get_deductable(congruence)
        if law is None or len(law.premises) != len(left_inputs):
            return Fault(ErrorKind.CONGRUENCE_ARITY_MISMATCH)
        return congruence, list(zip(left_inputs, right_inputs))


def _macro_relation(
    goal: Formula, registry: PropertyRegistry
) -> Fault | tuple[Head, Formula, Formula]:
    split = binary(goal)
    if split is None:
        return Fault(ErrorKind.MACRO_GOAL_NOT_BINARY)
    if not registry.is_preorder(split[0]):
        return Fault(ErrorKind.MACRO_RELATION_NOT_PREORDER)
    return split


def synthesize_function_application(
    goal: Formula,
    facts: Sequence[Formula],
    registry: PropertyRegistry,
    directory: Directory,
) -> Result[list[ProofStep], Fault]:
    """Elementary steps proving ``goal`` from ``facts`` by congruence."""
    split = _macro_relation(goal, registry)
    if isinstance(split, Fault):
        return Err(split)
    relation, left, right = split

    chain = _Chain(relation, registry, directory, set(facts))
    fault = chain.prove(left, right)
    if fault is not None:
        return Err(fault)
    logger.debug("Synthesized %d step(s) by function application", len(chain.steps))
    return Ok(chain.steps)


def synthesize_substitution(
    goal: Formula,
    facts: Sequence[Formula],
    registry: PropertyRegistry,
    directory: Directory,
) -> Result[list[ProofStep], Fault]:
    """Elementary steps proving ``goal`` by rewriting inside an earlier fact.

    The first earlier fact of the same relation whose sides can be reached
    from the goal's sides wins.
    """
    split = _macro_relation(goal, registry)
    if isinstance(split, Fault):
        return Err(split)
    relation, left, right = split
    transitivity = registry.transitivity(relation)
    if transitivity is None:
        raise ContractViolation(f"preorder {relation} has no transitivity proof")

    for candidate in facts:
        middle = binary(candidate)
        if middle is None or middle[0] != relation:
            continue
        _, middle_left, middle_right = middle

        chain = _Chain(relation, registry, directory, set(facts))
        if chain.prove(left, middle_left) is not None:
            continue
        if chain.prove(middle_right, right) is not None:
            continue
        chain.emit(transitivity, chain.relate(left, middle_right))
        chain.emit(transitivity, goal)
        logger.debug("Synthesized %d step(s) by substitution", len(chain.steps))
        return Ok(chain.steps)

    return Err(Fault(ErrorKind.SUBSTITUTION_NO_MIDDLE_TERM))
