"""Per-relation algebraic properties and flag verification.

Authors flag an axiom or theorem as ``reflexive``, ``symmetric``,
``transitive`` or ``function``.  Verification checks that the flagged
declaration really has the shape of that law and, if so, records it as the
proof of that property for the relation (or function) involved:

    reflexive     (no premises)            |- R(x, x)
    symmetric     R(a, b)                  |- R(b, a)
    transitive    R(a, b), R(b, c)         |- R(a, c)
    function      R(a1, b1) ... R(an, bn)  |- R(f(a1..an), f(b1..bn))

A property slot is written at most once.  Registering a second proof for a
slot is an error, never an overwrite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .directory import Deductable, DeductableRef, Flag
from .errors import ErrorKind, Fault
from .language import Head, VariableTerm, binary, simple_binary, spine

logger = logging.getLogger(__name__)


@dataclass
class PropertyList:
    """What is known about one relation or function.

    ``congruences`` is keyed by relation: on the list of a function ``f`` it
    maps ``R`` to the proof that ``R`` is preserved by ``f``.
    """

    reflexive: DeductableRef | None = None
    symmetric: DeductableRef | None = None
    transitive: DeductableRef | None = None
    congruences: dict[Head, DeductableRef] = field(default_factory=dict)

    def is_preorder(self) -> bool:
        return self.reflexive is not None and self.transitive is not None


@dataclass
class PropertyRegistry:
    """Property lists of every relation and function in a directory."""

    lists: dict[Head, PropertyList] = field(default_factory=dict)

    def get(self, head: Head) -> PropertyList:
        return self.lists.get(head) or PropertyList()

    def _list(self, head: Head) -> PropertyList:
        return self.lists.setdefault(head, PropertyList())

    def is_preorder(self, relation: Head) -> bool:
        return self.get(relation).is_preorder()

    def register(
        self, flag: Flag, head: Head, proof: DeductableRef, relation: Head | None = None
    ) -> Fault | None:
        """Record ``proof`` as the ``flag`` law of ``head``.

        For ``Flag.FUNCTION`` the head is the function and ``relation`` the
        relation it preserves.
        """
        properties = self._list(head)
        match flag:
            case Flag.REFLEXIVE:
                if properties.reflexive is not None:
                    return Fault(ErrorKind.DUPLICATE_PROPERTY)
                properties.reflexive = proof
            case Flag.SYMMETRIC:
                if properties.symmetric is not None:
                    return Fault(ErrorKind.DUPLICATE_PROPERTY)
                properties.symmetric = proof
            case Flag.TRANSITIVE:
                if properties.transitive is not None:
                    return Fault(ErrorKind.DUPLICATE_PROPERTY)
                properties.transitive = proof
            case Flag.FUNCTION:
                if relation is None:
                    raise ValueError("congruence registration needs a relation")
                if relation in properties.congruences:
                    return Fault(ErrorKind.DUPLICATE_PROPERTY)
                properties.congruences[relation] = proof
        logger.debug("Registered %s law of %s: %s", flag.value, head, proof)
        return None

    def reflexivity(self, relation: Head) -> DeductableRef | None:
        return self.get(relation).reflexive

    def symmetry(self, relation: Head) -> DeductableRef | None:
        return self.get(relation).symmetric

    def transitivity(self, relation: Head) -> DeductableRef | None:
        return self.get(relation).transitive

    def congruence(self, function: Head, relation: Head) -> DeductableRef | None:
        return self.get(function).congruences.get(relation)


# ---------------------------------------------------------------------------
# Flag verification
# ---------------------------------------------------------------------------


def verify_flag_list(flags: tuple[Flag, ...]) -> list[Fault]:
    faults: list[Fault] = []
    seen: set[Flag] = set()
    for i, flag in enumerate(flags):
        if flag in seen:
            faults.append(Fault(ErrorKind.DUPLICATE_FLAG, f"flags[{i}]"))
        seen.add(flag)
    return faults


def _registered(fault: Fault | None) -> list[Fault]:
    return [] if fault is None else [fault]


def verify_reflexivity(
    deductable: Deductable, proof: DeductableRef, registry: PropertyRegistry
) -> list[Fault]:
    if deductable.premises:
        return [Fault(ErrorKind.REFLEXIVITY_PREMISE_NOT_EMPTY, "premises")]
    split = simple_binary(deductable.assertion)
    if split is None:
        return [Fault(ErrorKind.REFLEXIVITY_ASSERTION_NOT_BINARY, "assertion")]
    relation, left, right = split
    if left != right:
        return [Fault(ErrorKind.REFLEXIVITY_ARGUMENT_MISMATCH, "assertion")]
    return _registered(registry.register(Flag.REFLEXIVE, relation, proof))


def verify_symmetry(
    deductable: Deductable, proof: DeductableRef, registry: PropertyRegistry
) -> list[Fault]:
    if len(deductable.premises) != 1:
        return [Fault(ErrorKind.SYMMETRY_PREMISE_WRONG_LENGTH, "premises")]
    premise = simple_binary(deductable.premises[0])
    if premise is None:
        return [Fault(ErrorKind.SYMMETRY_PREMISE_NOT_BINARY, "premises[0]")]
    assertion = simple_binary(deductable.assertion)
    if assertion is None:
        return [Fault(ErrorKind.SYMMETRY_ASSERTION_NOT_BINARY, "assertion")]
    premise_relation, premise_left, premise_right = premise
    relation, assertion_left, assertion_right = assertion
    if premise_relation != relation:
        return [Fault(ErrorKind.SYMMETRY_RELATION_MISMATCH, "assertion")]
    if premise_left != assertion_right or premise_right != assertion_left:
        return [Fault(ErrorKind.SYMMETRY_ARGUMENT_MISMATCH, "assertion")]
    return _registered(registry.register(Flag.SYMMETRIC, relation, proof))


def verify_transitivity(
    deductable: Deductable, proof: DeductableRef, registry: PropertyRegistry
) -> list[Fault]:
    if len(deductable.premises) != 2:
        return [Fault(ErrorKind.TRANSITIVITY_PREMISE_WRONG_LENGTH, "premises")]
    first = simple_binary(deductable.premises[0])
    if first is None:
        return [Fault(ErrorKind.TRANSITIVITY_FIRST_PREMISE_NOT_BINARY, "premises[0]")]
    second = simple_binary(deductable.premises[1])
    if second is None:
        return [Fault(ErrorKind.TRANSITIVITY_SECOND_PREMISE_NOT_BINARY, "premises[1]")]
    relation, first_left, first_right = first
    second_relation, second_left, second_right = second
    if relation != second_relation:
        return [Fault(ErrorKind.TRANSITIVITY_PREMISE_RELATION_MISMATCH, "premises[1]")]
    if first_right != second_left:
        return [Fault(ErrorKind.TRANSITIVITY_PREMISE_ARGUMENT_MISMATCH, "premises[1]")]
    assertion = simple_binary(deductable.assertion)
    if assertion is None:
        return [Fault(ErrorKind.TRANSITIVITY_ASSERTION_NOT_BINARY, "assertion")]
    assertion_relation, assertion_left, assertion_right = assertion
    if assertion_relation != relation:
        return [Fault(ErrorKind.TRANSITIVITY_ASSERTION_RELATION_MISMATCH, "assertion")]
    if assertion_left != first_left:
        return [Fault(ErrorKind.TRANSITIVITY_ASSERTION_LEFT_MISMATCH, "assertion")]
    if assertion_right != second_right:
        return [Fault(ErrorKind.TRANSITIVITY_ASSERTION_RIGHT_MISMATCH, "assertion")]
    return _registered(registry.register(Flag.TRANSITIVE, relation, proof))


def verify_function(
    deductable: Deductable, proof: DeductableRef, registry: PropertyRegistry
) -> list[Fault]:
    """Check a congruence law; the relation must already be a preorder."""
    premises = deductable.premises
    if not premises:
        return [Fault(ErrorKind.FUNCTION_PREMISE_EMPTY, "premises")]
    assertion = binary(deductable.assertion)
    if assertion is None:
        return [Fault(ErrorKind.FUNCTION_ASSERTION_NOT_BINARY, "assertion")]
    relation, left, right = assertion
    if not registry.is_preorder(relation):
        return [Fault(ErrorKind.FUNCTION_RELATION_NOT_PREORDER, "assertion")]

    left_spine = spine(left)
    if left_spine is None or not left_spine[1]:
        return [Fault(ErrorKind.FUNCTION_ASSERTION_LEFT_NOT_APPLICATION, "assertion")]
    right_spine = spine(right)
    if right_spine is None or not right_spine[1]:
        return [Fault(ErrorKind.FUNCTION_ASSERTION_RIGHT_NOT_APPLICATION, "assertion")]
    function, left_inputs = left_spine
    right_function, right_inputs = right_spine
    if function != right_function:
        return [Fault(ErrorKind.FUNCTION_ASSERTION_FUNCTION_MISMATCH, "assertion")]
    if len(left_inputs) != len(right_inputs):
        return [Fault(ErrorKind.FUNCTION_ASSERTION_ARITY_MISMATCH, "assertion")]
    if len(premises) != len(left_inputs):
        return [Fault(ErrorKind.FUNCTION_PREMISE_ARITY_MISMATCH, "premises")]

    for i, (premise, left_input, right_input) in enumerate(
        zip(premises, left_inputs, right_inputs)
    ):
        if not isinstance(left_input, VariableTerm) or not isinstance(
            right_input, VariableTerm
        ):
            return [Fault(ErrorKind.FUNCTION_ASSERTION_INPUT_NOT_VARIABLE, "assertion")]
        split = simple_binary(premise)
        path = f"premises[{i}]"
        if split is None:
            return [Fault(ErrorKind.FUNCTION_PREMISE_NOT_BINARY, path)]
        premise_relation, premise_left, premise_right = split
        if premise_relation != relation:
            return [Fault(ErrorKind.FUNCTION_PREMISE_RELATION_MISMATCH, path)]
        if premise_left != left_input.variable:
            return [Fault(ErrorKind.FUNCTION_PREMISE_LEFT_MISMATCH, path)]
        if premise_right != right_input.variable:
            return [Fault(ErrorKind.FUNCTION_PREMISE_RIGHT_MISMATCH, path)]

    return _registered(registry.register(Flag.FUNCTION, function, proof, relation))


_VERIFIERS = {
    Flag.REFLEXIVE: verify_reflexivity,
    Flag.SYMMETRIC: verify_symmetry,
    Flag.TRANSITIVE: verify_transitivity,
    Flag.FUNCTION: verify_function,
}


def verify_flags(
    deductable: Deductable,
    proof: DeductableRef,
    registry: PropertyRegistry,
    flags: tuple[Flag, ...],
) -> list[Fault]:
    """Verify the given subset of a declaration's flags, each at most once."""
    faults: list[Fault] = []
    for flag in dict.fromkeys(flags):
        if flag in deductable.flags:
            faults.extend(_VERIFIERS[flag](deductable, proof, registry))
    return faults
