"""Typed diagnostics for the verify and check phases.

Every problem the core finds is a ``CheckingError``: a ``Subject`` naming the
entity it concerns plus an ``ErrorKind``.  Routines deep in the checker never
know which axiom, theorem or proof step they are working for, so they return
plain ``Fault`` values and the caller attaches the subject when it records
them in the ``Diagnostics`` collector.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class ContractViolation(Exception):
    """An internal invariant was broken.

    Raised only when an earlier validation phase failed to reject malformed
    input, never for user errors.
    """


class Phase(Enum):
    VERIFY = "verify"
    CHECK = "check"


class ErrorKind(Enum):
    # -- references ---------------------------------------------------------
    INVALID_SYSTEM_REF = "invalid_system_ref"
    INVALID_TYPE_REF = "invalid_type_ref"
    INVALID_SYMBOL_REF = "invalid_symbol_ref"
    INVALID_VARIABLE_REF = "invalid_variable_ref"
    INVALID_DEFINITION_REF = "invalid_definition_ref"
    INVALID_AXIOM_REF = "invalid_axiom_ref"
    INVALID_THEOREM_REF = "invalid_theorem_ref"

    # -- formula shape and typing ------------------------------------------
    DEFINITION_WRONG_ARITY = "definition_wrong_arity"
    DEFINITION_FORWARD_REFERENCE = "definition_forward_reference"
    DEFINITION_INPUT_TYPE_MISMATCH = "definition_input_type_mismatch"
    APPLICATION_NOT_FUNCTION = "application_not_function"
    APPLICATION_TYPE_MISMATCH = "application_type_mismatch"

    # -- proof structure ----------------------------------------------------
    HYPOTHESIS_ZERO_INDEX = "hypothesis_zero_index"
    HYPOTHESIS_INDEX_OUT_OF_RANGE = "hypothesis_index_out_of_range"
    THEOREM_UNPROVEN = "theorem_unproven"
    THEOREM_USED_BEFORE_PROOF = "theorem_used_before_proof"
    THEOREM_CIRCULAR_PROOF = "theorem_circular_proof"

    # -- flags ----------------------------------------------------------------
    DUPLICATE_FLAG = "duplicate_flag"
    DUPLICATE_PROPERTY = "duplicate_property"

    REFLEXIVITY_PREMISE_NOT_EMPTY = "reflexivity_premise_not_empty"
    REFLEXIVITY_ASSERTION_NOT_BINARY = "reflexivity_assertion_not_binary"
    REFLEXIVITY_ARGUMENT_MISMATCH = "reflexivity_argument_mismatch"

    SYMMETRY_PREMISE_WRONG_LENGTH = "symmetry_premise_wrong_length"
    SYMMETRY_PREMISE_NOT_BINARY = "symmetry_premise_not_binary"
    SYMMETRY_ASSERTION_NOT_BINARY = "symmetry_assertion_not_binary"
    SYMMETRY_RELATION_MISMATCH = "symmetry_relation_mismatch"
    SYMMETRY_ARGUMENT_MISMATCH = "symmetry_argument_mismatch"

    TRANSITIVITY_PREMISE_WRONG_LENGTH = "transitivity_premise_wrong_length"
    TRANSITIVITY_FIRST_PREMISE_NOT_BINARY = "transitivity_first_premise_not_binary"
    TRANSITIVITY_SECOND_PREMISE_NOT_BINARY = "transitivity_second_premise_not_binary"
    TRANSITIVITY_PREMISE_RELATION_MISMATCH = "transitivity_premise_relation_mismatch"
    TRANSITIVITY_PREMISE_ARGUMENT_MISMATCH = "transitivity_premise_argument_mismatch"
    TRANSITIVITY_ASSERTION_NOT_BINARY = "transitivity_assertion_not_binary"
    TRANSITIVITY_ASSERTION_RELATION_MISMATCH = "transitivity_assertion_relation_mismatch"
    TRANSITIVITY_ASSERTION_LEFT_MISMATCH = "transitivity_assertion_left_mismatch"
    TRANSITIVITY_ASSERTION_RIGHT_MISMATCH = "transitivity_assertion_right_mismatch"

    FUNCTION_PREMISE_EMPTY = "function_premise_empty"
    FUNCTION_ASSERTION_NOT_BINARY = "function_assertion_not_binary"
    FUNCTION_RELATION_NOT_PREORDER = "function_relation_not_preorder"
    FUNCTION_ASSERTION_LEFT_NOT_APPLICATION = "function_assertion_left_not_application"
    FUNCTION_ASSERTION_RIGHT_NOT_APPLICATION = "function_assertion_right_not_application"
    FUNCTION_ASSERTION_FUNCTION_MISMATCH = "function_assertion_function_mismatch"
    FUNCTION_ASSERTION_ARITY_MISMATCH = "function_assertion_arity_mismatch"
    FUNCTION_PREMISE_ARITY_MISMATCH = "function_premise_arity_mismatch"
    FUNCTION_ASSERTION_INPUT_NOT_VARIABLE = "function_assertion_input_not_variable"
    FUNCTION_PREMISE_NOT_BINARY = "function_premise_not_binary"
    FUNCTION_PREMISE_RELATION_MISMATCH = "function_premise_relation_mismatch"
    FUNCTION_PREMISE_LEFT_MISMATCH = "function_premise_left_mismatch"
    FUNCTION_PREMISE_RIGHT_MISMATCH = "function_premise_right_mismatch"

    # -- derivation -----------------------------------------------------------
    AXIOM_ASSERTION_NOT_SUBSTITUTABLE = "axiom_assertion_not_substitutable"
    AXIOM_NOT_SUBSTITUTABLE = "axiom_not_substitutable"
    THEOREM_ASSERTION_NOT_SUBSTITUTABLE = "theorem_assertion_not_substitutable"
    THEOREM_NOT_SUBSTITUTABLE = "theorem_not_substitutable"
    HYPOTHESIS_MISMATCH = "hypothesis_mismatch"
    DEFINITION_MISMATCH = "definition_mismatch"

    MACRO_GOAL_NOT_BINARY = "macro_goal_not_binary"
    MACRO_RELATION_NOT_PREORDER = "macro_relation_not_preorder"
    MACRO_GOAL_NOT_REACHED = "macro_goal_not_reached"
    CONGRUENCE_NOT_DECOMPOSABLE = "congruence_not_decomposable"
    CONGRUENCE_FUNCTION_MISMATCH = "congruence_function_mismatch"
    CONGRUENCE_ARITY_MISMATCH = "congruence_arity_mismatch"
    CONGRUENCE_UNREGISTERED = "congruence_unregistered"
    SUBSTITUTION_NO_MIDDLE_TERM = "substitution_no_middle_term"

    EMPTY_PROOF = "empty_proof"
    ASSERTION_MISMATCH = "assertion_mismatch"


class SubjectKind(Enum):
    TYPE = "type"
    SYMBOL = "symbol"
    DEFINITION = "definition"
    AXIOM = "axiom"
    THEOREM = "theorem"
    PROOF = "proof"


@dataclass(frozen=True)
class Subject:
    """What an error is about.

    ``step`` is the 0-based proof step for proof subjects, and ``substep``
    the 0-based position inside a macro step's synthesized chain.
    """

    kind: SubjectKind
    index: int
    step: int | None = None
    substep: int | None = None

    def at_step(self, step: int, substep: int | None = None) -> Subject:
        return Subject(self.kind, self.index, step, substep)

    def describe(self) -> str:
        text = f"{self.kind.value} #{self.index}"
        if self.step is not None:
            text += f" step {self.step + 1}"
        if self.substep is not None:
            text += f" (synthesized {self.substep + 1})"
        return text


@dataclass(frozen=True)
class Fault:
    """An error value not yet attached to a subject."""

    kind: ErrorKind
    path: str | None = None


@dataclass(frozen=True)
class CheckingError:
    subject: Subject
    kind: ErrorKind
    phase: Phase
    path: str | None = None


@dataclass
class Diagnostics:
    """Accumulates errors for one phase of one run.

    Passed explicitly to every routine that can report; there is no global
    collector.
    """

    phase: Phase
    errors: list[CheckingError] = field(default_factory=list)

    def report(self, subject: Subject, fault: Fault) -> None:
        self.errors.append(CheckingError(subject, fault.kind, self.phase, fault.path))

    def report_all(self, subject: Subject, faults: Iterable[Fault]) -> None:
        for fault in faults:
            self.report(subject, fault)

    def error(self, subject: Subject, kind: ErrorKind, path: str | None = None) -> None:
        self.report(subject, Fault(kind, path))

    @property
    def error_found(self) -> bool:
        return bool(self.errors)
