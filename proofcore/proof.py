"""Step-by-step checking of proofs.

Every step of a proof is checked against the strictly earlier steps of the
same proof, never against itself or anything after it.  Macro steps are
expanded by ``proofcore.synthesis`` first; the synthesized steps are then
checked exactly like written ones, and each becomes a fact for whatever
follows it.
"""

from __future__ import annotations

import logging
from typing import TypeAlias
from collections.abc import Sequence
from dataclasses import replace

from .directory import (
    ByDeductable,
    ByDefinition,
    ByFunctionApplication,
    ByHypothesis,
    BySubstitution,
    DeductableKind,
    DeductableRef,
    Directory,
    ProofStep,
    Theorem,
)
from .errors import ContractViolation, Diagnostics, ErrorKind, Fault, Subject, SubjectKind
from .language import Formula, compatible
from .properties import PropertyRegistry
from .refs import AxiomRef, ProofRef, TheoremRef
from .result import Err, Ok
from .signatures import SignatureCache, verify_formula
from .substitution import Substitution, SubstitutionList
from .synthesis import synthesize_function_application, synthesize_substitution

logger = logging.getLogger(__name__)

Chains: TypeAlias = dict[int, tuple[ProofStep, ...]]


# ---------------------------------------------------------------------------
# Structural verification
# ---------------------------------------------------------------------------


def citation_fault(
    theorem: TheoremRef, citing: ProofRef, directory: Directory
) -> Fault | None:
    """Theorems may only be cited once their first proof is behind us."""
    first = directory.first_proof(theorem)
    if first is None:
        return Fault(ErrorKind.THEOREM_UNPROVEN, "justification")
    if first == citing:
        return Fault(ErrorKind.THEOREM_CIRCULAR_PROOF, "justification")
    if first > citing:
        return Fault(ErrorKind.THEOREM_USED_BEFORE_PROOF, "justification")
    return None


def _verify_justification(
    step: ProofStep, theorem: Theorem, proof_ref: ProofRef, directory: Directory
) -> Fault | None:
    match step.justification:
        case ByDeductable(DeductableRef(DeductableKind.AXIOM, index)):
            if directory.get_axiom(AxiomRef(index)) is None:
                return Fault(ErrorKind.INVALID_AXIOM_REF, "justification")
        case ByDeductable(DeductableRef(DeductableKind.THEOREM, index)):
            if directory.get_theorem(TheoremRef(index)) is None:
                return Fault(ErrorKind.INVALID_THEOREM_REF, "justification")
            return citation_fault(TheoremRef(index), proof_ref, directory)
        case ByHypothesis(index):
            if index == 0:
                return Fault(ErrorKind.HYPOTHESIS_ZERO_INDEX, "justification")
            if index < 0 or index > len(theorem.premises):
                return Fault(ErrorKind.HYPOTHESIS_INDEX_OUT_OF_RANGE, "justification")
        case ByDefinition() | ByFunctionApplication() | BySubstitution():
            pass
        case _:
            raise TypeError(f"Unknown justification: {type(step.justification)}")
    return None


def verify_proof(
    proof_ref: ProofRef,
    directory: Directory,
    cache: SignatureCache,
    diagnostics: Diagnostics,
) -> None:
    proof = directory.get_proof(proof_ref)
    if proof is None:
        raise ContractViolation(f"no proof #{proof_ref}")
    subject = Subject(SubjectKind.PROOF, proof_ref)
    theorem = directory.get_theorem(proof.theorem)
    if theorem is None:
        diagnostics.error(subject, ErrorKind.INVALID_THEOREM_REF, "theorem")
        return

    for i, step in enumerate(proof.steps):
        step_subject = subject.at_step(i)
        _, faults = verify_formula(
            step.formula, theorem.variables, directory, cache, path="formula"
        )
        diagnostics.report_all(step_subject, faults)
        fault = _verify_justification(step, theorem, proof_ref, directory)
        if fault is not None:
            diagnostics.report(step_subject, fault)


# ---------------------------------------------------------------------------
# Derivation checking
# ---------------------------------------------------------------------------


def check_deductable(
    ref: DeductableRef,
    formula: Formula,
    facts: Sequence[Formula],
    directory: Directory,
) -> Fault | None:
    """Can ``formula`` be obtained by instantiating ``ref`` against ``facts``?

    The assertion fixes part of the substitution; every premise must then be
    matched by some fact such that all the choices agree.
    """
    deductable = directory.get_deductable(ref)
    if deductable is None:
        raise ContractViolation(f"cannot cite unverified {ref.kind.value} #{ref.index}")
    is_axiom = ref.kind is DeductableKind.AXIOM

    required = Substitution.new(deductable.assertion, formula, directory)
    if required is None:
        return Fault(
            ErrorKind.AXIOM_ASSERTION_NOT_SUBSTITUTABLE
            if is_axiom
            else ErrorKind.THEOREM_ASSERTION_NOT_SUBSTITUTABLE
        )

    candidates = SubstitutionList.single(required)
    for premise in deductable.premises:
        candidates = candidates.merge(
            SubstitutionList.find(premise, facts, directory), directory
        )
        if candidates.impossible():
            return Fault(
                ErrorKind.AXIOM_NOT_SUBSTITUTABLE
                if is_axiom
                else ErrorKind.THEOREM_NOT_SUBSTITUTABLE
            )
    return None


def check_elementary(
    step: ProofStep,
    facts: Sequence[Formula],
    theorem: Theorem,
    directory: Directory,
) -> Fault | None:
    match step.justification:
        case ByDeductable(ref):
            return check_deductable(ref, step.formula, facts, directory)
        case ByHypothesis(index):
            if not 1 <= index <= len(theorem.premises):
                raise ContractViolation(f"unverified hypothesis index {index}")
            if theorem.premises[index - 1] != step.formula:
                return Fault(ErrorKind.HYPOTHESIS_MISMATCH)
            return None
        case ByDefinition():
            if any(compatible(step.formula, fact, directory) for fact in facts):
                return None
            return Fault(ErrorKind.DEFINITION_MISMATCH)
        case _:
            raise ContractViolation(
                f"not an elementary justification: {step.justification}"
            )


def _check_macro(
    step: ProofStep,
    subject: Subject,
    proof_ref: ProofRef,
    facts: list[Formula],
    theorem: Theorem,
    directory: Directory,
    registry: PropertyRegistry,
    diagnostics: Diagnostics,
) -> tuple[ProofStep, ...] | None:
    match step.justification:
        case ByFunctionApplication():
            result = synthesize_function_application(
                step.formula, facts, registry, directory
            )
        case BySubstitution():
            result = synthesize_substitution(step.formula, facts, registry, directory)
        case _:
            raise ContractViolation(f"not a macro justification: {step.justification}")

    match result:
        case Err(fault):
            diagnostics.report(subject, fault)
            return None
        case Ok(chain):
            pass

    for j, small in enumerate(chain):
        small_subject = replace(subject, substep=j)
        match small.justification:
            case ByDeductable(DeductableRef(DeductableKind.THEOREM, index)):
                fault = citation_fault(TheoremRef(index), proof_ref, directory)
                if fault is not None:
                    diagnostics.report(small_subject, fault)
            case _:
                pass
        fault = check_elementary(small, facts, theorem, directory)
        if fault is not None:
            diagnostics.report(small_subject, fault)
        facts.append(small.formula)

    if step.formula not in facts:
        diagnostics.error(subject, ErrorKind.MACRO_GOAL_NOT_REACHED)
    return tuple(chain)


def check_proof(
    proof_ref: ProofRef,
    directory: Directory,
    registry: PropertyRegistry,
    diagnostics: Diagnostics,
) -> Chains:
    """Check every step of a verified proof.

    Returns the synthesized chain of every macro step, by step index.
    """
    proof = directory.get_proof(proof_ref)
    if proof is None:
        raise ContractViolation(f"no proof #{proof_ref}")
    theorem = directory.get_theorem(proof.theorem)
    if theorem is None:
        raise ContractViolation(f"proof #{proof_ref} of unknown theorem")
    subject = Subject(SubjectKind.PROOF, proof_ref)

    if not proof.steps:
        diagnostics.error(subject, ErrorKind.EMPTY_PROOF)
        return {}

    chains: Chains = {}
    facts: list[Formula] = []
    for i, step in enumerate(proof.steps):
        step_subject = subject.at_step(i)
        match step.justification:
            case ByFunctionApplication() | BySubstitution():
                chain = _check_macro(
                    step,
                    step_subject,
                    proof_ref,
                    facts,
                    theorem,
                    directory,
                    registry,
                    diagnostics,
                )
                if chain is not None:
                    chains[i] = chain
            case _:
                fault = check_elementary(step, facts, theorem, directory)
                if fault is not None:
                    diagnostics.report(step_subject, fault)
        facts.append(step.formula)

    last = len(proof.steps) - 1
    if not compatible(proof.steps[last].formula, theorem.assertion, directory):
        diagnostics.error(subject.at_step(last), ErrorKind.ASSERTION_MISMATCH)

    logger.debug("Checked proof #%d: %d step(s)", proof_ref, len(proof.steps))
    return chains
