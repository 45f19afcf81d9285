"""The two-phase pipeline: verify the structure, then check the derivations.

Phase one accumulates every structural problem of the whole directory:
dangling references, arity and type errors, badly shaped flags and bad
hypothesis indices.  It also fills the property registry from the flags.
Phase two only runs when phase one found nothing, and checks every proof
step against the facts before it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .directory import Deductable, DeductableKind, DeductableRef, Directory, Flag
from .errors import CheckingError, Diagnostics, Phase, Subject, SubjectKind
from .proof import Chains, check_proof, verify_proof
from .properties import PropertyRegistry, verify_flag_list, verify_flags
from .refs import DefinitionRef, ProofRef
from .signatures import (
    SignatureCache,
    verify_formula,
    verify_scope,
    verify_signature,
    verify_system,
)
from .types import TypeSignature

logger = logging.getLogger(__name__)

_RELATION_FLAGS = (Flag.REFLEXIVE, Flag.SYMMETRIC, Flag.TRANSITIVE)
_FUNCTION_FLAGS = (Flag.FUNCTION,)


@dataclass(frozen=True)
class CheckResult:
    errors: tuple[CheckingError, ...]
    phase: Phase
    registry: PropertyRegistry = field(default_factory=PropertyRegistry)
    chains: Mapping[ProofRef, Chains] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def errors_for(self, kind: SubjectKind) -> tuple[CheckingError, ...]:
        return tuple(e for e in self.errors if e.subject.kind == kind)


@dataclass(frozen=True)
class VerifyResult:
    diagnostics: Diagnostics
    registry: PropertyRegistry
    cache: SignatureCache
    # declared signature of every definition, None where its body is unsound
    definition_signatures: tuple[TypeSignature | None, ...] = ()


def _deductable_subject(ref: DeductableRef) -> Subject:
    match ref.kind:
        case DeductableKind.AXIOM:
            return Subject(SubjectKind.AXIOM, ref.index)
        case DeductableKind.THEOREM:
            return Subject(SubjectKind.THEOREM, ref.index)


def _verify_deductable(
    subject: Subject,
    deductable: Deductable,
    directory: Directory,
    cache: SignatureCache,
    diagnostics: Diagnostics,
) -> bool:
    """Structural checks of one axiom or theorem; True if it is sound."""
    before = len(diagnostics.errors)
    diagnostics.report_all(subject, verify_system(deductable.system, directory))
    diagnostics.report_all(subject, verify_scope(deductable.variables, directory))
    for i, premise in enumerate(deductable.premises):
        _, faults = verify_formula(
            premise, deductable.variables, directory, cache, path=f"premises[{i}]"
        )
        diagnostics.report_all(subject, faults)
    _, faults = verify_formula(
        deductable.assertion, deductable.variables, directory, cache, path="assertion"
    )
    diagnostics.report_all(subject, faults)
    diagnostics.report_all(subject, verify_flag_list(deductable.flags))
    return len(diagnostics.errors) == before


def verify_directory(directory: Directory) -> VerifyResult:
    """Phase one over the whole directory."""
    diagnostics = Diagnostics(Phase.VERIFY)
    cache = SignatureCache(directory)
    registry = PropertyRegistry()

    for i, type_ in enumerate(directory.types):
        diagnostics.report_all(
            Subject(SubjectKind.TYPE, i), verify_system(type_.system, directory)
        )

    for i, symbol in enumerate(directory.symbols):
        subject = Subject(SubjectKind.SYMBOL, i)
        diagnostics.report_all(subject, verify_system(symbol.system, directory))
        diagnostics.report_all(
            subject, verify_signature(symbol.type_signature, directory)
        )

    for i, definition in enumerate(directory.definitions):
        subject = Subject(SubjectKind.DEFINITION, i)
        diagnostics.report_all(subject, verify_system(definition.system, directory))
        diagnostics.report_all(subject, verify_scope(definition.inputs, directory))
        _, faults = verify_formula(
            definition.expansion,
            definition.inputs,
            directory,
            cache,
            path="expansion",
            definition_limit=DefinitionRef(i),
        )
        diagnostics.report_all(subject, faults)
    definition_signatures = tuple(
        cache.definition_signature(DefinitionRef(i))
        for i in range(len(directory.definitions))
    )

    sound: list[tuple[DeductableRef, Deductable]] = []
    for ref, deductable in directory.deductables():
        subject = _deductable_subject(ref)
        if _verify_deductable(subject, deductable, directory, cache, diagnostics):
            sound.append((ref, deductable))

    # Congruence laws need their relation to be a preorder already, so every
    # relation law is registered before any function law is looked at.
    for flags in (_RELATION_FLAGS, _FUNCTION_FLAGS):
        for ref, deductable in sound:
            diagnostics.report_all(
                _deductable_subject(ref),
                verify_flags(deductable, ref, registry, flags),
            )

    for i in range(len(directory.proofs)):
        verify_proof(ProofRef(i), directory, cache, diagnostics)

    logger.debug("Verify phase: %d error(s)", len(diagnostics.errors))
    return VerifyResult(diagnostics, registry, cache, definition_signatures)


def check_directory(directory: Directory) -> CheckResult:
    """Run both phases and collect every error."""
    verified = verify_directory(directory)
    if verified.diagnostics.error_found:
        logger.warning(
            "Structural verification failed with %d error(s); skipping proofs",
            len(verified.diagnostics.errors),
        )
        return CheckResult(
            tuple(verified.diagnostics.errors), Phase.VERIFY, verified.registry
        )

    diagnostics = Diagnostics(Phase.CHECK)
    chains: dict[ProofRef, Chains] = {}
    for i in range(len(directory.proofs)):
        proof_chains = check_proof(ProofRef(i), directory, verified.registry, diagnostics)
        if proof_chains:
            chains[ProofRef(i)] = proof_chains

    if diagnostics.error_found:
        logger.warning("Derivation check failed with %d error(s)", len(diagnostics.errors))
    else:
        logger.info("All %d proof(s) valid", len(directory.proofs))
    return CheckResult(
        tuple(diagnostics.errors), Phase.CHECK, verified.registry, MappingProxyType(chains)
    )
