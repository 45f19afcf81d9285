"""Plain-text terminal summaries of check results, rendered with Jinja2."""

from __future__ import annotations

import os
from typing import Any

import jinja2

from .checker import CheckResult
from .directory import ByDeductable, Directory, ProofStep
from .errors import CheckingError, SubjectKind
from .refs import ProofRef

_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
_ENV = jinja2.Environment(
    loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template with the given keyword arguments."""
    template = _ENV.get_template(template_name)
    return template.render(**kwargs)


_ARENAS = {
    SubjectKind.TYPE: "types",
    SubjectKind.SYMBOL: "symbols",
    SubjectKind.DEFINITION: "definitions",
    SubjectKind.AXIOM: "axioms",
    SubjectKind.THEOREM: "theorems",
}


def subject_name(error: CheckingError, directory: Directory) -> str | None:
    """The author's identifier for the entity an error is about."""
    index = error.subject.index
    if error.subject.kind is SubjectKind.PROOF:
        proof = directory.get_proof(ProofRef(index))
        theorem = directory.get_theorem(proof.theorem) if proof else None
        return f"proof of {theorem.id}" if theorem else None
    arena = getattr(directory, _ARENAS[error.subject.kind])
    return arena[index].id if 0 <= index < len(arena) else None


def _describe_step(small: ProofStep, directory: Directory) -> str:
    match small.justification:
        case ByDeductable(ref):
            deductable = directory.get_deductable(ref)
            return deductable.id if deductable else f"{ref.kind.value} #{ref.index}"
        case other:
            return type(other).__name__


def format_report(
    name: str,
    result: CheckResult,
    directory: Directory,
    *,
    max_errors: int = 50,
    verbose: bool = False,
) -> str:
    """Human-readable report for terminal output."""
    errors = [
        {
            "kind": e.kind.value,
            "subject": e.subject.describe(),
            "name": subject_name(e, directory),
            "path": e.path,
        }
        for e in result.errors[:max_errors]
    ]
    chains = [
        {
            "location": f"proof #{proof_ref} step {step + 1}",
            "justifications": [_describe_step(s, directory) for s in chain],
        }
        for proof_ref, proof_chains in sorted(result.chains.items())
        for step, chain in sorted(proof_chains.items())
        if chain
    ]
    return render(
        "report.txt.j2",
        name=name,
        valid=result.is_valid,
        phase=result.phase.value,
        counts={
            "axioms": len(directory.axioms),
            "theorems": len(directory.theorems),
            "proofs": len(directory.proofs),
        },
        total=len(result.errors),
        errors=errors,
        hidden=max(0, len(result.errors) - max_errors),
        chains=chains,
        verbose=verbose,
    ).rstrip("\n")
