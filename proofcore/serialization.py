"""JSON format for resolved documents.

Every node serializes to a dict with a "type" discriminator field.  All
cross references are integer positions, exactly as in the ``Directory``.
Loading goes through ``DirectoryBuilder`` so a loaded document is linked
the same way as one built in code.

Round-trip: loads(dumps(d)) == d for every directory d.
"""

from __future__ import annotations

import json
from typing import Any

from .builder import BuilderError, DirectoryBuilder
from .directory import (
    Axiom,
    ByDeductable,
    ByDefinition,
    ByFunctionApplication,
    ByHypothesis,
    BySubstitution,
    DeductableKind,
    DeductableRef,
    Directory,
    Flag,
    Justification,
    Proof,
    ProofStep,
    Theorem,
    Variable,
)
from .language import Application, DefinitionTerm, Formula, SymbolTerm, VariableTerm
from .refs import (
    AxiomRef,
    DefinitionRef,
    SymbolRef,
    SystemRef,
    TheoremRef,
    TypeRef,
    VariableRef,
)
from .types import Compound, Ground, TypeSignature


class DocumentError(ValueError):
    """The input is not a well-formed document."""


def _index(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DocumentError(f"{what} must be an integer index, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Type signatures
# ---------------------------------------------------------------------------


def signature_to_json(s: TypeSignature) -> dict[str, Any]:
    if isinstance(s, Ground):
        return {"type": "ground", "ref": s.type}
    elif isinstance(s, Compound):
        return {
            "type": "compound",
            "input": signature_to_json(s.input),
            "output": signature_to_json(s.output),
        }
    raise TypeError(f"Unknown signature type: {type(s)}")


def signature_from_json(d: dict[str, Any]) -> TypeSignature:
    t = d["type"]
    if t == "ground":
        return Ground(TypeRef(_index(d["ref"], "type ref")))
    elif t == "compound":
        return Compound(
            signature_from_json(d["input"]), signature_from_json(d["output"])
        )
    raise DocumentError(f"Unknown signature type: {t}")


def variable_to_json(v: Variable) -> dict[str, Any]:
    return {
        "type": "variable",
        "id": v.id,
        "signature": signature_to_json(v.type_signature),
    }


def variable_from_json(d: dict[str, Any]) -> Variable:
    return Variable(id=d["id"], type_signature=signature_from_json(d["signature"]))


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------


def formula_to_json(f: Formula) -> dict[str, Any]:
    if isinstance(f, SymbolTerm):
        return {"type": "symbol", "ref": f.symbol}
    elif isinstance(f, VariableTerm):
        return {"type": "var", "ref": f.variable}
    elif isinstance(f, Application):
        return {
            "type": "application",
            "function": formula_to_json(f.function),
            "argument": formula_to_json(f.argument),
        }
    elif isinstance(f, DefinitionTerm):
        return {
            "type": "definition",
            "ref": f.definition,
            "inputs": [formula_to_json(i) for i in f.inputs],
        }
    raise TypeError(f"Unknown formula type: {type(f)}")


def formula_from_json(d: dict[str, Any]) -> Formula:
    t = d["type"]
    if t == "symbol":
        return SymbolTerm(SymbolRef(_index(d["ref"], "symbol ref")))
    elif t == "var":
        return VariableTerm(VariableRef(_index(d["ref"], "variable ref")))
    elif t == "application":
        return Application(
            formula_from_json(d["function"]), formula_from_json(d["argument"])
        )
    elif t == "definition":
        return DefinitionTerm(
            DefinitionRef(_index(d["ref"], "definition ref")),
            tuple(formula_from_json(i) for i in d["inputs"]),
        )
    raise DocumentError(f"Unknown formula type: {t}")


# ---------------------------------------------------------------------------
# Justifications
# ---------------------------------------------------------------------------


def justification_to_json(j: Justification) -> dict[str, Any]:
    if isinstance(j, ByDeductable):
        return {"type": j.ref.kind.value, "ref": j.ref.index}
    elif isinstance(j, ByHypothesis):
        return {"type": "hypothesis", "index": j.index}
    elif isinstance(j, ByDefinition):
        return {"type": "definition"}
    elif isinstance(j, ByFunctionApplication):
        return {"type": "function_application"}
    elif isinstance(j, BySubstitution):
        return {"type": "substitution"}
    raise TypeError(f"Unknown justification type: {type(j)}")


def justification_from_json(d: dict[str, Any]) -> Justification:
    t = d["type"]
    if t == "axiom":
        return ByDeductable(DeductableRef.axiom(AxiomRef(_index(d["ref"], "axiom ref"))))
    elif t == "theorem":
        return ByDeductable(
            DeductableRef.theorem(TheoremRef(_index(d["ref"], "theorem ref")))
        )
    elif t == "hypothesis":
        return ByHypothesis(_index(d["index"], "hypothesis index"))
    elif t == "definition":
        return ByDefinition()
    elif t == "function_application":
        return ByFunctionApplication()
    elif t == "substitution":
        return BySubstitution()
    raise DocumentError(f"Unknown justification type: {t}")


def step_to_json(s: ProofStep) -> dict[str, Any]:
    return {
        "type": "step",
        "justification": justification_to_json(s.justification),
        "formula": formula_to_json(s.formula),
    }


def step_from_json(d: dict[str, Any]) -> ProofStep:
    return ProofStep(
        justification_from_json(d["justification"]), formula_from_json(d["formula"])
    )


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


def deductable_to_json(x: Axiom | Theorem) -> dict[str, Any]:
    return {
        "type": "axiom" if isinstance(x, Axiom) else "theorem",
        "id": x.id,
        "system": x.system,
        "variables": [variable_to_json(v) for v in x.variables],
        "premises": [formula_to_json(p) for p in x.premises],
        "assertion": formula_to_json(x.assertion),
        "flags": [f.value for f in x.flags],
    }


def proof_to_json(p: Proof) -> dict[str, Any]:
    return {
        "type": "proof",
        "theorem": p.theorem,
        "steps": [step_to_json(s) for s in p.steps],
    }


def directory_to_json(directory: Directory) -> dict[str, Any]:
    return {
        "type": "document",
        "systems": [{"type": "system", "id": s.id} for s in directory.systems],
        "types": [
            {"type": "type", "id": t.id, "system": t.system} for t in directory.types
        ],
        "symbols": [
            {
                "type": "symbol",
                "id": s.id,
                "system": s.system,
                "signature": signature_to_json(s.type_signature),
            }
            for s in directory.symbols
        ],
        "definitions": [
            {
                "type": "definition",
                "id": d.id,
                "system": d.system,
                "inputs": [variable_to_json(v) for v in d.inputs],
                "expansion": formula_to_json(d.expansion),
            }
            for d in directory.definitions
        ],
        "axioms": [deductable_to_json(a) for a in directory.axioms],
        "theorems": [deductable_to_json(t) for t in directory.theorems],
        "proofs": [proof_to_json(p) for p in directory.proofs],
    }


def _flags(d: dict[str, Any]) -> list[Flag]:
    try:
        return [Flag(f) for f in d.get("flags", [])]
    except ValueError as e:
        raise DocumentError(str(e)) from e


def directory_from_json(d: dict[str, Any]) -> Directory:
    builder = DirectoryBuilder()
    for s in d.get("systems", []):
        builder.add_system(s["id"])
    for t in d.get("types", []):
        builder.add_type(t["id"], SystemRef(_index(t["system"], "system ref")))
    for s in d.get("symbols", []):
        builder.add_symbol(
            s["id"],
            SystemRef(_index(s["system"], "system ref")),
            signature_from_json(s["signature"]),
        )
    for df in d.get("definitions", []):
        builder.add_definition(
            df["id"],
            SystemRef(_index(df["system"], "system ref")),
            [variable_from_json(v) for v in df.get("inputs", [])],
            formula_from_json(df["expansion"]),
        )
    for a in d.get("axioms", []):
        builder.add_axiom(
            a["id"],
            SystemRef(_index(a["system"], "system ref")),
            [variable_from_json(v) for v in a.get("variables", [])],
            [formula_from_json(p) for p in a.get("premises", [])],
            formula_from_json(a["assertion"]),
            _flags(a),
        )
    for th in d.get("theorems", []):
        builder.add_theorem(
            th["id"],
            SystemRef(_index(th["system"], "system ref")),
            [variable_from_json(v) for v in th.get("variables", [])],
            [formula_from_json(p) for p in th.get("premises", [])],
            formula_from_json(th["assertion"]),
            _flags(th),
        )
    for p in d.get("proofs", []):
        builder.add_proof(
            TheoremRef(_index(p["theorem"], "theorem ref")),
            [step_from_json(s) for s in p.get("steps", [])],
        )
    return builder.build()


# ---------------------------------------------------------------------------
# Convenience: dump / load entire documents as JSON strings
# ---------------------------------------------------------------------------


def dumps(directory: Directory) -> str:
    return json.dumps(directory_to_json(directory), indent=2)


def loads(s: str) -> Directory:
    """Parse a document, raising ``DocumentError`` on any malformed input."""
    try:
        data = json.loads(s)
        if not isinstance(data, dict):
            raise DocumentError("document must be a JSON object")
        return directory_from_json(data)
    except DocumentError:
        raise
    except (KeyError, TypeError, AttributeError) as e:
        raise DocumentError(f"malformed document: {e!r}") from e
    except (BuilderError, ValueError) as e:
        raise DocumentError(str(e)) from e
