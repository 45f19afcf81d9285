"""Shorthand constructors for signatures, formulas and justifications.

These are the intended way to write documents by hand (and in tests)
rather than nesting AST nodes directly.
"""

from proofcore.directory import (
    ByDeductable,
    ByDefinition,
    ByFunctionApplication,
    ByHypothesis,
    BySubstitution,
    DeductableRef,
    Justification,
    ProofStep,
    Variable,
)
from proofcore.language import (
    Application,
    DefinitionTerm,
    Formula,
    SymbolTerm,
    VariableTerm,
)
from proofcore.refs import AxiomRef, DefinitionRef, SymbolRef, TheoremRef, TypeRef, VariableRef
from proofcore.types import Compound, Ground, TypeSignature


def ground(type_ref: int) -> Ground:
    return Ground(TypeRef(type_ref))


def arrow(*signatures: TypeSignature) -> TypeSignature:
    """``arrow(a, b, c)`` is ``a -> b -> c``."""
    if not signatures:
        raise ValueError("arrow() needs at least one signature")
    result = signatures[-1]
    for signature in reversed(signatures[:-1]):
        result = Compound(signature, result)
    return result


def variable(name: str, signature: TypeSignature) -> Variable:
    return Variable(id=name, type_signature=signature)


def sym(ref: int) -> SymbolTerm:
    return SymbolTerm(SymbolRef(ref))


def var(ref: int) -> VariableTerm:
    return VariableTerm(VariableRef(ref))


def app(function: Formula | int, *args: Formula) -> Formula:
    """Curried application; an int function is a symbol ref."""
    result: Formula = sym(function) if isinstance(function, int) else function
    for argument in args:
        result = Application(result, argument)
    return result


def defn(ref: int, *inputs: Formula) -> DefinitionTerm:
    return DefinitionTerm(DefinitionRef(ref), tuple(inputs))


def by_axiom(ref: int) -> ByDeductable:
    return ByDeductable(DeductableRef.axiom(AxiomRef(ref)))


def by_theorem(ref: int) -> ByDeductable:
    return ByDeductable(DeductableRef.theorem(TheoremRef(ref)))


def by_hypothesis(index: int) -> ByHypothesis:
    return ByHypothesis(index)


BY_DEFINITION = ByDefinition()
BY_FUNCTION_APPLICATION = ByFunctionApplication()
BY_SUBSTITUTION = BySubstitution()


def step(justification: Justification, formula: Formula) -> ProofStep:
    return ProofStep(justification, formula)
