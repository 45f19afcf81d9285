"""proofcore: the verification core of a formal-proof checker."""

from .refs import (
    AxiomRef,
    DefinitionRef,
    ProofRef,
    SymbolRef,
    SystemRef,
    TheoremRef,
    TypeRef,
    VariableRef,
)
from .types import Compound, Ground, TypeSignature
from .language import (
    Application,
    DefinitionTerm,
    Formula,
    Head,
    SymbolTerm,
    VariableTerm,
    compatible,
    expand_definitions,
    substitute,
)
from .directory import (
    Axiom,
    ByDeductable,
    ByDefinition,
    ByFunctionApplication,
    ByHypothesis,
    BySubstitution,
    DeductableRef,
    Definition,
    Directory,
    Flag,
    Proof,
    ProofStep,
    Symbol,
    System,
    Theorem,
    Type,
    Variable,
)
from .errors import (
    CheckingError,
    ContractViolation,
    Diagnostics,
    ErrorKind,
    Phase,
    Subject,
    SubjectKind,
)
from .substitution import Substitution, SubstitutionList
from .properties import PropertyList, PropertyRegistry
from .builder import BuilderError, DirectoryBuilder
from .checker import CheckResult, check_directory, verify_directory
from .serialization import DocumentError, dumps, loads
from .result import Ok, Err, Result

__all__ = [
    # Refs
    "AxiomRef", "DefinitionRef", "ProofRef", "SymbolRef", "SystemRef",
    "TheoremRef", "TypeRef", "VariableRef",
    # Types
    "Compound", "Ground", "TypeSignature",
    # Formulas
    "Application", "DefinitionTerm", "Formula", "Head", "SymbolTerm",
    "VariableTerm", "compatible", "expand_definitions", "substitute",
    # Directory
    "Axiom", "ByDeductable", "ByDefinition", "ByFunctionApplication",
    "ByHypothesis", "BySubstitution", "DeductableRef", "Definition",
    "Directory", "Flag", "Proof", "ProofStep", "Symbol", "System", "Theorem",
    "Type", "Variable",
    # Errors
    "CheckingError", "ContractViolation", "Diagnostics", "ErrorKind", "Phase",
    "Subject", "SubjectKind",
    # Checking
    "Substitution", "SubstitutionList", "PropertyList", "PropertyRegistry",
    "BuilderError", "DirectoryBuilder", "CheckResult", "check_directory",
    "verify_directory",
    # Serialization
    "DocumentError", "dumps", "loads",
    # Result
    "Ok", "Err", "Result",
]
