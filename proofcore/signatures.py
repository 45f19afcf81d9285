"""Structural verification and type signatures of formulas.

``verify_formula`` walks a formula once, bottom-up, and does two jobs at the
same time: it reports every dangling reference, arity error and type error it
finds, and it infers the formula's signature wherever the subtree is sound.
A subtree that already produced an error has no signature, and its parents
stay silent about it rather than reporting knock-on type errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .directory import Definition, Directory, Variable, local_variable
from .errors import ErrorKind, Fault
from .language import Application, DefinitionTerm, Formula, SymbolTerm, VariableTerm
from .refs import DefinitionRef, SystemRef
from .types import Compound, Ground, TypeSignature, type_refs


def _join(prefix: str, part: str) -> str:
    return f"{prefix}.{part}" if prefix else part


@dataclass
class SignatureCache:
    """Expansion signatures of definitions, computed at most once per run."""

    directory: Directory
    _expansions: dict[DefinitionRef, TypeSignature | None] = field(default_factory=dict)

    def expansion_signature(self, ref: DefinitionRef) -> TypeSignature | None:
        """Signature of a definition applied to all of its inputs."""
        if ref in self._expansions:
            return self._expansions[ref]
        definition = self.directory.get_definition(ref)
        signature: TypeSignature | None = None
        if definition is not None:
            signature, _ = verify_formula(
                definition.expansion,
                definition.inputs,
                self.directory,
                self,
                definition_limit=ref,
            )
        self._expansions[ref] = signature
        return signature

    def definition_signature(self, ref: DefinitionRef) -> TypeSignature | None:
        """The declared signature: expansion extended by the formal inputs."""
        expansion = self.expansion_signature(ref)
        definition = self.directory.get_definition(ref)
        if expansion is None or definition is None:
            return None
        return expansion.extend([v.type_signature for v in definition.inputs])


def verify_signature(signature: TypeSignature, directory: Directory) -> list[Fault]:
    return [
        Fault(ErrorKind.INVALID_TYPE_REF)
        for type_ref in type_refs(signature)
        if directory.get_type(type_ref) is None
    ]


def verify_system(ref: SystemRef, directory: Directory) -> list[Fault]:
    if directory.get_system(ref) is None:
        return [Fault(ErrorKind.INVALID_SYSTEM_REF, "system")]
    return []


def verify_scope(scope: tuple[Variable, ...], directory: Directory) -> list[Fault]:
    faults: list[Fault] = []
    for i, variable in enumerate(scope):
        for fault in verify_signature(variable.type_signature, directory):
            faults.append(Fault(fault.kind, f"variables[{i}]"))
    return faults


def verify_formula(
    formula: Formula,
    scope: tuple[Variable, ...],
    directory: Directory,
    cache: SignatureCache,
    *,
    path: str = "",
    definition_limit: DefinitionRef | None = None,
) -> tuple[TypeSignature | None, list[Fault]]:
    """Check a formula and infer its signature.

    Every violation is reported and children are always visited.
    ``definition_limit`` restricts definition references to those
    declared strictly before it, for checking definition bodies.
    """
    faults: list[Fault] = []
    signatures: list[TypeSignature | None] = []
    stack: list[tuple[Formula, str, bool]] = [(formula, path, False)]

    while stack:
        node, node_path, children_done = stack.pop()
        match node:
            case SymbolTerm(symbol_ref):
                symbol = directory.get_symbol(symbol_ref)
                if symbol is None:
                    faults.append(Fault(ErrorKind.INVALID_SYMBOL_REF, node_path or None))
                    signatures.append(None)
                else:
                    signatures.append(symbol.type_signature)

            case VariableTerm(variable_ref):
                variable = local_variable(scope, variable_ref)
                if variable is None:
                    faults.append(
                        Fault(ErrorKind.INVALID_VARIABLE_REF, node_path or None)
                    )
                    signatures.append(None)
                else:
                    signatures.append(variable.type_signature)

            case Application(function, argument):
                if not children_done:
                    stack.append((node, node_path, True))
                    stack.append((argument, _join(node_path, "argument"), False))
                    stack.append((function, _join(node_path, "function"), False))
                    continue
                argument_signature = signatures.pop()
                function_signature = signatures.pop()
                if function_signature is None or argument_signature is None:
                    signatures.append(None)
                    continue
                match function_signature:
                    case Ground():
                        faults.append(
                            Fault(ErrorKind.APPLICATION_NOT_FUNCTION, node_path or None)
                        )
                        signatures.append(None)
                    case Compound(expected, output):
                        if expected != argument_signature:
                            faults.append(
                                Fault(
                                    ErrorKind.APPLICATION_TYPE_MISMATCH,
                                    _join(node_path, "argument"),
                                )
                            )
                            signatures.append(None)
                        else:
                            signatures.append(output)

            case DefinitionTerm(definition_ref, inputs):
                if not children_done:
                    header = _definition_header(
                        definition_ref, len(inputs), directory, definition_limit
                    )
                    if header is not None:
                        faults.append(Fault(header, node_path or None))
                    stack.append((node, node_path, True))
                    for i in range(len(inputs) - 1, -1, -1):
                        stack.append(
                            (inputs[i], _join(node_path, f"inputs[{i}]"), False)
                        )
                    continue
                input_signatures = signatures[len(signatures) - len(inputs) :]
                del signatures[len(signatures) - len(inputs) :]
                definition = directory.get_definition(definition_ref)
                if (
                    _definition_header(
                        definition_ref, len(inputs), directory, definition_limit
                    )
                    is not None
                    or definition is None
                ):
                    signatures.append(None)
                    continue
                sound = _check_inputs(
                    definition, input_signatures, node_path, faults
                )
                if sound:
                    signatures.append(cache.expansion_signature(definition_ref))
                else:
                    signatures.append(None)

            case _:
                raise TypeError(f"Unknown formula node: {type(node)}")

    assert len(signatures) == 1
    return signatures[0], faults


def _definition_header(
    ref: DefinitionRef,
    count: int,
    directory: Directory,
    limit: DefinitionRef | None,
) -> ErrorKind | None:
    definition = directory.get_definition(ref)
    if definition is None:
        return ErrorKind.INVALID_DEFINITION_REF
    if limit is not None and ref >= limit:
        return ErrorKind.DEFINITION_FORWARD_REFERENCE
    if count != definition.arity:
        return ErrorKind.DEFINITION_WRONG_ARITY
    return None


def _check_inputs(
    definition: Definition,
    input_signatures: list[TypeSignature | None],
    path: str,
    faults: list[Fault],
) -> bool:
    sound = True
    for i, (formal, actual) in enumerate(zip(definition.inputs, input_signatures)):
        if actual is None:
            sound = False
        elif actual != formal.type_signature:
            faults.append(
                Fault(ErrorKind.DEFINITION_INPUT_TYPE_MISMATCH, _join(path, f"inputs[{i}]"))
            )
            sound = False
    return sound
