"""Curried type signatures.

A signature is either a ground sort or an arrow from one input signature to
an output signature:

    Nat                      Ground(Nat)
    Nat -> Nat               Compound(Ground(Nat), Ground(Nat))
    Nat -> Nat -> Prop       Compound(Ground(Nat), Compound(Ground(Nat), Ground(Prop)))

Multi-argument functions are curried, so ``arity`` counts the arrows before
the first ground signature.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from .errors import ContractViolation
from .refs import TypeRef


@dataclass(frozen=True)
class Ground:
    """A ground sort, e.g. ``Nat``."""

    type: TypeRef

    def arity(self) -> int:
        return 0

    def inputs(self) -> Iterator[TypeSignature]:
        return iter(())

    def applied(self) -> TypeSignature:
        raise ContractViolation(
            f"cannot apply ground signature of type #{self.type}"
        )

    def ground(self) -> Ground:
        return self

    def extend(self, inputs: Sequence[TypeSignature]) -> TypeSignature:
        return _extend(self, inputs)


@dataclass(frozen=True)
class Compound:
    """An arrow ``input -> output``."""

    input: TypeSignature
    output: TypeSignature

    def arity(self) -> int:
        count = 0
        current: TypeSignature = self
        while isinstance(current, Compound):
            count += 1
            current = current.output
        return count

    def inputs(self) -> Iterator[TypeSignature]:
        """Yield the input signatures, outermost first."""
        current: TypeSignature = self
        while isinstance(current, Compound):
            yield current.input
            current = current.output

    def applied(self) -> TypeSignature:
        return self.output

    def ground(self) -> Ground:
        current: TypeSignature = self
        while isinstance(current, Compound):
            current = current.output
        return current

    def extend(self, inputs: Sequence[TypeSignature]) -> TypeSignature:
        return _extend(self, inputs)


TypeSignature = Ground | Compound


def _extend(signature: TypeSignature, inputs: Sequence[TypeSignature]) -> TypeSignature:
    # The first input ends up outermost.
    result = signature
    for input_signature in reversed(inputs):
        result = Compound(input_signature, result)
    return result


def type_refs(signature: TypeSignature) -> Iterator[TypeRef]:
    """Every ground type referenced by a signature."""
    stack: list[TypeSignature] = [signature]
    while stack:
        match stack.pop():
            case Ground(type_ref):
                yield type_ref
            case Compound(input_signature, output):
                stack.append(output)
                stack.append(input_signature)
