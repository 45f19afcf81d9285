"""Reference document: equality over natural numbers.

The standard starting point for hand-written documents and tests.  It
declares one system with the usual equality laws already flagged, so the
property registry comes out with ``eq`` as a symmetric preorder and with
congruence laws for ``succ`` and ``add``:

    types:    Nat, Prop
    symbols:  eq : Nat -> Nat -> Prop
              zero, five : Nat
              succ : Nat -> Nat
              add : Nat -> Nat -> Nat
              P, Q : Nat -> Prop
    defs:     double(x) := add(x, x)
    axioms:   refl       [reflexive]    |- eq(x, x)
              sym        [symmetric]    eq(a, b) |- eq(b, a)
              trans      [transitive]   eq(a, b), eq(b, c) |- eq(a, c)
              succ_cong  [function]     eq(a, b) |- eq(succ(a), succ(b))
              add_cong   [function]     eq(a, c), eq(b, d) |- eq(add(a, b), add(c, d))
              add_zero                  |- eq(add(x, zero), x)
              p_to_q                    P(x) |- Q(x)

Theorems and proofs are added on top through ``Arithmetic.builder``.
"""

from dataclasses import dataclass

from proofcore.builder import DirectoryBuilder
from proofcore.directory import Directory, Flag, Variable
from proofcore.helpers import app, arrow, defn, var, variable
from proofcore.language import Formula
from proofcore.refs import AxiomRef, DefinitionRef, SymbolRef, SystemRef
from proofcore.types import Ground, TypeSignature


@dataclass
class Arithmetic:
    builder: DirectoryBuilder
    system: SystemRef
    nat: Ground
    prop: Ground

    eq: SymbolRef
    zero: SymbolRef
    five: SymbolRef
    succ: SymbolRef
    add: SymbolRef
    p: SymbolRef
    q: SymbolRef

    double: DefinitionRef

    refl: AxiomRef
    sym: AxiomRef | None
    trans: AxiomRef
    succ_cong: AxiomRef | None
    add_cong: AxiomRef | None
    add_zero: AxiomRef
    p_to_q: AxiomRef

    def variables(self, *names: str) -> tuple[Variable, ...]:
        """Nat-typed variables; the i-th name is ``var(i)``."""
        return tuple(variable(name, self.nat) for name in names)

    def equals(self, left: Formula, right: Formula) -> Formula:
        return app(self.eq, left, right)

    def doubled(self, formula: Formula) -> Formula:
        return defn(self.double, formula)

    def build(self) -> Directory:
        return self.builder.build()


def arithmetic(*, symmetric: bool = True, congruences: bool = True) -> Arithmetic:
    """Equality over Nat.

    ``symmetric`` and ``congruences`` leave out the symmetry law and the
    congruence laws, for documents that must not rely on them.
    """
    b = DirectoryBuilder()
    system = b.add_system("arithmetic")
    nat = Ground(b.add_type("Nat", system))
    prop = Ground(b.add_type("Prop", system))
    relation: TypeSignature = arrow(nat, nat, prop)

    eq = b.add_symbol("eq", system, relation)
    zero = b.add_symbol("zero", system, nat)
    five = b.add_symbol("five", system, nat)
    succ = b.add_symbol("succ", system, arrow(nat, nat))
    add = b.add_symbol("add", system, arrow(nat, nat, nat))
    p = b.add_symbol("P", system, arrow(nat, prop))
    q = b.add_symbol("Q", system, arrow(nat, prop))

    def nats(*names: str) -> tuple[Variable, ...]:
        return tuple(variable(name, nat) for name in names)

    x, y, z, w = var(0), var(1), var(2), var(3)

    double = b.add_definition("double", system, nats("x"), app(add, x, x))

    refl = b.add_axiom(
        "refl", system, nats("x"), (), app(eq, x, x), (Flag.REFLEXIVE,)
    )
    sym = None
    if symmetric:
        sym = b.add_axiom(
            "sym", system, nats("a", "b"), (app(eq, x, y),), app(eq, y, x),
            (Flag.SYMMETRIC,),
        )
    trans = b.add_axiom(
        "trans",
        system,
        nats("a", "b", "c"),
        (app(eq, x, y), app(eq, y, z)),
        app(eq, x, z),
        (Flag.TRANSITIVE,),
    )
    succ_cong = add_cong = None
    if congruences:
        succ_cong = b.add_axiom(
            "succ_cong",
            system,
            nats("a", "b"),
            (app(eq, x, y),),
            app(eq, app(succ, x), app(succ, y)),
            (Flag.FUNCTION,),
        )
        add_cong = b.add_axiom(
            "add_cong",
            system,
            nats("a", "b", "c", "d"),
            (app(eq, x, z), app(eq, y, w)),
            app(eq, app(add, x, y), app(add, z, w)),
            (Flag.FUNCTION,),
        )
    add_zero = b.add_axiom(
        "add_zero", system, nats("x"), (), app(eq, app(add, x, app(zero)), x)
    )
    p_to_q = b.add_axiom("p_to_q", system, nats("x"), (app(p, x),), app(q, x))

    return Arithmetic(
        builder=b,
        system=system,
        nat=nat,
        prop=prop,
        eq=eq,
        zero=zero,
        five=five,
        succ=succ,
        add=add,
        p=p,
        q=q,
        double=double,
        refl=refl,
        sym=sym,
        trans=trans,
        succ_cong=succ_cong,
        add_cong=add_cong,
        add_zero=add_zero,
        p_to_q=p_to_q,
    )
