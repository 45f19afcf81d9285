import pytest

from proofcore.builder import BuilderError, DirectoryBuilder
from proofcore.directory import ByHypothesis, DeductableRef, Flag
from proofcore.helpers import app, arrow, ground, var, variable
from proofcore.refs import AxiomRef, ProofRef, TheoremRef


def declarations():
    b = DirectoryBuilder()
    s = b.add_system("s")
    nat = ground(b.add_type("Nat", s))
    prop = ground(b.add_type("Prop", s))
    p = b.add_symbol("P", s, arrow(nat, prop))
    return b, s, nat, p


def test_refs_are_arena_positions() -> None:
    b, s, nat, p = declarations()
    first = b.add_axiom("a", s, [variable("x", nat)], [], app(p, var(0)))
    second = b.add_axiom("b", s, [variable("x", nat)], [], app(p, var(0)))
    assert (first, second) == (AxiomRef(0), AxiomRef(1))
    directory = b.build()
    assert directory.get_axiom(second).id == "b"
    assert directory.get_axiom(AxiomRef(2)) is None


def test_parts_added_after_declaration() -> None:
    b, s, nat, p = declarations()
    x = variable("x", nat)
    definition = b.add_definition("d", s, [x])
    b.set_expansion(definition, app(p, var(0)))
    t = b.add_theorem("t", s, [x], flags=[Flag.REFLEXIVE])
    b.add_theorem_premise(t, app(p, var(0)))
    b.set_theorem_assertion(t, app(p, var(0)))
    proof = b.add_proof(t)
    b.add_step(proof, ByHypothesis(1), app(p, var(0)))

    directory = b.build()
    assert directory.get_definition(definition).expansion == app(p, var(0))
    theorem = directory.get_theorem(t)
    assert theorem.premises == (app(p, var(0)),)
    assert theorem.flags == (Flag.REFLEXIVE,)
    assert directory.get_proof(proof).steps[0].justification == ByHypothesis(1)
    assert directory.first_proof(t) == ProofRef(0)
    assert directory.get_deductable(DeductableRef.theorem(t)) == theorem


def test_first_proof_of_unproven_theorem() -> None:
    b, s, nat, p = declarations()
    t = b.add_theorem("t", s, [], [], app(p, var(0)))
    assert b.build().first_proof(t) is None
    assert b.build().first_proof(TheoremRef(5)) is None


def test_missing_expansion() -> None:
    b, s, nat, p = declarations()
    b.add_definition("d", s, [variable("x", nat)])
    with pytest.raises(BuilderError, match="'d'"):
        b.build()


def test_missing_assertion() -> None:
    b, s, nat, p = declarations()
    a = b.add_axiom("a", s)
    b.add_axiom_premise(a, app(p, var(0)))
    with pytest.raises(BuilderError, match="assertion"):
        b.build()
    b.set_axiom_assertion(a, app(p, var(0)))
    assert b.build().get_axiom(a).premises == (app(p, var(0)),)
