import pytest

from proofcore.basis import arithmetic
from proofcore.checker import verify_directory
from proofcore.directory import Axiom, DeductableRef, Flag
from proofcore.errors import ErrorKind, SubjectKind
from proofcore.helpers import app, sym, var
from proofcore.language import Head
from proofcore.properties import (
    PropertyRegistry,
    verify_flag_list,
    verify_function,
    verify_reflexivity,
    verify_symmetry,
    verify_transitivity,
)
from proofcore.refs import AxiomRef, SystemRef

ARITH = arithmetic()
EQ = Head.symbol(ARITH.eq)
ADD = Head.symbol(ARITH.add)
SUCC = Head.symbol(ARITH.succ)
PROOF = DeductableRef.axiom(AxiomRef(0))
OTHER = DeductableRef.axiom(AxiomRef(1))


def eq(a, b):
    return ARITH.equals(a, b)


def axiom(premises, assertion, *flags: Flag) -> Axiom:
    return Axiom(
        "ax", SystemRef(0), ARITH.variables("a", "b", "c", "d"), tuple(premises),
        assertion, flags,
    )


def kinds(faults) -> list[ErrorKind]:
    return [f.kind for f in faults]


def preorder_registry() -> PropertyRegistry:
    registry = PropertyRegistry()
    registry.register(Flag.REFLEXIVE, EQ, PROOF)
    registry.register(Flag.TRANSITIVE, EQ, OTHER)
    return registry


class TestBasisRegistration:
    @pytest.fixture(autouse=True)
    def _verify(self) -> None:
        self.verified = verify_directory(ARITH.build())
        self.registry = self.verified.registry

    def test_no_structural_errors(self) -> None:
        assert self.verified.diagnostics.errors == []

    def test_equality_laws(self) -> None:
        assert self.registry.reflexivity(EQ) == DeductableRef.axiom(ARITH.refl)
        assert self.registry.symmetry(EQ) == DeductableRef.axiom(ARITH.sym)
        assert self.registry.transitivity(EQ) == DeductableRef.axiom(ARITH.trans)
        assert self.registry.is_preorder(EQ)

    def test_congruences(self) -> None:
        assert self.registry.congruence(SUCC, EQ) == DeductableRef.axiom(ARITH.succ_cong)
        assert self.registry.congruence(ADD, EQ) == DeductableRef.axiom(ARITH.add_cong)
        assert self.registry.congruence(Head.symbol(ARITH.p), EQ) is None

    def test_unflagged_relation_has_nothing(self) -> None:
        assert not self.registry.is_preorder(Head.symbol(ARITH.p))


class TestDuplicates:
    def test_second_reflexivity_proof_is_rejected(self) -> None:
        registry = PropertyRegistry()
        refl = axiom([], eq(var(0), var(0)), Flag.REFLEXIVE)
        assert verify_reflexivity(refl, PROOF, registry) == []
        assert kinds(verify_reflexivity(refl, OTHER, registry)) == [
            ErrorKind.DUPLICATE_PROPERTY
        ]
        assert registry.reflexivity(EQ) == PROOF

    def test_second_congruence_for_same_relation_is_rejected(self) -> None:
        registry = preorder_registry()
        cong = axiom([eq(var(0), var(1))], eq(app(ARITH.succ, var(0)), app(ARITH.succ, var(1))))
        assert verify_function(cong, PROOF, registry) == []
        assert kinds(verify_function(cong, OTHER, registry)) == [
            ErrorKind.DUPLICATE_PROPERTY
        ]

    def test_duplicate_flag_in_list(self) -> None:
        faults = verify_flag_list((Flag.REFLEXIVE, Flag.FUNCTION, Flag.REFLEXIVE))
        assert kinds(faults) == [ErrorKind.DUPLICATE_FLAG]
        assert faults[0].path == "flags[2]"

    def test_duplicate_registration_through_directory(self) -> None:
        arith = arithmetic()
        arith.builder.add_axiom(
            "refl_again", arith.system, arith.variables("x"), (),
            eq(var(0), var(0)), (Flag.REFLEXIVE,),
        )
        errors = verify_directory(arith.build()).diagnostics.errors
        assert [(e.subject.kind, e.kind) for e in errors] == [
            (SubjectKind.AXIOM, ErrorKind.DUPLICATE_PROPERTY)
        ]


class TestReflexivityShape:
    def test_premises_must_be_empty(self) -> None:
        faults = verify_reflexivity(
            axiom([eq(var(0), var(0))], eq(var(0), var(0))), PROOF, PropertyRegistry()
        )
        assert kinds(faults) == [ErrorKind.REFLEXIVITY_PREMISE_NOT_EMPTY]

    def test_assertion_must_be_simple_binary(self) -> None:
        faults = verify_reflexivity(
            axiom([], eq(sym(ARITH.zero), sym(ARITH.zero))), PROOF, PropertyRegistry()
        )
        assert kinds(faults) == [ErrorKind.REFLEXIVITY_ASSERTION_NOT_BINARY]

    def test_same_variable_on_both_sides(self) -> None:
        faults = verify_reflexivity(
            axiom([], eq(var(0), var(1))), PROOF, PropertyRegistry()
        )
        assert kinds(faults) == [ErrorKind.REFLEXIVITY_ARGUMENT_MISMATCH]


class TestSymmetryShape:
    def test_registers(self) -> None:
        registry = PropertyRegistry()
        assert verify_symmetry(
            axiom([eq(var(0), var(1))], eq(var(1), var(0))), PROOF, registry
        ) == []
        assert registry.symmetry(EQ) == PROOF

    def test_exactly_one_premise(self) -> None:
        faults = verify_symmetry(axiom([], eq(var(1), var(0))), PROOF, PropertyRegistry())
        assert kinds(faults) == [ErrorKind.SYMMETRY_PREMISE_WRONG_LENGTH]

    def test_relation_must_match(self) -> None:
        premise = app(ARITH.add, var(0), var(1))
        faults = verify_symmetry(
            axiom([premise], eq(var(1), var(0))), PROOF, PropertyRegistry()
        )
        assert kinds(faults) == [ErrorKind.SYMMETRY_RELATION_MISMATCH]

    def test_arguments_must_swap(self) -> None:
        registry = PropertyRegistry()
        faults = verify_symmetry(
            axiom([eq(var(0), var(1))], eq(var(0), var(1))), PROOF, registry
        )
        assert kinds(faults) == [ErrorKind.SYMMETRY_ARGUMENT_MISMATCH]
        assert registry.symmetry(EQ) is None


class TestTransitivityShape:
    def check(self, premises, assertion) -> list[ErrorKind]:
        return kinds(verify_transitivity(axiom(premises, assertion), PROOF, PropertyRegistry()))

    def test_valid(self) -> None:
        assert self.check([eq(var(0), var(1)), eq(var(1), var(2))], eq(var(0), var(2))) == []

    def test_premise_count(self) -> None:
        assert self.check([eq(var(0), var(1))], eq(var(0), var(1))) == [
            ErrorKind.TRANSITIVITY_PREMISE_WRONG_LENGTH
        ]

    def test_middle_term_must_be_shared(self) -> None:
        assert self.check(
            [eq(var(0), var(1)), eq(var(2), var(3))], eq(var(0), var(3))
        ) == [ErrorKind.TRANSITIVITY_PREMISE_ARGUMENT_MISMATCH]

    def test_assertion_ends(self) -> None:
        premises = [eq(var(0), var(1)), eq(var(1), var(2))]
        assert self.check(premises, eq(var(1), var(2))) == [
            ErrorKind.TRANSITIVITY_ASSERTION_LEFT_MISMATCH
        ]
        assert self.check(premises, eq(var(0), var(1))) == [
            ErrorKind.TRANSITIVITY_ASSERTION_RIGHT_MISMATCH
        ]

    def test_second_premise_not_binary(self) -> None:
        assert self.check(
            [eq(var(0), var(1)), app(ARITH.p, var(1))], eq(var(0), var(1))
        ) == [ErrorKind.TRANSITIVITY_SECOND_PREMISE_NOT_BINARY]


class TestFunctionShape:
    def check(self, premises, assertion, registry=None) -> list[ErrorKind]:
        registry = registry or preorder_registry()
        return kinds(verify_function(axiom(premises, assertion), PROOF, registry))

    def test_relation_must_be_preorder(self) -> None:
        assert self.check(
            [eq(var(0), var(1))],
            eq(app(ARITH.succ, var(0)), app(ARITH.succ, var(1))),
            PropertyRegistry(),
        ) == [ErrorKind.FUNCTION_RELATION_NOT_PREORDER]

    def test_premises_required(self) -> None:
        assert self.check([], eq(sym(ARITH.zero), sym(ARITH.zero))) == [
            ErrorKind.FUNCTION_PREMISE_EMPTY
        ]

    def test_same_function_both_sides(self) -> None:
        assert self.check(
            [eq(var(0), var(1))],
            eq(app(ARITH.succ, var(0)), app(ARITH.p, var(1))),
        ) == [ErrorKind.FUNCTION_ASSERTION_FUNCTION_MISMATCH]

    def test_one_premise_per_input(self) -> None:
        assert self.check(
            [eq(var(0), var(2))],
            eq(app(ARITH.add, var(0), var(1)), app(ARITH.add, var(2), var(3))),
        ) == [ErrorKind.FUNCTION_PREMISE_ARITY_MISMATCH]

    def test_inputs_must_be_variables(self) -> None:
        assert self.check(
            [eq(var(0), var(1))],
            eq(app(ARITH.succ, sym(ARITH.zero)), app(ARITH.succ, var(1))),
        ) == [ErrorKind.FUNCTION_ASSERTION_INPUT_NOT_VARIABLE]

    def test_premise_variables_match_positions(self) -> None:
        assert self.check(
            [eq(var(0), var(2)), eq(var(3), var(1))],
            eq(app(ARITH.add, var(0), var(1)), app(ARITH.add, var(2), var(3))),
        ) == [ErrorKind.FUNCTION_PREMISE_LEFT_MISMATCH]

    def test_assertion_sides_must_be_applications(self) -> None:
        assert self.check([eq(var(0), var(1))], eq(var(0), var(1))) == [
            ErrorKind.FUNCTION_ASSERTION_LEFT_NOT_APPLICATION
        ]

    def test_congruence_over_definition(self) -> None:
        registry = preorder_registry()
        assert self.check(
            [eq(var(0), var(1))],
            eq(ARITH.doubled(var(0)), ARITH.doubled(var(1))),
            registry,
        ) == []
        assert registry.congruence(Head.definition(ARITH.double), EQ) == PROOF
