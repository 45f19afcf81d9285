"""Round-trip and malformed-input tests for the JSON document format."""

import json

import pytest

from proofcore import dumps, loads
from proofcore.basis import arithmetic
from proofcore.helpers import (
    BY_DEFINITION,
    BY_FUNCTION_APPLICATION,
    BY_SUBSTITUTION,
    app,
    by_axiom,
    by_hypothesis,
    by_theorem,
    step,
    sym,
    var,
)
from proofcore.serialization import DocumentError, formula_from_json, formula_to_json


def full_document():
    arith = arithmetic()
    x, y = var(0), var(1)
    five = sym(arith.five)
    lemma = arith.builder.add_theorem(
        "lemma", arith.system, arith.variables("x", "y"), [arith.equals(x, y)],
        arith.equals(app(arith.succ, x), app(arith.succ, y)),
    )
    arith.builder.add_proof(
        lemma,
        [
            step(by_hypothesis(1), arith.equals(x, y)),
            step(BY_FUNCTION_APPLICATION, arith.equals(app(arith.succ, x), app(arith.succ, y))),
            step(BY_SUBSTITUTION, arith.equals(app(arith.succ, x), app(arith.succ, y))),
        ],
    )
    user = arith.builder.add_theorem(
        "user", arith.system, (), [app(arith.p, arith.doubled(five))],
        app(arith.p, app(arith.add, five, five)),
    )
    arith.builder.add_proof(
        user,
        [
            step(by_hypothesis(1), app(arith.p, arith.doubled(five))),
            step(BY_DEFINITION, app(arith.p, app(arith.add, five, five))),
            step(by_theorem(lemma), arith.equals(app(arith.succ, five), app(arith.succ, five))),
            step(by_axiom(arith.refl), arith.equals(five, five)),
        ],
    )
    return arith.build()


def test_document_round_trip() -> None:
    directory = full_document()
    restored = loads(dumps(directory))
    assert restored == directory


def test_formula_round_trip_keeps_structure() -> None:
    arith = arithmetic()
    f = arith.equals(arith.doubled(var(0)), app(arith.succ, sym(arith.zero)))
    assert formula_from_json(formula_to_json(f)) == f


def test_every_node_has_a_type_field() -> None:
    data = json.loads(dumps(full_document()))
    assert data["type"] == "document"
    assert {s["type"] for s in data["proofs"][0]["steps"]} == {"step"}
    assert data["axioms"][0]["flags"] == ["reflexive"]


class TestMalformed:
    def valid(self) -> dict:
        return json.loads(dumps(arithmetic().build()))

    def test_not_json(self) -> None:
        with pytest.raises(DocumentError):
            loads("{not json")

    def test_not_an_object(self) -> None:
        with pytest.raises(DocumentError):
            loads("[1, 2, 3]")

    def test_unknown_formula_type(self) -> None:
        data = self.valid()
        data["axioms"][0]["assertion"] = {"type": "lambda"}
        with pytest.raises(DocumentError, match="lambda"):
            loads(json.dumps(data))

    def test_unknown_flag(self) -> None:
        data = self.valid()
        data["axioms"][0]["flags"] = ["associative"]
        with pytest.raises(DocumentError):
            loads(json.dumps(data))

    def test_missing_field(self) -> None:
        data = self.valid()
        del data["axioms"][0]["assertion"]
        with pytest.raises(DocumentError):
            loads(json.dumps(data))

    def test_non_integer_reference(self) -> None:
        data = self.valid()
        data["symbols"][0]["system"] = "arithmetic"
        with pytest.raises(DocumentError, match="integer"):
            loads(json.dumps(data))

    def test_bool_is_not_an_index(self) -> None:
        data = self.valid()
        data["axioms"][0]["assertion"] = {"type": "var", "ref": True}
        with pytest.raises(DocumentError):
            loads(json.dumps(data))

    def test_dangling_references_load_fine(self) -> None:
        # out-of-range refs are a verification problem, not a format one
        data = self.valid()
        data["axioms"][0]["assertion"] = {"type": "symbol", "ref": 999}
        directory = loads(json.dumps(data))
        assert directory.axioms[0].assertion == sym(999)
