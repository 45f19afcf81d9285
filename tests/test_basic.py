from proofcore import Ground, TypeRef, check_directory
from proofcore.basis import arithmetic


def test_ground_signature() -> None:
    s = Ground(TypeRef(0))
    assert s.arity() == 0
    assert s.ground() == s


def test_reference_document_checks() -> None:
    assert check_directory(arithmetic().build()).is_valid


if __name__ == "__main__":
    test_ground_signature()
    test_reference_document_checks()
    print("Basic test passed!")
