import pytest


def test_error_bag():
    from ..errors import BadRequest, ErrorBag, MissingAttribute, MissingType

    bag = ErrorBag()
    assert not bag
    bag.append(MissingAttribute("name"))
    bag.extend([MissingType(), MissingAttribute("name")])
    assert bag
    assert len(bag) == 3
    assert bag[0] == bag[2]
    assert [e.code for e in bag] == ["missing_attribute", "missing_type", "missing_attribute"]
    assert "MissingType" in repr(bag)
    assert len(ErrorBag([BadRequest()])) == 1


def test_to_reprs():
    from ..errors import ErrorBag, InvalidParameter, InvalidType
    from ..serde.models import ErrorRepr, SourceRepr

    reprs = ErrorBag(
        [InvalidType("gizmos"), InvalidParameter("gizmos", "include")]
    ).to_reprs(status="422")
    assert reprs == [
        ErrorRepr(
            status="422",
            code="invalid_type",
            title="Invalid Type",
            detail="Resource type `gizmos` is not supported.",
            source=SourceRepr(pointer="/data/type"),
        ),
        ErrorRepr(
            status="422",
            code="invalid_parameter",
            title="Invalid Parameter",
            detail="Resource type `gizmos` given in parameter `include` is not known.",
            source=SourceRepr(parameter="include"),
        ),
    ]


def test_bad_request_has_no_source():
    from ..errors import BadRequest

    error = BadRequest()
    assert error.code == "bad_request"
    assert error.detail == "Request could not be served."
    assert error.to_repr().source is None


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (
            "DataError",
            "an error with the provided data occurred: Attribute `name` is missing.",
        ),
        (
            "QueryError",
            "an error with the provided query parameters occurred: Attribute `name` is missing.",
        ),
    ],
)
def test_request_error_str(exc, expected):
    from .. import exceptions
    from ..errors import ErrorBag, MissingAttribute

    assert str(getattr(exceptions, exc)(ErrorBag([MissingAttribute("name")]))) == expected


def test_other_exceptions_str():
    from ..exceptions import InvalidDeclarationError, NoMappingConfiguredError

    assert str(InvalidDeclarationError("oops")) == "oops"
    assert "no mapping configured" in str(NoMappingConfiguredError())
