import pytest

from .testing import build_registry


@pytest.fixture
def registry():
    return build_registry()


def errors_of(excinfo):
    return [(e.code, e.source_member) for e in excinfo.value.errors]


def test_valid(registry):
    from ..validation import Fields, Included, Sorting, assert_query

    assert_query(
        registry,
        fields=Fields.from_query({"widgets": "name,serial,serial_number", "users": "name"}),
        included=Included.from_query("users,users.companies"),
        sorting=Sorting.from_query("-serial,name"),
        resource_class_name="Widget",
    )


def test_nothing_to_check(registry):
    from ..validation import assert_query

    assert_query(registry)


def test_unknown_field_member(registry):
    from ..exceptions import QueryError
    from ..validation import Fields, assert_query

    with pytest.raises(QueryError) as excinfo:
        assert_query(registry, fields=Fields.from_query({"widgets": "name,color"}))
    (error,) = excinfo.value.errors
    assert error.code == "invalid_parameter_member"
    assert error.member == "color"
    assert error.type == "widgets"
    assert error.source_member == "fields"
    assert error.source_is_parameter


def test_unknown_field_type(registry):
    from ..exceptions import QueryError
    from ..validation import Fields, assert_query

    with pytest.raises(QueryError) as excinfo:
        assert_query(
            registry, fields=Fields.from_query({"gizmos": "name", "widgets": "color"})
        )
    assert errors_of(excinfo) == [
        ("invalid_parameter_member", "fields"),
        ("invalid_parameter", "fields"),
    ]
    assert excinfo.value.errors[1].value == "gizmos"


def test_unknown_include(registry):
    from ..exceptions import QueryError
    from ..validation import Included, assert_query

    with pytest.raises(QueryError) as excinfo:
        assert_query(registry, included=Included.from_query("gizmos,users.gadgets,users.companies"))
    assert [(e.code, e.value) for e in excinfo.value.errors] == [
        ("invalid_parameter", "gizmos"),
        ("invalid_parameter", "gadgets"),
    ]


def test_unknown_sort_field(registry):
    from ..exceptions import QueryError
    from ..validation import Sorting, assert_query

    with pytest.raises(QueryError) as excinfo:
        assert_query(
            registry, sorting=Sorting.from_query("name,-color"), resource_class_name="Widget"
        )
    assert errors_of(excinfo) == [("invalid_sort", "sort")]
    assert excinfo.value.errors[0].field == "color"


def test_sort_needs_class_name(registry):
    from ..validation import Sorting, assert_query

    assert_query(registry, sorting=Sorting.from_query("color"))
    assert_query(registry, sorting=Sorting.from_query("color"), resource_class_name="Gizmo")


def test_errors_accumulate(registry):
    from ..exceptions import QueryError
    from ..validation import Fields, Included, Sorting, assert_query

    with pytest.raises(QueryError) as excinfo:
        assert_query(
            registry,
            fields=Fields({"widgets": ["color"]}),
            included=Included({"gizmos": ()}),
            sorting=Sorting.from_query("color"),
            resource_class_name="Widget",
        )
    assert [e.code for e in excinfo.value.errors] == [
        "invalid_parameter_member",
        "invalid_parameter",
        "invalid_sort",
    ]
