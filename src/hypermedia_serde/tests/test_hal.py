import decimal
import json

import pytest

from .testing import array, build_registry, obj


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def target(registry):
    from ..transformer import HalJsonTransformer

    return HalJsonTransformer(registry)


def test_end_to_end(target):
    result = target.transform(
        obj("Widget", id="7", name="Bolt", owner=obj("User", id="3", name="Ann"))
    )
    assert result == {
        "id": "7",
        "name": "Bolt",
        "_embedded": {
            "owner": {
                "id": "3",
                "name": "Ann",
                "_links": {"self": {"href": "/users/3"}},
            },
        },
        "_links": {
            "self": {"href": "/widgets/7"},
            "owner": {"href": "/users/3"},
            "parts": {"href": "/widgets/7/parts"},
        },
    }
    assert list(result["_links"]) == ["self", "owner", "parts"]


def test_serialize(target):
    result = target.serialize(obj("Widget", id="7", name="Bolté"))
    assert "Bolté" in result
    assert '"/widgets/7"' in result
    assert json.loads(result) == {
        "id": "7",
        "name": "Bolté",
        "_links": {
            "self": {"href": "/widgets/7"},
            "parts": {"href": "/widgets/7/parts"},
        },
    }


def test_hidden_and_aliased_properties(target):
    result = target.transform(
        obj(
            "Widget",
            id="7",
            name="Bolt",
            serial_number="S-1",
            secret="hush",
            price=decimal.Decimal("9.90"),
        )
    )
    assert result["serial"] == "S-1"
    assert result["price"] == "9.90"
    assert "serial_number" not in result
    assert "secret" not in result


def test_nested_embedding(target):
    result = target.transform(
        obj(
            "Widget",
            id="7",
            owner=obj("User", id="3", name="Ann", company=obj("Company", id="c1", name="Acme")),
        )
    )
    owner = result["_embedded"]["owner"]
    assert owner["_embedded"] == {
        "company": {
            "id": "c1",
            "name": "Acme",
            "_links": {"self": {"href": "/companies/c1"}},
        },
    }
    assert owner["_links"] == {
        "self": {"href": "/users/3"},
        "company": {"href": "/companies/c1"},
    }
    assert "company" not in owner


def test_embedded_collection(target):
    result = target.transform(
        obj(
            "Widget",
            id="7",
            parts=array(obj("Part", id="1", label="Nut"), obj("Part", id="2", label="Washer")),
        )
    )
    assert "parts" not in result
    assert result["_embedded"] == {
        "parts": [
            {"id": "1", "label": "Nut", "_links": {"self": {"href": "/parts/1"}}},
            {"id": "2", "label": "Washer", "_links": {"self": {"href": "/parts/2"}}},
        ],
    }


def test_partially_embedded_collection(target):
    result = target.transform(
        obj("Widget", id="7", parts=array("loose", obj("Part", id="2", label="Washer")))
    )
    assert result["parts"] == ["loose"]
    assert result["_embedded"] == {
        "parts": {
            "1": {"id": "2", "label": "Washer", "_links": {"self": {"href": "/parts/2"}}},
        },
    }


def test_empty_collection_stays_inline(target):
    result = target.transform(obj("Widget", id="7", parts=array()))
    assert result["parts"] == []
    assert "_embedded" not in result


def test_unregistered_objects_stay_inline(target):
    result = target.transform(
        obj(
            "Widget",
            id="7",
            price=obj("Money", amount="9.90"),
            size=obj("Size", width=1, height=2),
        )
    )
    assert result["price"] == "9.90"
    assert result["size"] == {"width": 1, "height": 2}
    assert "_embedded" not in result


def test_id_property_value_object_is_not_embedded(registry):
    from ..mapping import Mapping, MappingRegistry
    from ..transformer import HalJsonTransformer

    target = HalJsonTransformer(
        MappingRegistry(
            list(registry)
            + [
                Mapping(
                    alias="widget_ids",
                    class_name="WidgetId",
                    properties=["id"],
                    id_properties=["id"],
                )
            ]
        )
    )
    result = target.transform(obj("Widget", id=obj("WidgetId", id="7"), name="Bolt"))
    assert result["id"] == "7"
    assert result["_links"]["self"] == {"href": "/widgets/7"}
    assert "_embedded" not in result


def test_embedded_section_is_never_flattened(registry):
    from ..mapping import Mapping, MappingRegistry
    from ..transformer import HalJsonTransformer

    target = HalJsonTransformer(
        MappingRegistry(
            list(registry)
            + [Mapping(alias="tags", class_name="Tag", properties=["id"], id_properties=["id"])]
        )
    )
    result = target.transform(obj("Widget", id="7", owner=obj("Tag", id="x")))
    assert result["_embedded"] == {"owner": "x"}
    assert "owner" not in result["_links"]
    assert "owner" not in result


def test_missing_id_omits_links(target):
    result = target.transform(obj("Widget", name="Bolt", serial_number="S-1"))
    assert result == {"name": "Bolt", "serial": "S-1"}


def test_document_links_and_meta(target):
    from ..links import DocumentLinks

    result = target.transform(
        obj("Widget", id="7", name="Bolt"),
        links=DocumentLinks(self_="/widgets/7?fields=name", next="/widgets/8"),
        meta={"author": "Ann"},
    )
    assert list(result["_links"].items()) == [
        ("self", {"href": "/widgets/7?fields=name"}),
        ("next", {"href": "/widgets/8"}),
        ("parts", {"href": "/widgets/7/parts"}),
    ]
    assert result["_meta"] == {"author": "Ann"}


def test_root_collection(target):
    from ..links import DocumentLinks

    result = target.transform(
        array(obj("Widget", id="1", name="Bolt"), obj("Widget", id="2", name="Nut")),
        links=DocumentLinks(self_="/widgets", next="/widgets?page=2"),
        meta={"total": 2},
    )
    assert result == [
        {
            "id": "1",
            "name": "Bolt",
            "_links": {
                "next": {"href": "/widgets?page=2"},
                "self": {"href": "/widgets/1"},
                "parts": {"href": "/widgets/1/parts"},
            },
            "_meta": {"total": 2},
        },
        {
            "id": "2",
            "name": "Nut",
            "_links": {
                "next": {"href": "/widgets?page=2"},
                "self": {"href": "/widgets/2"},
                "parts": {"href": "/widgets/2/parts"},
            },
            "_meta": {"total": 2},
        },
    ]


def test_sparse_fields(target):
    from ..validation.params import Fields

    result = target.transform(
        obj(
            "Widget",
            id="7",
            name="Bolt",
            serial_number="S-1",
            owner=obj("User", id="3", name="Ann"),
        ),
        fields=Fields({"widgets": ["name"]}),
    )
    assert result == {
        "id": "7",
        "name": "Bolt",
        "_links": {
            "self": {"href": "/widgets/7"},
            "parts": {"href": "/widgets/7/parts"},
        },
    }


def test_single_attribute_root_keeps_meta(target):
    assert target.transform(obj("Gadget", value=1)) == {"value": 1}
    assert target.transform(obj("Gadget", value=1), meta={"total": 1}) == {
        "value": 1,
        "_meta": {"total": 1},
    }


def test_sparse_fields_accept_internal_names(target):
    from ..validation.params import Fields

    result = target.transform(
        obj("Widget", id="7", name="Bolt", serial_number="S-1"),
        fields=Fields({"widgets": ["serial_number"]}),
    )
    assert result == {
        "id": "7",
        "serial": "S-1",
        "_links": {
            "self": {"href": "/widgets/7"},
            "parts": {"href": "/widgets/7/parts"},
        },
    }


def test_key_formatting(registry):
    from ..transformer import HalJsonTransformer

    raw = obj("Gadget", someValue=1, otherValue=obj("Size", widthInMm=2, heightInMm=3))
    assert HalJsonTransformer(registry).transform(raw) == {
        "some_value": 1,
        "other_value": {"width_in_mm": 2, "height_in_mm": 3},
    }
    assert HalJsonTransformer(registry, key_formatter=None).transform(raw) == {
        "someValue": 1,
        "otherValue": {"widthInMm": 2, "heightInMm": 3},
    }


def test_no_mapping_configured():
    from ..exceptions import NoMappingConfiguredError
    from ..mapping import MappingRegistry
    from ..transformer import HalJsonTransformer

    with pytest.raises(NoMappingConfiguredError):
        HalJsonTransformer(MappingRegistry()).serialize(obj("Widget", id="7"))
    with pytest.raises(NoMappingConfiguredError):
        HalJsonTransformer(None).serialize(obj("Widget", id="7"))


@pytest.mark.parametrize(
    "value",
    [
        {"a": {"b": 1}},
        {"a": {"b": {"c": "x"}}, "d": [{"e": True}, {"f": 1, "g": 2}]},
        {"_links": {"self": {"href": "/a"}}, "a": {"b": None}},
        [{"a": 1}, {"b": {"c": {"d": 2.5}}}],
        {"a": {"b": {"c": "x"}}},
        "x",
    ],
)
def test_flatten_is_idempotent(value):
    from ..transformer import flatten_single_key_scalars

    once = flatten_single_key_scalars(value, skip=frozenset(("_links",)))
    assert flatten_single_key_scalars(once, skip=frozenset(("_links",))) == once


def test_flatten():
    from ..transformer import flatten_single_key_scalars

    assert flatten_single_key_scalars(
        {
            "a": {"b": {"c": "x"}},
            "d": {"e": None},
            "f": [{"g": 1}, {"h": 1, "i": 2}],
            "_links": {"self": {"href": "/a"}},
        },
        skip=frozenset(("_links",)),
    ) == {
        "a": "x",
        "d": {"e": None},
        "f": [1, {"h": 1, "i": 2}],
        "_links": {"self": {"href": "/a"}},
    }


def test_flatten_members_keeps_reserved_sections():
    from ..transformer import flatten_members

    skip = frozenset(("_links",))
    keep = frozenset(("_embedded",))
    once = flatten_members(
        {
            "a": {"b": 1},
            "_embedded": {"owner": {"id": "x"}},
            "_links": {"self": {"href": "/a"}},
        },
        skip=skip,
        keep=keep,
    )
    assert once == {
        "a": 1,
        "_embedded": {"owner": "x"},
        "_links": {"self": {"href": "/a"}},
    }
    assert flatten_members(once, skip=skip, keep=keep) == once
    assert flatten_members({"value": 1}) == {"value": 1}
