import pytest

from .testing import array, build_registry, obj


@pytest.fixture
def target():
    from ..transformer import JsonApiTransformer

    return JsonApiTransformer(build_registry())


def widget(id, owner_id="3", **kwargs):
    return obj(
        "Widget",
        id=id,
        name="Bolt",
        owner=obj("User", id=owner_id, name="Ann", company=obj("Company", id="c1", name="Acme")),
        **kwargs,
    )


def test_singleton(target):
    result = target.transform(
        widget("7", parts=array(obj("Part", id="1", label="Nut"), obj("Part", id="2", label="Washer")))
    )
    assert result == {
        "jsonapi": {"version": "1.0"},
        "links": {"self": "/widgets/7"},
        "data": {
            "type": "widgets",
            "id": "7",
            "attributes": {"name": "Bolt"},
            "relationships": {
                "owner": {
                    "links": {"related": "/users/3"},
                    "data": {"type": "users", "id": "3"},
                },
                "parts": {
                    "data": [
                        {"type": "parts", "id": "1"},
                        {"type": "parts", "id": "2"},
                    ],
                },
            },
            "links": {
                "self": "/widgets/7",
                "owner": "/users/3",
                "parts": "/widgets/7/parts",
            },
        },
        "included": [
            {
                "type": "users",
                "id": "3",
                "attributes": {"name": "Ann"},
                "relationships": {
                    "company": {
                        "links": {"related": "/companies/c1"},
                        "data": {"type": "companies", "id": "c1"},
                    },
                },
                "links": {"self": "/users/3", "company": "/companies/c1"},
            },
            {
                "type": "companies",
                "id": "c1",
                "attributes": {"name": "Acme"},
                "links": {"self": "/companies/c1"},
            },
            {
                "type": "parts",
                "id": "1",
                "attributes": {"label": "Nut"},
                "links": {"self": "/parts/1"},
            },
            {
                "type": "parts",
                "id": "2",
                "attributes": {"label": "Washer"},
                "links": {"self": "/parts/2"},
            },
        ],
    }


def test_collection_deduplicates_included(target):
    from ..links import DocumentLinks

    result = target.transform(
        array(widget("1"), widget("2"), widget("3", owner_id="4")),
        links=DocumentLinks(self_="/widgets", next="/widgets?page=2"),
        meta={"total": 3},
    )
    assert result["links"] == {"self": "/widgets", "next": "/widgets?page=2"}
    assert result["meta"] == {"total": 3}
    assert [(r["type"], r["id"]) for r in result["data"]] == [
        ("widgets", "1"),
        ("widgets", "2"),
        ("widgets", "3"),
    ]
    assert [(r["type"], r["id"]) for r in result["included"]] == [
        ("users", "3"),
        ("companies", "c1"),
        ("users", "4"),
    ]


@pytest.mark.parametrize(
    ("include", "expected"),
    [
        ({}, []),
        ({"owner": ()}, [("users", "3")]),
        ({"owner": ("company",)}, [("users", "3"), ("companies", "c1")]),
        ({"company": ()}, []),
    ],
)
def test_include_filter(target, include, expected):
    from ..validation.params import Included

    result = target.transform(widget("7"), include=Included(include))
    assert [(r["type"], r["id"]) for r in result.get("included", [])] == expected
    assert result["data"]["relationships"]["owner"]["data"] == {"type": "users", "id": "3"}


def test_caller_links_take_precedence(target):
    from ..links import DocumentLinks

    result = target.transform(widget("7"), links=DocumentLinks(self_="/widgets/7?include=owner"))
    assert result["links"] == {"self": "/widgets/7?include=owner"}


def test_composite_id():
    from ..mapping import Mapping, MappingRegistry
    from ..transformer import JsonApiTransformer

    target = JsonApiTransformer(
        MappingRegistry(
            [
                Mapping(
                    alias="memberships",
                    class_name="Membership",
                    properties=["group_id", "user_id", "role"],
                    id_properties=["group_id", "user_id"],
                    resource_url_template="/groups/{group_id}/members/{user_id}",
                )
            ]
        )
    )
    result = target.transform(obj("Membership", group_id="g1", user_id=3, role="admin"))
    assert result["data"] == {
        "type": "memberships",
        "id": "g1,3",
        "attributes": {"role": "admin"},
        "links": {"self": "/groups/g1/members/3"},
    }


def test_attributes_are_flattened_and_formatted(target):
    result = target.transform(
        obj("Widget", id="7", serial_number="S-1", price=obj("Money", amount="9.90"))
    )
    assert result["data"]["attributes"] == {"serial": "S-1", "price": "9.90"}


def test_meta_and_fields(target):
    from ..validation.params import Fields

    result = target.transform(
        widget("7"), meta={"requestId": "abc"}, fields=Fields({"widgets": ["name"]})
    )
    assert result["meta"] == {"request_id": "abc"}
    assert result["data"]["attributes"] == {"name": "Bolt"}
    assert "relationships" not in result["data"]
    assert "included" not in result


def test_non_resource_root(target):
    with pytest.raises(TypeError):
        target.transform("a string")
    with pytest.raises(TypeError):
        target.transform(array("a string"))


def test_serialize(target):
    import json

    assert json.loads(target.serialize(obj("Part", id="1", label="Écrou"))) == {
        "jsonapi": {"version": "1.0"},
        "links": {"self": "/parts/1"},
        "data": {
            "type": "parts",
            "id": "1",
            "attributes": {"label": "Écrou"},
            "links": {"self": "/parts/1"},
        },
    }
