import json
import logging

import pytest

from .testing import array, build_registry, obj


@pytest.fixture
def target():
    from ..actions import ResourceActions
    from ..transformer import HalJsonTransformer

    registry = build_registry()
    return ResourceActions(registry, HalJsonTransformer(registry))


def widget_payload(**attributes):
    return {"data": {"type": "widgets", "attributes": attributes}}


def test_create(target):
    from ..actions import Outcome

    received = []

    def callback(payload, attributes, error_bag):
        received.append((payload, dict(attributes), len(error_bag)))
        return obj("Widget", id="7", **attributes)

    payload = widget_payload(name="Bolt", serial="S-1")
    result = target.create(payload, "Widget", callback)
    assert result.outcome is Outcome.CREATED
    assert result.status == 201
    assert received == [(payload, {"name": "Bolt", "serial_number": "S-1"}, 0)]
    assert json.loads(result.body) == {
        "id": "7",
        "name": "Bolt",
        "serial": "S-1",
        "_links": {
            "self": {"href": "/widgets/7"},
            "parts": {"href": "/widgets/7/parts"},
        },
    }


def test_update(target):
    from ..actions import Outcome

    result = target.update(
        widget_payload(name="Bolt", serial="S-1"),
        "Widget",
        lambda payload, attributes, error_bag: obj("Widget", id="7", name="Bolt"),
    )
    assert result.outcome is Outcome.OK
    assert result.status == 200


def test_create_unprocessable(target):
    from ..actions import Outcome

    def callback(payload, attributes, error_bag):
        raise AssertionError("not reached")

    result = target.create(widget_payload(name="Bolt"), "Widget", callback)
    assert result.outcome is Outcome.UNPROCESSABLE
    assert result.status == 422
    assert json.loads(result.body) == {
        "errors": [
            {
                "status": "422",
                "code": "missing_attribute",
                "title": "Missing Attribute",
                "detail": "Attribute `serial` is missing.",
                "source": {"pointer": "/data/attributes/serial"},
            }
        ]
    }


def test_forbidden_uses_the_action_bag(target):
    from ..actions import Outcome
    from ..errors import Error
    from ..exceptions import ForbiddenError

    def callback(payload, attributes, error_bag):
        error_bag.append(Error("not_owner", "Not Owner", "You do not own this widget."))
        raise ForbiddenError()

    result = target.update(widget_payload(name="Bolt", serial="S-1"), "Widget", callback)
    assert result.outcome is Outcome.FORBIDDEN
    assert json.loads(result.body) == {
        "errors": [
            {
                "status": "403",
                "code": "not_owner",
                "title": "Not Owner",
                "detail": "You do not own this widget.",
            }
        ]
    }


def test_forbidden_with_own_errors(target):
    from ..errors import Error, ErrorBag
    from ..exceptions import ForbiddenError

    def callback(payload, attributes, error_bag):
        raise ForbiddenError(ErrorBag([Error("locked", "Locked", "The widget is locked.")]))

    result = target.create(widget_payload(name="Bolt", serial="S-1"), "Widget", callback)
    assert result.status == 403
    assert [e["code"] for e in json.loads(result.body)["errors"]] == ["locked"]


def test_forbidden_without_errors(target):
    from ..exceptions import ForbiddenError

    def callback(payload, attributes, error_bag):
        raise ForbiddenError()

    result = target.create(widget_payload(name="Bolt", serial="S-1"), "Widget", callback)
    assert result.status == 403
    assert json.loads(result.body) == {"errors": []}


def test_bad_request(target, caplog):
    from ..actions import Outcome

    def callback(payload, attributes, error_bag):
        raise RuntimeError("database is down")

    with caplog.at_level(logging.ERROR, logger="hypermedia_serde.actions"):
        result = target.create(widget_payload(name="Bolt", serial="S-1"), "Widget", callback)
    assert result.outcome is Outcome.BAD_REQUEST
    assert json.loads(result.body) == {
        "errors": [
            {
                "status": "400",
                "code": "bad_request",
                "title": "Bad Request",
                "detail": "Request could not be served.",
            }
        ]
    }
    assert "database is down" not in result.body
    (record,) = caplog.records
    assert record.exc_info[0] is RuntimeError


def test_fetch(target):
    from ..validation import Fields

    result = target.fetch(
        lambda: obj("Widget", id="7", name="Bolt", serial_number="S-1"),
        "Widget",
        fields=Fields({"widgets": ["name"]}),
    )
    assert result.status == 200
    assert json.loads(result.body) == {
        "id": "7",
        "name": "Bolt",
        "_links": {
            "self": {"href": "/widgets/7"},
            "parts": {"href": "/widgets/7/parts"},
        },
    }


def test_fetch_invalid_query(target):
    from ..actions import Outcome
    from ..validation import Fields

    def callback():
        raise AssertionError("not reached")

    result = target.fetch(callback, "Widget", fields=Fields({"widgets": ["color"]}))
    assert result.outcome is Outcome.UNPROCESSABLE
    (error,) = json.loads(result.body)["errors"]
    assert error["code"] == "invalid_parameter_member"
    assert error["source"] == {"parameter": "fields"}


def test_list(target):
    from ..links import DocumentLinks
    from ..validation import Sorting

    result = target.list(
        lambda: array(obj("Widget", id="1"), obj("Widget", id="2")),
        "Widget",
        sorting=Sorting.from_query("-name"),
        links=DocumentLinks(self_="/widgets?sort=-name"),
    )
    assert result.status == 200
    assert [w["id"] for w in json.loads(result.body)] == ["1", "2"]


def test_list_invalid_sort(target):
    from ..validation import Sorting

    result = target.list(lambda: array(), "Widget", sorting=Sorting.from_query("color"))
    assert result.status == 422
    assert [e["code"] for e in json.loads(result.body)["errors"]] == ["invalid_sort"]
