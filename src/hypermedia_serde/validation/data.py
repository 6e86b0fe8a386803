"""
:py:mod:`hypermedia_serde.validation.data` validates the documents of create
and update requests against the mapping of the resource type they declare.

Every rule is a function returning the errors it found. :py:func:`assert_create`
runs them all, collects the errors into an :py:class:`~hypermedia_serde.errors.ErrorBag`
and raises :py:class:`~hypermedia_serde.exceptions.DataError` carrying the bag
once every rule has run.

.. code-block:: python

   attributes = assert_create(
       {"data": {"type": "widgets", "attributes": {"name": "Bolt"}}},
       registry,
       "Widget",
   )

"""

import collections.abc
import typing
from collections import OrderedDict

from ..errors import (
    Error,
    ErrorBag,
    InvalidAttribute,
    InvalidType,
    MalformedDocument,
    MissingAttribute,
    MissingData,
    MissingType,
)
from ..exceptions import DataError
from ..mapping import Mapping, MappingRegistry
from ..serde.utils import JSONPointer

DATA = "data"
TYPE = "type"
ID = "id"
ATTRIBUTES = "attributes"
RELATIONSHIPS = "relationships"

DATA_POINTER = JSONPointer(DATA)

RuleResult = typing.List[Error]


def _is_object(value: typing.Any) -> bool:
    return isinstance(value, collections.abc.Mapping)


def _is_array_like(value: typing.Any) -> bool:
    """
    Tells whether the ``data`` member of a relationship holds several resource
    identifiers: either a JSON array, or an object whose first key is numeric.
    """
    if isinstance(value, (list, tuple)):
        return True
    if _is_object(value) and value:
        return str(next(iter(value))).isdigit()
    return False


def _attributes_of(data: typing.Mapping[str, typing.Any]) -> typing.Mapping[str, typing.Any]:
    attributes = data.get(ATTRIBUTES)
    return attributes if _is_object(attributes) else {}


def check_data_member(
    payload: typing.Any,
) -> typing.Tuple[RuleResult, typing.Optional[typing.Mapping[str, typing.Any]]]:
    """
    Checks that the payload is an object carrying a ``data`` object, which is returned.
    """
    if not _is_object(payload):
        return [MalformedDocument("The request document must be an object.")], None
    data = payload.get(DATA)
    if not _is_object(data):
        return [MissingData(str(DATA_POINTER))], None
    return [], data


def check_type(
    data: typing.Mapping[str, typing.Any],
    registry: MappingRegistry,
    resource_type_hint: typing.Optional[str] = None,
) -> typing.Tuple[RuleResult, typing.Optional[Mapping]]:
    """
    Checks that ``type`` names a known resource type, the one the hint designates
    if given. The hint may be either a class name or an alias.
    Returns the mapping of the declared type if it is known.
    """
    pointer = str(DATA_POINTER / TYPE)
    type_ = data.get(TYPE)
    if not isinstance(type_, str) or not type_:
        return [MissingType(pointer)], None
    mapping = registry.get_mapping_by_alias(type_)
    if mapping is None:
        return [InvalidType(type_, pointer)], None
    errors: RuleResult = []
    if resource_type_hint is not None:
        expected = registry.lookup(resource_type_hint)
        if expected is not None and expected.alias != type_:
            errors.append(InvalidType(type_, pointer, expected=expected.alias))
    return errors, mapping


def check_attributes_member(data: typing.Mapping[str, typing.Any]) -> RuleResult:
    if ATTRIBUTES in data and not _is_object(data[ATTRIBUTES]):
        return [
            MalformedDocument(
                "The `attributes` member must be an object.", str(DATA_POINTER / ATTRIBUTES)
            )
        ]
    return []


def check_unknown_attributes(
    attributes: typing.Mapping[str, typing.Any], mapping: Mapping
) -> RuleResult:
    members = mapping.members
    return [
        InvalidAttribute(name, mapping.alias, str(DATA_POINTER / ATTRIBUTES / name))
        for name in attributes
        if name not in members
    ]


def check_required_attributes(
    attributes: typing.Mapping[str, typing.Any], mapping: Mapping
) -> RuleResult:
    """
    Returns one :py:class:`~hypermedia_serde.errors.MissingAttribute` per required
    public attribute name absent from ``attributes``.
    """
    return [
        MissingAttribute(name, str(DATA_POINTER / ATTRIBUTES / name))
        for name in mapping.required_public_names()
        if name not in attributes
    ]


def check_resource_identifier(
    ref: typing.Any, registry: MappingRegistry, pointer: JSONPointer
) -> RuleResult:
    """
    Checks a resource referred to from a relationship. When its type is unknown,
    its attributes are not looked at.
    """
    if not _is_object(ref):
        return [MalformedDocument("A related resource must be an object.", str(pointer))]
    type_ = ref.get(TYPE)
    if not isinstance(type_, str) or not type_:
        return [MissingType(str(pointer / TYPE))]
    mapping = registry.get_mapping_by_alias(type_)
    if mapping is None:
        return [InvalidType(type_, str(pointer / TYPE))]
    attributes = ref.get(ATTRIBUTES)
    if not _is_object(attributes):
        return []
    return [
        InvalidAttribute(name, type_, str(pointer / ATTRIBUTES / name))
        for name in attributes
        if name not in mapping.members
    ]


def check_relationships(
    data: typing.Mapping[str, typing.Any], registry: MappingRegistry
) -> RuleResult:
    if RELATIONSHIPS not in data:
        return []
    pointer = DATA_POINTER / RELATIONSHIPS
    relationships = data[RELATIONSHIPS]
    if not _is_object(relationships):
        return [MalformedDocument("The `relationships` member must be an object.", str(pointer))]
    errors: RuleResult = []
    for name, relationship in relationships.items():
        data_pointer = pointer / name / DATA
        if not _is_object(relationship) or DATA not in relationship:
            errors.append(MissingData(str(data_pointer)))
            continue
        linkage = relationship[DATA]
        # null, {} and [] carry no resource identifier
        if linkage is None or (
            (_is_object(linkage) or isinstance(linkage, (list, tuple))) and not linkage
        ):
            errors.append(MissingData(str(data_pointer)))
            continue
        if _is_array_like(linkage):
            refs = linkage.values() if _is_object(linkage) else linkage
            for i, ref in enumerate(refs):
                errors.extend(check_resource_identifier(ref, registry, data_pointer[i]))
        else:
            errors.extend(check_resource_identifier(linkage, registry, data_pointer))
    return errors


def _validate(
    payload: typing.Any,
    registry: MappingRegistry,
    resource_type_hint: typing.Optional[str],
    error_bag: ErrorBag,
) -> None:
    errors, data = check_data_member(payload)
    error_bag.extend(errors)
    if data is None:
        return
    errors, mapping = check_type(data, registry, resource_type_hint)
    error_bag.extend(errors)
    error_bag.extend(check_attributes_member(data))
    if mapping is not None:
        attributes = _attributes_of(data)
        error_bag.extend(check_unknown_attributes(attributes, mapping))
        error_bag.extend(check_required_attributes(attributes, mapping))
    error_bag.extend(check_relationships(data, registry))


def get_attributes(
    payload: typing.Mapping[str, typing.Any], registry: MappingRegistry
) -> "OrderedDict[str, typing.Any]":
    """
    Returns the attributes of the request document keyed by their internal names.
    """
    data = payload.get(DATA)
    if not _is_object(data):
        return OrderedDict()
    attributes = _attributes_of(data)
    type_ = data.get(TYPE)
    mapping = registry.get_mapping_by_alias(type_) if isinstance(type_, str) else None
    if mapping is None:
        return OrderedDict(attributes.items())
    return OrderedDict((mapping.internal_name(k), v) for k, v in attributes.items())


def assert_create(
    payload: typing.Any,
    registry: MappingRegistry,
    resource_type_hint: typing.Optional[str] = None,
    error_bag: typing.Optional[ErrorBag] = None,
) -> "OrderedDict[str, typing.Any]":
    """
    Validates the document of a creation request.

    :param Any payload: the decoded request document.
    :param MappingRegistry registry: the registry to resolve types with.
    :param Optional[str] resource_type_hint: the class name or alias of the type
                                             the endpoint accepts.
    :param Optional[ErrorBag] error_bag: the bag to collect errors into; a new one if not given.
    :return: the attributes keyed by their internal names.
    :raises DataError: if any rule is violated.
    """
    error_bag = ErrorBag() if error_bag is None else error_bag
    _validate(payload, registry, resource_type_hint, error_bag)
    if error_bag:
        raise DataError(error_bag)
    return get_attributes(payload, registry)


def assert_update(
    payload: typing.Any,
    registry: MappingRegistry,
    resource_type_hint: typing.Optional[str] = None,
    error_bag: typing.Optional[ErrorBag] = None,
) -> "OrderedDict[str, typing.Any]":
    """
    Validates the document of an update request. The rules are those of
    :py:func:`assert_create`.
    """
    return assert_create(payload, registry, resource_type_hint, error_bag)
