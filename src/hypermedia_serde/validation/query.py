"""
:py:mod:`hypermedia_serde.validation.query` validates the ``fields``,
``include`` and ``sort`` query parameters of read requests.
"""

import typing

from ..errors import Error, ErrorBag, InvalidParameter, InvalidParameterMember, InvalidSort
from ..exceptions import QueryError
from ..mapping import MappingRegistry
from .params import FIELDS_PARAMETER, INCLUDE_PARAMETER, SORT_PARAMETER, Fields, Included, Sorting


def check_fields(registry: MappingRegistry, fields: Fields) -> typing.List[Error]:
    """
    Checks that every resource type of the sparse fieldsets is known and that
    every member requested for it is one of its properties, by internal or public name.
    """
    errors: typing.List[Error] = []
    unknown: typing.List[str] = []
    for type_, members in fields.items():
        mapping = registry.get_mapping_by_alias(type_)
        if mapping is None:
            unknown.append(type_)
            continue
        known = mapping.members
        errors.extend(
            InvalidParameterMember(member, type_, FIELDS_PARAMETER)
            for member in members
            if member not in known
        )
    errors.extend(InvalidParameter(type_, FIELDS_PARAMETER) for type_ in unknown)
    return errors


def check_included(registry: MappingRegistry, included: Included) -> typing.List[Error]:
    """
    Checks that every include target and every sub-resource requested under it
    is a known resource type.
    """
    errors: typing.List[Error] = []
    for name, nested in included.items():
        if registry.get_mapping_by_alias(name) is None:
            errors.append(InvalidParameter(name, INCLUDE_PARAMETER))
            continue
        errors.extend(
            InvalidParameter(sub, INCLUDE_PARAMETER)
            for sub in nested
            if registry.get_mapping_by_alias(sub) is None
        )
    return errors


def check_sorting(
    registry: MappingRegistry, resource_class_name: str, sorting: Sorting
) -> typing.List[Error]:
    """
    Checks that every sort field, once translated to its internal name, is a
    property of the resource type.
    """
    mapping = registry.get_mapping_by_class_name(resource_class_name)
    if mapping is None:
        return []
    properties = set(mapping.properties)
    return [
        InvalidSort(name, SORT_PARAMETER)
        for name in sorting.names
        if mapping.internal_name(name) not in properties
    ]


def assert_query(
    registry: MappingRegistry,
    fields: typing.Optional[Fields] = None,
    included: typing.Optional[Included] = None,
    sorting: typing.Optional[Sorting] = None,
    resource_class_name: typing.Optional[str] = None,
    error_bag: typing.Optional[ErrorBag] = None,
) -> None:
    """
    Validates the query parameters of a read request.

    Sort fields are checked only when ``resource_class_name`` is given.

    :raises QueryError: if any of the parameters is invalid.
    """
    error_bag = ErrorBag() if error_bag is None else error_bag
    if fields:
        error_bag.extend(check_fields(registry, fields))
    if included:
        error_bag.extend(check_included(registry, included))
    if resource_class_name and sorting:
        error_bag.extend(check_sorting(registry, resource_class_name, sorting))
    if error_bag:
        raise QueryError(error_bag)
