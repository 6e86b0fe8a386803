"""
:py:mod:`hypermedia_serde.links` builds the links of a document: it resolves
the URL templates declared by a :py:class:`~hypermedia_serde.mapping.Mapping`
with the id values of a resource.

.. code-block:: python

   mapping = Mapping(
       alias="widgets",
       class_name="Widget",
       properties=["id", "name"],
       id_properties=["id"],
       resource_url_template="/widgets/{id}",
   )
   resolve_template("/widgets/{id}", mapping, {"id": "7"})  # => "/widgets/7"

"""

import dataclasses
import logging
import typing
from collections import OrderedDict

from .mapping import Mapping, placeholders
from .nodes import ObjectNode, first_scalar
from .serde.models import LinkRepr

logger = logging.getLogger(__name__)

SELF = "self"


@dataclasses.dataclass
class DocumentLinks:
    """
    The links the caller supplies for the top level of a document, typically
    the canonical URL of the request and the pagination links.
    """

    self_: typing.Optional[str] = None
    first: typing.Optional[str] = None
    last: typing.Optional[str] = None
    prev: typing.Optional[str] = None
    next: typing.Optional[str] = None

    def to_link_reprs(self) -> "OrderedDict[str, LinkRepr]":
        retval: "OrderedDict[str, LinkRepr]" = OrderedDict()
        for name, href in (
            (SELF, self.self_),
            ("first", self.first),
            ("last", self.last),
            ("prev", self.prev),
            ("next", self.next),
        ):
            if href is not None:
                retval[name] = LinkRepr(href=href)
        return retval


def id_values(node: ObjectNode, mapping: Mapping) -> "OrderedDict[str, typing.Any]":
    """
    Collects the id values of ``node`` keyed by the internal id property name,
    in the order ``mapping`` declares them. A property is looked up by its public
    name first, as pre-serialization may already have renamed it. Id values held
    by value objects are reduced to their first scalar. Absent ids are left out.
    """
    retval: "OrderedDict[str, typing.Any]" = OrderedDict()
    for name in mapping.id_properties:
        child = node.get(mapping.public_name(name))
        if child is None:
            child = node.get(name)
        value = first_scalar(child)
        if value is not None:
            retval[name] = value
    return retval


def resolve_template(
    template: str, mapping: Mapping, id_values: typing.Mapping[str, typing.Any]
) -> typing.Optional[str]:
    """
    Substitutes each ``{property}`` placeholder of ``template`` with the
    stringified id value, walking the id properties in declaration order.

    :param str template: the URL template.
    :param Mapping mapping: the mapping of the resource the template belongs to.
    :param Mapping[str, Any] id_values: id values keyed by internal property name.
    :return: the resolved URL, or :py:const:`None` when one of the values the
             template needs is missing.
    """
    wanted = set(placeholders(template))
    retval = template
    for name in mapping.id_properties:
        if name not in wanted:
            continue
        value = id_values.get(name)
        if value is None:
            logger.debug(
                "no value for id property %s of %s; template %s left unresolved",
                name,
                mapping.alias,
                template,
            )
            return None
        retval = retval.replace("{" + name + "}", str(value))
    return retval


def resource_links(
    mapping: Mapping, id_values: typing.Mapping[str, typing.Any]
) -> "OrderedDict[str, LinkRepr]":
    """
    Builds the links a mapping declares for a resource: ``self`` from the
    resource URL template, followed by the additional templates. Links whose
    template cannot be resolved are omitted.
    """
    retval: "OrderedDict[str, LinkRepr]" = OrderedDict()
    templates: typing.List[typing.Tuple[str, str]] = []
    if mapping.resource_url_template is not None:
        templates.append((SELF, mapping.resource_url_template))
    templates.extend(mapping.additional_url_templates.items())
    for name, template in templates:
        if name in retval:
            continue
        href = resolve_template(template, mapping, id_values)
        if href is not None:
            retval[name] = LinkRepr(href=href)
    return retval


def merge_links(
    *sources: typing.Mapping[str, LinkRepr]
) -> "OrderedDict[str, LinkRepr]":
    """
    Merges link sections; for a name given more than once, the first occurrence wins.
    """
    retval: "OrderedDict[str, LinkRepr]" = OrderedDict()
    for source in sources:
        for name, link in source.items():
            retval.setdefault(name, link)
    return retval
