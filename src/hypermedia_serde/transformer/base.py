"""
:py:mod:`hypermedia_serde.transformer.base` implements the part of document
transformation that does not depend on the document format:

1. pre-serialization drops hidden properties and renames properties to their
   public names, for every object whose class is registered;
2. shaping splits each object into inline attributes and embedded resources
   and computes its links;
3. the format-specific subclass places the result under its reserved keys,
   then the common post-processing formats scalars, flattens single-key
   objects and normalizes the casing of keys.
"""

import abc
import collections.abc
import dataclasses
import datetime
import json
import logging
import typing
from collections import OrderedDict

from ..exceptions import NoMappingConfiguredError
from ..links import DocumentLinks, SELF, id_values, merge_links, resource_links
from ..mapping import Mapping, MappingRegistry
from ..nodes import CollectionKey, CollectionNode, Node, ObjectNode, parse_node, to_plain
from ..serde.models import LinkRepr
from ..serde.renderer import ReprRenderer, ReprRendererContext
from ..serde.types import JSONValue, is_scalar
from ..serde.utils import underscore
from ..validation.params import Fields

logger = logging.getLogger(__name__)

KeyFormatter = typing.Callable[[str], str]
Embedded = typing.Union["ShapedResource", "OrderedDict[CollectionKey, ShapedResource]"]


@dataclasses.dataclass
class ShapedResource:
    """
    A resource after the format-agnostic phases.

    ``attributes`` holds the inline members under their public names, and
    ``embedded`` the promoted sub-resources; a collection property maps to the
    embedded elements keyed by their original position or key.
    ``related_links`` holds the self links of the embedded single resources,
    mirrored under their property names.
    """

    class_identifier: typing.Optional[str]
    mapping: typing.Optional[Mapping]
    id_values: "OrderedDict[str, typing.Any]" = dataclasses.field(default_factory=OrderedDict)
    attributes: "OrderedDict[str, Node]" = dataclasses.field(default_factory=OrderedDict)
    embedded: "OrderedDict[str, Embedded]" = dataclasses.field(default_factory=OrderedDict)
    links: "OrderedDict[str, LinkRepr]" = dataclasses.field(default_factory=OrderedDict)
    related_links: "OrderedDict[str, LinkRepr]" = dataclasses.field(default_factory=OrderedDict)

    @property
    def self_link(self) -> typing.Optional[LinkRepr]:
        return self.links.get(SELF)


def flatten_members(
    value: typing.Mapping[str, typing.Any],
    skip: typing.AbstractSet[str] = frozenset(),
    keep: typing.AbstractSet[str] = frozenset(),
) -> "OrderedDict[str, typing.Any]":
    """
    Flattens the members of ``value`` as :py:func:`flatten_single_key_scalars`
    does, but never replaces ``value`` itself.
    """
    items: "OrderedDict[str, typing.Any]" = OrderedDict()
    for k, v in value.items():
        if k in skip:
            items[k] = v
        elif k in keep and isinstance(v, collections.abc.Mapping):
            items[k] = flatten_members(v, skip, keep)
        else:
            items[k] = flatten_single_key_scalars(v, skip, keep)
    return items


def flatten_single_key_scalars(
    value: typing.Any,
    skip: typing.AbstractSet[str] = frozenset(),
    keep: typing.AbstractSet[str] = frozenset(),
) -> typing.Any:
    """
    Replaces every object holding exactly one key whose value is a scalar
    with that scalar. Children are flattened before their parent, which makes
    the operation idempotent. Subtrees under a key in ``skip`` are left untouched.

    :param Any value: the tree to flatten.
    :param AbstractSet[str] skip: keys whose values must not be descended into.
    :param AbstractSet[str] keep: keys whose objects are descended into but
                                  never replaced by a scalar themselves.
    :return: the flattened tree.
    """
    if isinstance(value, collections.abc.Mapping):
        items = flatten_members(value, skip, keep)
        if len(items) == 1:
            (only,) = items.values()
            if is_scalar(only):
                return only
        return items
    elif isinstance(value, list):
        return [flatten_single_key_scalars(v, skip, keep) for v in value]
    else:
        return value


def format_keys(value: typing.Any, formatter: KeyFormatter) -> typing.Any:
    """
    Applies ``formatter`` to every key of every object in the tree.
    """
    if isinstance(value, collections.abc.Mapping):
        return OrderedDict((formatter(k), format_keys(v, formatter)) for k, v in value.items())
    elif isinstance(value, list):
        return [format_keys(v, formatter) for v in value]
    else:
        return value


class Transformer(metaclass=abc.ABCMeta):
    """
    The base class of document transformers.

    :param MappingRegistry registry: the mappings of every resource type.
    :param Optional[Callable[[str], str]] key_formatter: the function applied to
        every key of the output; :py:const:`None` keeps keys as they are.
    :param bool render_decimal_as_str: renders decimals as strings rather than numbers.
    :param Optional[datetime.tzinfo] assume_naive_timezone_as: the timezone assumed
        for naive datetimes; naive datetimes are rejected when not given.
    """

    registry: typing.Optional[MappingRegistry]
    key_formatter: typing.Optional[KeyFormatter]
    renderer: ReprRenderer

    def _guard(self) -> MappingRegistry:
        if self.registry is None or len(self.registry) == 0:
            raise NoMappingConfiguredError()
        return self.registry

    def lookup(self, class_identifier: typing.Optional[str]) -> typing.Optional[Mapping]:
        mapping = self._guard().lookup(class_identifier)
        if mapping is None and class_identifier:
            logger.debug("no mapping for class %s; left inline", class_identifier)
        return mapping

    def preserialize(self, node: Node) -> Node:
        """
        Drops hidden properties and renames aliased properties of every
        registered object in the tree.
        """
        if isinstance(node, ObjectNode):
            mapping = self.lookup(node.class_identifier)
            properties: "OrderedDict[str, Node]" = OrderedDict()
            for name, child in node.properties.items():
                if mapping is not None:
                    if name in mapping.hidden_properties:
                        continue
                    name = mapping.public_name(name)
                properties[name] = self.preserialize(child)
            return ObjectNode(node.class_identifier, properties)
        elif isinstance(node, CollectionNode):
            if node.keyed:
                return CollectionNode(
                    OrderedDict((k, self.preserialize(v)) for k, v in node.items())
                )
            return CollectionNode(self.preserialize(v) for _, v in node.items())
        else:
            return node

    def _embeddable_mapping(self, name: str, node: Node) -> typing.Optional[Mapping]:
        if not isinstance(node, ObjectNode):
            return None
        mapping = self.lookup(node.class_identifier)
        if mapping is None or mapping.is_id_property(name):
            return None
        return mapping

    def shape(
        self,
        node: ObjectNode,
        default_links: typing.Optional[typing.Mapping[str, LinkRepr]] = None,
        fields: typing.Optional[Fields] = None,
    ) -> ShapedResource:
        """
        Splits a pre-serialized object into attributes and embedded resources,
        and computes its links.

        :param ObjectNode node: the pre-serialized object.
        :param Optional[Mapping[str, LinkRepr]] default_links: the links that take
            precedence over any other. When :py:const:`None`, the self link
            resolved from the mapping is used.
        :param Optional[Fields] fields: the sparse fieldsets to apply.
        """
        mapping = self.lookup(node.class_identifier)
        resource = ShapedResource(class_identifier=node.class_identifier, mapping=mapping)
        selected: typing.Optional[typing.AbstractSet[str]] = None
        if mapping is not None:
            resource.id_values = id_values(node, mapping)
            if fields is not None:
                requested = fields.get(mapping.alias)
                if requested is not None:
                    # properties are already renamed; fields may use either name
                    selected = frozenset(
                        mapping.public_name(mapping.internal_name(n)) for n in requested
                    )

        for name, child in node.properties.items():
            if (
                selected is not None
                and name not in selected
                and not typing.cast(Mapping, mapping).is_id_property(name)
            ):
                continue
            if isinstance(child, ObjectNode):
                if self._embeddable_mapping(name, child) is not None:
                    embedded = self.shape(child, fields=fields)
                    resource.embedded[name] = embedded
                    if embedded.self_link is not None:
                        resource.related_links[name] = embedded.self_link
                    continue
            elif isinstance(child, CollectionNode):
                elements: "OrderedDict[CollectionKey, ShapedResource]" = OrderedDict()
                inline: typing.List[typing.Tuple[CollectionKey, Node]] = []
                for key, element in child.items():
                    if (
                        isinstance(element, ObjectNode)
                        and self._embeddable_mapping(name, element) is not None
                    ):
                        elements[key] = self.shape(element, fields=fields)
                    else:
                        inline.append((key, element))
                if elements:
                    resource.embedded[name] = elements
                    if inline:
                        resource.attributes[name] = (
                            CollectionNode(OrderedDict(inline))  # type: ignore
                            if child.keyed
                            else CollectionNode(v for _, v in inline)
                        )
                    continue
            resource.attributes[name] = child

        if mapping is not None:
            own_links = resource_links(mapping, resource.id_values)
            self_links: typing.Mapping[str, LinkRepr] = (
                OrderedDict((k, v) for k, v in own_links.items() if k == SELF)
            )
            additional_links = OrderedDict((k, v) for k, v in own_links.items() if k != SELF)
        else:
            self_links = additional_links = OrderedDict()
        if default_links is not None:
            self_links = merge_links(default_links, self_links)
        resource.links = merge_links(self_links, resource.related_links, additional_links)
        return resource

    def root_links(
        self, links: typing.Optional[DocumentLinks]
    ) -> typing.Optional["OrderedDict[str, LinkRepr]"]:
        return links.to_link_reprs() if links is not None else None

    def render_node(self, node: Node) -> JSONValue:
        """
        Strips the tags of an inline node and formats its scalars.
        """
        return self.renderer.render_value(ReprRendererContext(None), to_plain(node))

    def render_scalar(self, value: typing.Any) -> JSONValue:
        return self.renderer.render_scalar(ReprRendererContext(None), value)

    def finish(self, value: typing.Any) -> typing.Any:
        if self.key_formatter is not None:
            value = format_keys(value, self.key_formatter)
        return value

    @abc.abstractmethod
    def transform(
        self,
        value: typing.Any,
        links: typing.Optional[DocumentLinks] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        fields: typing.Optional[Fields] = None,
        **kwargs: typing.Any,
    ) -> JSONValue:
        """
        Transforms the serializer output into a document, and returns the tree
        ready to be encoded.

        :param Any value: a :py:class:`~hypermedia_serde.nodes.Node` or the raw
                          marker-tagged output of the serializer.
        :param Optional[DocumentLinks] links: the top-level links.
        :param Optional[Mapping[str, Any]] meta: the metadata to attach.
        :param Optional[Fields] fields: the sparse fieldsets to apply.
        """
        ...  # pragma: nocover

    def serialize(
        self,
        value: typing.Any,
        links: typing.Optional[DocumentLinks] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        fields: typing.Optional[Fields] = None,
        **kwargs: typing.Any,
    ) -> str:
        """
        Same as :py:meth:`transform`, but returns the document encoded as JSON.
        Non-ASCII characters and slashes are left unescaped.
        """
        return json.dumps(
            self.transform(value, links=links, meta=meta, fields=fields, **kwargs),
            ensure_ascii=False,
        )

    def _prepare(self, value: typing.Any) -> Node:
        self._guard()
        return self.preserialize(parse_node(value))

    def __init__(
        self,
        registry: typing.Optional[MappingRegistry],
        key_formatter: typing.Optional[KeyFormatter] = underscore,
        render_decimal_as_str: bool = True,
        assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None,
    ):
        self.registry = registry
        self.key_formatter = key_formatter
        self.renderer = ReprRenderer(
            render_decimal_as_str=render_decimal_as_str,
            assume_naive_timezone_as=assume_naive_timezone_as,
        )
