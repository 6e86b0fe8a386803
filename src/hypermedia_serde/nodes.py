"""
:py:mod:`hypermedia_serde.nodes` models the object graph handed over by the
generic serializer.

A node is one of three variants:

* :py:class:`ScalarNode` holds a string, number, boolean or :py:const:`None`.
* :py:class:`ObjectNode` holds named child nodes and the class identifier the
  serializer tagged it with.
* :py:class:`CollectionNode` holds an ordered sequence (or an ordered,
  string-keyed mapping) of nodes.

Serializers emit the graph as plain dictionaries carrying reserved marker
keys; :py:func:`parse_node` turns that representation into nodes.

Synopsis
--------

.. code-block:: python

   node = parse_node(
       {
           "@type": "Widget",
           "id": {"@scalar": "string", "@value": "7"},
           "name": {"@scalar": "string", "@value": "Bolt"},
           "tags": {"@map": "array", "@value": ["a", "b"]},
       }
   )

"""

import collections.abc
import dataclasses
import typing
from collections import OrderedDict

CLASS_IDENTIFIER_KEY = "@type"
"""The key naming the class of an object."""

MAP_TYPE_KEY = "@map"
"""The key marking a wrapped collection; its items sit under :py:data:`SCALAR_VALUE_KEY`."""

SCALAR_VALUE_KEY = "@value"
"""The key holding the payload of a scalar holder or a wrapped collection."""

SCALAR_TYPE_KEY = "@scalar"
"""The key marking a scalar value holder."""

MARKER_KEYS = frozenset((CLASS_IDENTIFIER_KEY, MAP_TYPE_KEY, SCALAR_VALUE_KEY, SCALAR_TYPE_KEY))

CollectionKey = typing.Union[int, str]


class Node:
    """
    The base class for every node variant.
    """

    __slots__ = ()


@dataclasses.dataclass(frozen=True)
class ScalarNode(Node):
    value: typing.Any = None


@dataclasses.dataclass(frozen=True, init=False)
class ObjectNode(Node):
    class_identifier: typing.Optional[str]
    properties: "OrderedDict[str, Node]"

    def __getitem__(self, name: str) -> Node:
        return self.properties[name]

    def __contains__(self, name: object) -> bool:
        return name in self.properties

    def get(self, name: str, default: typing.Optional[Node] = None) -> typing.Optional[Node]:
        return self.properties.get(name, default)

    def __init__(
        self,
        class_identifier: typing.Optional[str],
        properties: typing.Union[
            typing.Mapping[str, Node], typing.Iterable[typing.Tuple[str, Node]]
        ] = (),
    ):
        """
        :param Optional[str] class_identifier: the class identifier the serializer assigned,
                                               or :py:const:`None` for an untagged object.
        :param properties: the child nodes, either as a mapping or as key-value pairs.
        """
        object.__setattr__(self, "class_identifier", class_identifier)
        object.__setattr__(
            self,
            "properties",
            OrderedDict(
                properties.items()
                if isinstance(properties, collections.abc.Mapping)
                else properties
            ),
        )


@dataclasses.dataclass(frozen=True, init=False)
class CollectionNode(Node):
    values: typing.Union[typing.Tuple[Node, ...], "OrderedDict[str, Node]"]

    @property
    def keyed(self) -> bool:
        """
        :py:const:`True` when the collection is a string-keyed mapping rather than a sequence.
        """
        return isinstance(self.values, OrderedDict)

    def items(self) -> typing.Iterator[typing.Tuple[CollectionKey, Node]]:
        if isinstance(self.values, OrderedDict):
            return iter(self.values.items())
        else:
            return enumerate(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __init__(
        self,
        values: typing.Union[typing.Iterable[Node], typing.Mapping[str, Node]] = (),
    ):
        object.__setattr__(
            self,
            "values",
            OrderedDict(values.items())
            if isinstance(values, collections.abc.Mapping)
            else tuple(values),
        )


def parse_node(raw: typing.Any) -> Node:
    """
    Converts the marker-tagged output of the generic serializer into nodes.

    :param Any raw: the serializer output.
    :return: the root :py:class:`Node`.
    """
    if isinstance(raw, Node):
        return raw
    if isinstance(raw, collections.abc.Mapping):
        if SCALAR_TYPE_KEY in raw:
            return ScalarNode(raw.get(SCALAR_VALUE_KEY))
        if raw.get(MAP_TYPE_KEY):
            items = raw.get(SCALAR_VALUE_KEY, ())
            if isinstance(items, collections.abc.Mapping):
                return CollectionNode(
                    OrderedDict((str(k), parse_node(v)) for k, v in items.items())
                )
            return CollectionNode(parse_node(v) for v in items)
        return ObjectNode(
            raw.get(CLASS_IDENTIFIER_KEY) or None,
            ((k, parse_node(v)) for k, v in raw.items() if k not in MARKER_KEYS),
        )
    if isinstance(raw, (list, tuple)):
        return CollectionNode(parse_node(v) for v in raw)
    return ScalarNode(raw)


def to_plain(node: Node) -> typing.Any:
    """
    Strips every tag from ``node`` and returns the bare Python value tree
    (dictionaries, lists and scalars).
    """
    if isinstance(node, ScalarNode):
        return node.value
    elif isinstance(node, ObjectNode):
        return OrderedDict((k, to_plain(v)) for k, v in node.properties.items())
    elif isinstance(node, CollectionNode):
        if isinstance(node.values, OrderedDict):
            return OrderedDict((k, to_plain(v)) for k, v in node.values.items())
        return [to_plain(v) for v in node.values]
    raise TypeError(f"unsupported node {node!r}")


def first_scalar(node: typing.Optional[Node]) -> typing.Any:
    """
    Reduces a node to a single scalar, descending into value objects and
    collections until a scalar is found. Returns :py:const:`None` if there is none.
    """
    if node is None:
        return None
    if isinstance(node, ScalarNode):
        return node.value
    children: typing.Iterable[Node]
    if isinstance(node, ObjectNode):
        children = node.properties.values()
    elif isinstance(node, CollectionNode):
        children = (v for _, v in node.items())
    else:
        raise TypeError(f"unsupported node {node!r}")
    for child in children:
        value = first_scalar(child)
        if value is not None:
            return value
    return None
