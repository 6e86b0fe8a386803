"""
:py:mod:`hypermedia_serde.transformer.jsonapi` renders documents following
`JSON:API <https://jsonapi.org/format/1.0/>`_.

Embedded resources become relationships whose linkage points at full
resource objects collected in ``included``.
"""

import typing

from ..links import SELF, DocumentLinks, merge_links
from ..nodes import CollectionNode, ObjectNode
from ..serde.builders import (
    CollectionDocumentBuilder,
    DocumentBuilder,
    LinkageReprBuilder,
    ResourceReprBuilder,
    SingletonDocumentBuilder,
)
from ..serde.models import LinkRepr, LinksRepr
from ..serde.renderer import ReprRendererContext
from ..serde.types import JSONValue
from ..validation.params import Fields, Included
from .base import ShapedResource, Transformer, flatten_single_key_scalars

JSONAPI_VERSION = "1.0"

_WELL_KNOWN_LINKS = ("related", "first", "last", "prev", "next")


def build_links_repr(links: typing.Mapping[str, LinkRepr]) -> typing.Optional[LinksRepr]:
    if not links:
        return None
    retval = LinksRepr()
    for name, link in links.items():
        if name == SELF:
            retval.self_ = link.href
        elif name in _WELL_KNOWN_LINKS:
            setattr(retval, name, link.href)
        else:
            retval.others[name] = link.href
    return retval


class JsonApiTransformer(Transformer):
    version: str = JSONAPI_VERSION

    def _type_of(self, resource: ShapedResource) -> str:
        if resource.mapping is not None:
            return resource.mapping.alias
        return resource.class_identifier or ""

    def _id_of(self, resource: ShapedResource) -> typing.Optional[str]:
        if not resource.id_values:
            return None
        return ",".join(str(self.render_scalar(v)) for v in resource.id_values.values())

    def _populate(
        self,
        builder: ResourceReprBuilder,
        resource: ShapedResource,
        doc: DocumentBuilder,
        include: typing.Optional[Included],
    ) -> None:
        builder.type = self._type_of(resource)
        builder.id = self._id_of(resource)
        for name, node in resource.attributes.items():
            if resource.mapping is not None and resource.mapping.is_id_property(name):
                continue
            builder.add_attribute(name, flatten_single_key_scalars(self.render_node(node)))

        for name, value in resource.embedded.items():
            members: typing.List[ShapedResource]
            rel: LinkageReprBuilder
            if isinstance(value, ShapedResource):
                to_one = builder.next_to_one_relationship(name)
                to_one.set(self._type_of(value), typing.cast(str, self._id_of(value)))
                rel = to_one
                members = [value]
            else:
                to_many = builder.next_to_many_relationship(name)
                for member in value.values():
                    to_many.add(self._type_of(member), typing.cast(str, self._id_of(member)))
                rel = to_many
                members = list(value.values())
            related = resource.related_links.get(name)
            if related is not None:
                rel.links = LinksRepr(related=related.href)

            if include is not None and name not in include:
                continue
            nested_include = (
                None if include is None else Included({n: () for n in include.nested(name)})
            )
            for member in members:
                included = doc.next_included(self._type_of(member), self._id_of(member))
                if included is not None:
                    self._populate(included, member, doc, nested_include)

        builder.links = build_links_repr(resource.links)

    def transform(
        self,
        value: typing.Any,
        links: typing.Optional[DocumentLinks] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        fields: typing.Optional[Fields] = None,
        include: typing.Optional[Included] = None,
        **kwargs: typing.Any,
    ) -> JSONValue:
        """
        :param Optional[Included] include: when given, only the related resources
                                           it names are emitted in ``included``.
        """
        node = self._prepare(value)
        document_links = self.root_links(links) or {}
        doc: DocumentBuilder
        if isinstance(node, ObjectNode):
            singleton = SingletonDocumentBuilder()
            resource = self.shape(node, fields=fields)
            self._populate(singleton.data, resource, singleton, include)
            doc = singleton
            self_link = resource.self_link
            document_links = merge_links(
                document_links, {SELF: self_link} if self_link is not None else {}
            )
        elif isinstance(node, CollectionNode):
            collection = CollectionDocumentBuilder()
            for _, element in node.items():
                if not isinstance(element, ObjectNode):
                    raise TypeError(f"collection member {element!r} is not a resource")
                self._populate(
                    collection.next(), self.shape(element, fields=fields), collection, include
                )
            doc = collection
        else:
            raise TypeError(f"{node!r} is not a resource")

        doc.jsonapi = {"version": self.version}
        doc.links = build_links_repr(document_links)
        if meta:
            doc.meta = dict(
                typing.cast(
                    typing.Mapping[str, typing.Any],
                    self.renderer.render_value(ReprRendererContext(None), meta),
                )
            )
        return self.finish(self.renderer(doc()))
