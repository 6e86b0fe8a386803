"""
:py:mod:`hypermedia_serde.transformer.hal` renders documents following
`JSON Hypertext Application Language <https://tools.ietf.org/html/draft-kelly-json-hal-08>`_.

Synopsis
--------

.. code-block:: python

   transformer = HalJsonTransformer(registry)
   transformer.serialize(
       {
           "@type": "Widget",
           "id": {"@scalar": "string", "@value": "7"},
           "name": {"@scalar": "string", "@value": "Bolt"},
           "owner": {
               "@type": "User",
               "id": {"@scalar": "string", "@value": "3"},
               "name": {"@scalar": "string", "@value": "Ann"},
           },
       }
   )

produces

.. code-block:: json

   {
       "id": "7",
       "name": "Bolt",
       "_embedded": {
           "owner": {
               "id": "3",
               "name": "Ann",
               "_links": {"self": {"href": "/users/3"}}
           }
       },
       "_links": {
           "self": {"href": "/widgets/7"},
           "owner": {"href": "/users/3"}
       }
   }

"""

import typing
from collections import OrderedDict

from ..links import SELF, DocumentLinks
from ..nodes import CollectionNode, ObjectNode
from ..serde.models import LinkRepr
from ..serde.renderer import ReprRendererContext
from ..serde.types import JSONValue, MutableJSONObject
from ..validation.params import Fields
from .base import ShapedResource, Transformer, flatten_members

EMBEDDED_KEY = "_embedded"
LINKS_KEY = "_links"
META_KEY = "_meta"


class HalJsonTransformer(Transformer):
    def _render_links(self, links: typing.Mapping[str, LinkRepr]) -> MutableJSONObject:
        ctx = ReprRendererContext(None)
        return OrderedDict((k, self.renderer.render_link(ctx / k, v)) for k, v in links.items())

    def _render_resource(self, resource: ShapedResource) -> MutableJSONObject:
        retval: MutableJSONObject = OrderedDict(
            (k, self.render_node(v)) for k, v in resource.attributes.items()
        )
        if resource.embedded:
            embedded: MutableJSONObject = OrderedDict()
            for name, value in resource.embedded.items():
                if isinstance(value, ShapedResource):
                    embedded[name] = self._render_resource(value)
                elif list(value.keys()) == list(range(len(value))):
                    embedded[name] = [self._render_resource(v) for v in value.values()]
                else:
                    embedded[name] = OrderedDict(
                        (str(k), self._render_resource(v)) for k, v in value.items()
                    )
            retval[EMBEDDED_KEY] = embedded
        if resource.links:
            retval[LINKS_KEY] = self._render_links(resource.links)
        return retval

    def _transform_object(
        self,
        node: ObjectNode,
        default_links: typing.Optional[typing.Mapping[str, LinkRepr]],
        meta: typing.Optional[typing.Mapping[str, typing.Any]],
        fields: typing.Optional[Fields],
    ) -> JSONValue:
        resource = self.shape(node, default_links=default_links, fields=fields)
        # the document itself and its _embedded section always stay objects
        value = self.finish(
            flatten_members(
                self._render_resource(resource),
                skip=frozenset((LINKS_KEY,)),
                keep=frozenset((EMBEDDED_KEY,)),
            )
        )
        if meta:
            value[META_KEY] = self.renderer.render_value(ReprRendererContext(None), meta)
        return value

    def transform(
        self,
        value: typing.Any,
        links: typing.Optional[DocumentLinks] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        fields: typing.Optional[Fields] = None,
        **kwargs: typing.Any,
    ) -> JSONValue:
        node = self._prepare(value)
        default_links = self.root_links(links)
        if isinstance(node, ObjectNode):
            return self._transform_object(node, default_links, meta, fields)
        elif isinstance(node, CollectionNode):
            # every member links to itself; the caller's self link denotes the whole list
            element_links = (
                OrderedDict((k, v) for k, v in default_links.items() if k != SELF)
                if default_links is not None
                else None
            )
            retval: typing.List[JSONValue] = []
            for _, element in node.items():
                if isinstance(element, ObjectNode):
                    retval.append(self._transform_object(element, element_links, meta, fields))
                else:
                    retval.append(self.finish(self.render_node(element)))
            return retval
        else:
            return self.render_node(node)
