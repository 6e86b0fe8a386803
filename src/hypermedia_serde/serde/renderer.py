"""
:py:mod:`hypermedia_serde.serde.renderer` module contains the class in charge of
rendering the internal representation of documents to JSON-ready values.

Synopsis
--------

.. code-block:: python

   import json

   from hypermedia_serde.serde.renderer import ReprRenderer

   renderer = ReprRenderer()

   internal_repr = SingletonDocumentRepr(
       links=LinksRepr(self_="/widgets/7"),
       data=ResourceRepr(
           type="widgets",
           id="7",
           attributes=[("name", "Bolt")],
           relationships=[
               (
                   "owner",
                   LinkageRepr(
                       links=LinksRepr(related="/users/3"),
                       data=ResourceIdRepr(type="users", id="3"),
                   ),
               ),
           ],
       ),
   )

   print(json.dumps(renderer(internal_repr)))

"""

import base64
import collections.abc
import datetime
import decimal
import enum
import typing
from collections import OrderedDict

from .models import (
    CollectionDocumentRepr,
    DocumentReprBase,
    ErrorDocumentRepr,
    ErrorRepr,
    LinkageRepr,
    LinkRepr,
    LinksRepr,
    Repr,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
    SourceRepr,
)
from .types import JSONScalar, JSONValue, MutableJSONObject
from .utils import JSONPointer


class TZLocalizer(typing.Protocol):
    def localize(self, dt: datetime.datetime) -> datetime.datetime:
        ...  # pragma: nocover


class ReprRendererContext:
    parent: typing.Optional["ReprRendererContext"]
    path: JSONPointer
    anchor: typing.Optional[Repr]

    def __truediv__(self, component: typing.Union[str, int]) -> "ReprRendererContext":
        return self.replace(path=(self.path / component))

    def __or__(self, anchor: Repr) -> "ReprRendererContext":
        return self.replace(anchor=anchor)

    def __getitem__(self, index: int) -> "ReprRendererContext":
        return self.replace(path=(self.path[index]))

    def replace(
        self, *, anchor: typing.Optional[Repr] = None, path: typing.Optional[JSONPointer] = None
    ):
        anchor = self.anchor if anchor is None else anchor
        path = self.path if path is None else path
        return ReprRendererContext(parent=self, anchor=anchor, path=path)

    def __init__(
        self,
        parent: typing.Optional["ReprRendererContext"],
        anchor: typing.Optional[Repr] = None,
        path: typing.Optional[JSONPointer] = None,
    ):
        self.parent = parent
        self.anchor = anchor
        self.path = JSONPointer() if path is None else path


class ReprRenderer:
    _render_decimal_as_str: bool = True
    _assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None

    def _dict_factory(self, items: typing.Iterable[typing.Tuple[str, typing.Any]]):
        return OrderedDict(items)

    def _render_datetime(self, ctx: ReprRendererContext, value: typing.Any) -> JSONScalar:
        _value = typing.cast(datetime.datetime, value)
        if _value.tzinfo is None:
            if self._assume_naive_timezone_as is None:
                raise ValueError(f"{ctx.path}: naive datetime {_value}")
            else:
                if hasattr(self._assume_naive_timezone_as, "localize"):
                    _value = typing.cast(TZLocalizer, self._assume_naive_timezone_as).localize(
                        _value
                    )
                else:
                    _value = _value.replace(tzinfo=self._assume_naive_timezone_as)
        return _value.astimezone(datetime.timezone.utc).isoformat()

    def _render_date(self, ctx: ReprRendererContext, value: typing.Any) -> JSONScalar:
        return typing.cast(datetime.date, value).isoformat()

    def _render_decimal(self, ctx: ReprRendererContext, value: typing.Any) -> JSONScalar:
        _value = typing.cast(decimal.Decimal, value)
        return str(_value) if self._render_decimal_as_str else float(_value)

    def _render_bytes(self, ctx: ReprRendererContext, value: typing.Any) -> JSONScalar:
        return base64.b64encode(typing.cast(bytes, value)).decode("ascii")

    def _render_enum(self, ctx: ReprRendererContext, value: typing.Any) -> JSONScalar:
        return self.render_scalar(ctx, typing.cast(enum.Enum, value).value)

    def _render_passthrough(self, ctx: ReprRendererContext, value: typing.Any) -> JSONScalar:
        return typing.cast(JSONScalar, value)

    _supported_types: typing.ClassVar[typing.Dict[type, typing.Callable]] = {
        datetime.datetime: _render_datetime,
        datetime.date: _render_date,
        decimal.Decimal: _render_decimal,
        bytes: _render_bytes,
        enum.Enum: _render_enum,
        bool: _render_passthrough,
        str: _render_passthrough,
        int: _render_passthrough,
        float: _render_passthrough,
        None.__class__: _render_passthrough,
    }

    def render_scalar(self, ctx: ReprRendererContext, value: typing.Any) -> JSONScalar:
        """
        Formats a leaf value to its canonical wire representation.
        """
        # fast pass
        r = self._supported_types.get(type(value))
        if r is not None:
            return r(self, ctx, value)

        for type_, r in self._supported_types.items():
            if isinstance(value, type_):
                return r(self, ctx, value)

        raise TypeError(f"{ctx.path}: unsupported type {value!r}")

    def render_value(self, ctx: ReprRendererContext, value: typing.Any) -> JSONValue:
        """
        Formats every leaf of a tree made of mappings, sequences and scalars.
        """
        if isinstance(value, collections.abc.Mapping):
            return self._dict_factory(
                (k, self.render_value(ctx / k, v)) for k, v in value.items()
            )
        elif isinstance(value, (list, tuple)):
            return [self.render_value(ctx[i], v) for i, v in enumerate(value)]
        else:
            return self.render_scalar(ctx, value)

    def render_link(self, ctx: ReprRendererContext, repr_: LinkRepr) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory((("href", repr_.href),))
        if repr_.templated is not None:
            retval["templated"] = repr_.templated
        if repr_.deprecation is not None:
            retval["deprecation"] = repr_.deprecation
        if repr_.type is not None:
            retval["type"] = repr_.type
        if repr_.name is not None:
            retval["name"] = repr_.name
        if repr_.profile is not None:
            retval["profile"] = repr_.profile
        if repr_.title is not None:
            retval["title"] = repr_.title
        if repr_.hreflang is not None:
            retval["hreflang"] = repr_.hreflang
        return retval

    def _render_relationship(
        self, ctx: ReprRendererContext, repr_: LinkageRepr
    ) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        if repr_.links:
            retval["links"] = self._render_links((ctx / "links") | repr_, repr_.links)
        if isinstance(repr_.data, ResourceIdRepr):
            retval["data"] = self._render_resource_link((ctx / "data") | repr_, repr_.data)
        elif repr_.data is not None:
            retval["data"] = [
                self._render_resource_link((ctx / "data")[i] | repr_, item)
                for i, item in enumerate(repr_.data)
            ]
        else:
            retval["data"] = None
        if repr_.meta:
            retval["meta"] = repr_.meta
        return retval

    def _render_resource_link(
        self, ctx: ReprRendererContext, repr_: ResourceIdRepr
    ) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory((("type", repr_.type), ("id", repr_.id)))
        if repr_.meta:
            retval["meta"] = repr_.meta
        return retval

    def _render_resource(self, ctx: ReprRendererContext, repr_: ResourceRepr) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory((("type", repr_.type),))
        if repr_.id is not None:
            retval["id"] = repr_.id
        if repr_.attributes:
            new_ctx = (ctx / "attributes") | repr_
            retval["attributes"] = self._dict_factory(
                (k, self.render_value(new_ctx / k, v)) for k, v in repr_.attributes.items()
            )
        if repr_.relationships:
            new_ctx = (ctx / "relationships") | repr_
            retval["relationships"] = self._dict_factory(
                (k, self._render_relationship(new_ctx / k, v))
                for k, v in repr_.relationships.items()
            )
        if repr_.links:
            retval["links"] = self._render_links((ctx / "links") | repr_, repr_.links)
        if repr_.meta:
            retval["meta"] = repr_.meta
        return retval

    def _render_links(self, ctx: ReprRendererContext, repr_: LinksRepr) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        if repr_.self_ is not None:
            retval["self"] = repr_.self_
        if repr_.related is not None:
            retval["related"] = repr_.related
        if repr_.first is not None:
            retval["first"] = repr_.first
        if repr_.last is not None:
            retval["last"] = repr_.last
        if repr_.prev is not None:
            retval["prev"] = repr_.prev
        if repr_.next is not None:
            retval["next"] = repr_.next
        for k, v in repr_.others.items():
            retval.setdefault(k, v)
        return retval

    def _render_source(self, ctx: ReprRendererContext, repr_: SourceRepr) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        if repr_.pointer is not None:
            retval["pointer"] = repr_.pointer
        if repr_.parameter is not None:
            retval["parameter"] = repr_.parameter
        return retval

    def render_error(self, ctx: ReprRendererContext, repr_: ErrorRepr) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        if repr_.status is not None:
            retval["status"] = repr_.status
        if repr_.code is not None:
            retval["code"] = repr_.code
        if repr_.title is not None:
            retval["title"] = repr_.title
        if repr_.detail is not None:
            retval["detail"] = repr_.detail
        if repr_.source is not None:
            retval["source"] = self._render_source((ctx / "source") | repr_, repr_.source)
        if repr_.meta:
            retval["meta"] = repr_.meta
        return retval

    def _populate_document_common(
        self, target: MutableJSONObject, ctx: ReprRendererContext, repr_: DocumentReprBase
    ) -> None:
        if repr_.jsonapi:
            target["jsonapi"] = repr_.jsonapi
        if repr_.links:
            target["links"] = self._render_links((ctx / "links") | repr_, repr_.links)
        if repr_.errors:
            new_ctx = (ctx / "errors") | repr_
            target["errors"] = [
                self.render_error(new_ctx[i], e) for i, e in enumerate(repr_.errors)
            ]
        if repr_.meta:
            target["meta"] = repr_.meta

    def _populate_included(
        self, target: MutableJSONObject, ctx: ReprRendererContext, repr_: DocumentReprBase
    ) -> None:
        if repr_.included:
            new_ctx = (ctx / "included") | repr_
            target["included"] = [
                self._render_resource(new_ctx[i], r) for i, r in enumerate(repr_.included)
            ]

    def _render_singleton_document(
        self, ctx: ReprRendererContext, repr_: SingletonDocumentRepr
    ) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        self._populate_document_common(retval, ctx, repr_)
        retval["data"] = (
            self._render_resource((ctx / "data") | repr_, repr_.data)
            if repr_.data is not None
            else None
        )
        self._populate_included(retval, ctx, repr_)
        return retval

    def _render_collection_document(
        self, ctx: ReprRendererContext, repr_: CollectionDocumentRepr
    ) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        self._populate_document_common(retval, ctx, repr_)
        retval["data"] = [
            self._render_resource((ctx / "data")[i] | repr_, item)
            for i, item in enumerate(repr_.data)
        ]
        self._populate_included(retval, ctx, repr_)
        return retval

    def __call__(
        self,
        repr_: typing.Union[SingletonDocumentRepr, CollectionDocumentRepr, ErrorDocumentRepr],
    ) -> MutableJSONObject:
        ctx = ReprRendererContext(None)
        if isinstance(repr_, SingletonDocumentRepr):
            return self._render_singleton_document(ctx, repr_)
        elif isinstance(repr_, CollectionDocumentRepr):
            return self._render_collection_document(ctx, repr_)
        elif isinstance(repr_, ErrorDocumentRepr):
            retval: MutableJSONObject = self._dict_factory(())
            self._populate_document_common(retval, ctx, repr_)
            return retval
        else:
            raise AssertionError("never get here")

    def __init__(
        self,
        render_decimal_as_str: bool = True,
        assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None,
    ):
        self._render_decimal_as_str = render_decimal_as_str
        self._assume_naive_timezone_as = assume_naive_timezone_as
