"""
Classes in :py:mod:`hypermedia_serde.serde.models` are abstract representations of
document elements: HAL link objects and JSON:API document nodes.
"""

import dataclasses
import typing
from collections import OrderedDict


@dataclasses.dataclass
class Repr:
    """
    The base class for any model objects.
    """


@dataclasses.dataclass
class LinkRepr(Repr):
    """
    :py:class:`LinkRepr` represents a `HAL link object <https://tools.ietf.org/html/draft-kelly-json-hal-08#section-5>`_.
    Only ``href`` is mandatory.
    """

    href: str
    templated: typing.Optional[bool] = None
    deprecation: typing.Optional[str] = None
    type: typing.Optional[str] = None
    name: typing.Optional[str] = None
    profile: typing.Optional[str] = None
    title: typing.Optional[str] = None
    hreflang: typing.Optional[str] = None


@dataclasses.dataclass
class LinksRepr(Repr):
    """
    :py:class:`LinksRepr` class represents a ``links`` node of JSON:API.

    Ref.

    * `Document Links <https://jsonapi.org/format/#document-links>`_
    * `Related Resource Links <https://jsonapi.org/format/#document-resource-object-related-resource-links>`_
    """

    self_: typing.Optional[str] = None
    related: typing.Optional[str] = None
    first: typing.Optional[str] = None
    last: typing.Optional[str] = None
    prev: typing.Optional[str] = None
    next: typing.Optional[str] = None
    others: typing.Dict[str, str] = dataclasses.field(default_factory=OrderedDict)

    def __bool__(self):
        return any(
            v is not None
            for v in (self.self_, self.related, self.first, self.last, self.prev, self.next)
        ) or bool(self.others)


@dataclasses.dataclass(init=False)
class MetaContainerRepr(Repr):
    """
    :py:class:`MetaContainerRepr` is an abstract base for classes containing ``meta`` node.
    """

    meta: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)

    def __init__(self, *, meta: typing.Optional[typing.Dict[str, typing.Any]] = None):
        """
        :param Optional[Dict[str. Any]] meta: a dictionary containing user-defined information.
        """
        self.meta = meta if meta is not None else {}


@dataclasses.dataclass(init=False)
class NodeRepr(MetaContainerRepr):
    """
    :py:class:`NodeRepr` is an abstract base for classes containing ``links`` node.
    """

    links: typing.Optional[LinksRepr] = None

    def __init__(
        self,
        *,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        super().__init__(meta=meta)
        self.links = links


@dataclasses.dataclass(init=False)
class ResourceIdRepr(MetaContainerRepr):
    """
    Instances of :py:class:`ResourceIdRepr` represent `Resource Identifier Objects <https://jsonapi.org/format/#document-resource-identifier-objects>`_
    """

    type: str  # type: ignore
    id: str  # type: ignore

    def __init__(
        self,
        *,
        type: str,
        id: str,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        super().__init__(meta=meta)
        self.type = type
        self.id = id


@dataclasses.dataclass(init=False)
class LinkageRepr(NodeRepr):
    """
    :py:class:`LinkageRepr` represents a `Resource Linkage <https://jsonapi.org/format/#document-resource-object-linkage>`_
    """

    data: typing.Union[None, ResourceIdRepr, typing.Sequence[ResourceIdRepr]] = None

    def __init__(
        self,
        *,
        data: typing.Union[None, ResourceIdRepr, typing.Sequence[ResourceIdRepr]],
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        super().__init__(links=links, meta=meta)
        self.data = data


@dataclasses.dataclass(init=False)
class ResourceRepr(NodeRepr):
    """
    :py:class:`ResourceRepr` class represents a `Resource Object <https://jsonapi.org/format/#document-resource-objects>`_.
    """

    type: str  # type: ignore
    id: typing.Optional[str]  # type: ignore
    attributes: typing.Mapping[str, typing.Any] = dataclasses.field(default_factory=OrderedDict)  # type: ignore
    relationships: typing.Mapping[str, LinkageRepr] = dataclasses.field(default_factory=OrderedDict)  # type: ignore

    @property
    def identity(self) -> typing.Tuple[str, typing.Optional[str]]:
        return (self.type, self.id)

    def __getitem__(self, name):
        return self.attributes[name]

    def __init__(
        self,
        *,
        type: str,
        id: typing.Optional[str],
        attributes: typing.Iterable[typing.Tuple[str, typing.Any]] = (),
        relationships: typing.Iterable[typing.Tuple[str, LinkageRepr]] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        """
        :param str type: a value for ``type`` property.
        :param Optional[str] id: a value for ``id`` property.
        :param Iterable[Tuple[str, Any]] attributes: key-value pairs of the attributes.
        :param Iterable[Tuple[str, LinkageRepr]] relationships: key-value pairs of the relationships.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Dict[str, Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(links=links, meta=meta)
        self.type = type
        self.id = id
        self.attributes = OrderedDict(attributes)
        self.relationships = OrderedDict(relationships)


@dataclasses.dataclass(init=False)
class SourceRepr(Repr):
    """
    :py:class:`SourceRepr` represents a value for the ``source`` property of an `Error Object <https://jsonapi.org/format/#error-objects>`_.
    """

    pointer: typing.Optional[str] = None
    parameter: typing.Optional[str] = None

    def __init__(
        self,
        pointer: typing.Optional[str] = None,
        parameter: typing.Optional[str] = None,
    ):
        self.pointer = pointer
        self.parameter = parameter


@dataclasses.dataclass
class ErrorRepr(Repr):
    status: typing.Optional[str] = None
    code: typing.Optional[str] = None
    title: typing.Optional[str] = None
    detail: typing.Optional[str] = None
    source: typing.Optional[SourceRepr] = None
    meta: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)


class MissingType:
    def __bool__(self):
        return False

    def __init__(self):
        raise TypeError("Not directly instantiable")


Missing = object.__new__(MissingType)


@dataclasses.dataclass(init=False)
class DocumentReprBase(NodeRepr):
    jsonapi: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)
    errors: typing.Sequence[ErrorRepr] = ()
    included: typing.Sequence[ResourceRepr] = ()

    def __init__(
        self,
        *,
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        errors: typing.Optional[typing.Sequence[ErrorRepr]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        super().__init__(links=links, meta=meta)
        self.jsonapi = jsonapi if jsonapi is not None else {}
        self.errors = errors or ()
        self.included = included


@dataclasses.dataclass(init=False)
class SingletonDocumentRepr(DocumentReprBase):
    data: typing.Optional[ResourceRepr] = None

    def __init__(
        self,
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        errors: typing.Optional[typing.Sequence[ErrorRepr]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        data: typing.Union[ResourceRepr, None, MissingType] = Missing,
    ):
        """
        Either errors, meta, or data must take a non-None value.
        """
        if data is Missing and errors is None and meta is None:
            raise ValueError("either data, errors, or meta must be specified")
        super().__init__(
            jsonapi=jsonapi,
            errors=errors,
            included=included,
            links=links,
            meta=meta,
        )
        self.data = (
            typing.cast(typing.Optional[ResourceRepr], data) if data is not Missing else None
        )


@dataclasses.dataclass(init=False)
class CollectionDocumentRepr(DocumentReprBase):
    data: typing.Sequence[ResourceRepr] = ()

    def __init__(
        self,
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        errors: typing.Optional[typing.Sequence[ErrorRepr]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        data: typing.Optional[typing.Sequence[ResourceRepr]] = None,
    ):
        """
        Either errors, meta, or data must take a non-None value.
        """
        if data is None and errors is None and meta is None:
            raise ValueError("either data, errors, or meta must be specified")
        super().__init__(
            jsonapi=jsonapi,
            errors=errors,
            included=included,
            links=links,
            meta=meta,
        )
        self.data = data or ()


@dataclasses.dataclass(init=False)
class ErrorDocumentRepr(DocumentReprBase):
    """
    :py:class:`ErrorDocumentRepr` represents a top-level document carrying only ``errors``.
    """

    def __init__(
        self,
        errors: typing.Sequence[ErrorRepr],
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        super().__init__(errors=errors, meta=meta)
