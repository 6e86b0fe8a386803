import abc
import typing
from collections import OrderedDict

from .models import (
    CollectionDocumentRepr,
    LinkageRepr,
    LinksRepr,
    Repr,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)


class ReprBuilder(metaclass=abc.ABCMeta):
    parent: typing.Optional["ReprBuilder"] = None
    meta: typing.Dict[str, typing.Any]

    @abc.abstractmethod
    def __call__(self) -> Repr:
        ...  # pragma: nocover

    def __init__(self, parent: typing.Optional["ReprBuilder"] = None):
        self.parent = parent
        self.meta = {}


class NodeReprBuilder(ReprBuilder):
    links: typing.Optional[LinksRepr] = None

    def __init__(self, parent: typing.Optional["ReprBuilder"] = None):
        super().__init__(parent)
        self.links = None


class LinkageReprBuilder(NodeReprBuilder, metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def __call__(self) -> LinkageRepr:
        ...  # pragma: nocover


class ToManyRelReprBuilder(LinkageReprBuilder):
    data: typing.List[ResourceIdRepr]

    def add(self, type: str, id: str) -> None:
        self.data.append(ResourceIdRepr(type=type, id=id))

    def __call__(self) -> LinkageRepr:
        return LinkageRepr(
            data=tuple(self.data),
            links=self.links,
            meta=self.meta,
        )

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.data = []


class ToOneRelReprBuilder(LinkageReprBuilder):
    data: typing.Optional[ResourceIdRepr]

    def set(self, type: str, id: str) -> None:
        self.data = ResourceIdRepr(type=type, id=id)

    def __call__(self) -> LinkageRepr:
        return LinkageRepr(
            data=self.data,
            links=self.links,
            meta=self.meta,
        )

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.data = None


class ResourceReprBuilder(NodeReprBuilder):
    type: typing.Optional[str] = None
    id: typing.Optional[str] = None
    attributes: "OrderedDict[str, typing.Any]"
    relationships: "OrderedDict[str, LinkageReprBuilder]"

    def add_attribute(self, name: str, value: typing.Any) -> None:
        self.attributes[name] = value

    def next_to_many_relationship(self, name: str) -> ToManyRelReprBuilder:
        rel = self.relationships.get(name)
        if rel is not None:
            if not isinstance(rel, ToManyRelReprBuilder):
                raise TypeError("specified relationship is not a to-many relationship")
        else:
            self.relationships[name] = rel = ToManyRelReprBuilder(self)
        return typing.cast(ToManyRelReprBuilder, rel)

    def next_to_one_relationship(self, name: str) -> ToOneRelReprBuilder:
        rel = self.relationships.get(name)
        if rel is not None:
            if not isinstance(rel, ToOneRelReprBuilder):
                raise TypeError("specified relationship is not a to-one relationship")
        else:
            self.relationships[name] = rel = ToOneRelReprBuilder(self)
        return typing.cast(ToOneRelReprBuilder, rel)

    def __call__(self) -> ResourceRepr:
        assert self.type is not None
        return ResourceRepr(
            type=self.type,
            id=self.id,
            links=self.links,
            meta=self.meta,
            attributes=tuple(self.attributes.items()),
            relationships=tuple((k, v()) for k, v in self.relationships.items()),
        )

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.attributes = OrderedDict()
        self.relationships = OrderedDict()


class DocumentBuilder(NodeReprBuilder, metaclass=abc.ABCMeta):
    jsonapi: typing.Dict[str, typing.Any]
    included: "OrderedDict[typing.Tuple[str, typing.Optional[str]], ResourceReprBuilder]"

    def next_included(self, type: str, id: typing.Optional[str]) -> typing.Optional[ResourceReprBuilder]:
        """
        Returns a new builder for an included resource, or :py:const:`None` if a resource
        with the same type and id has already been included.
        """
        key = (type, id)
        if key in self.included:
            return None
        b = ResourceReprBuilder(self)
        b.type = type
        b.id = id
        self.included[key] = b
        return b

    def __init__(self):
        super().__init__(None)
        self.jsonapi = {}
        self.included = OrderedDict()


class CollectionDocumentBuilder(DocumentBuilder):
    data: typing.List[ResourceReprBuilder]

    def next(self) -> ResourceReprBuilder:
        builder = ResourceReprBuilder(self)
        self.data.append(builder)
        return builder

    def __call__(self) -> CollectionDocumentRepr:
        return CollectionDocumentRepr(
            data=tuple(b() for b in self.data),
            jsonapi=self.jsonapi,
            links=self.links,
            meta=self.meta,
            included=tuple(r() for r in self.included.values()),
        )

    def __init__(self):
        super().__init__()
        self.data = []


class SingletonDocumentBuilder(DocumentBuilder):
    data: ResourceReprBuilder

    def __call__(self) -> SingletonDocumentRepr:
        return SingletonDocumentRepr(
            data=self.data(),
            jsonapi=self.jsonapi,
            links=self.links,
            meta=self.meta,
            included=tuple(r() for r in self.included.values()),
        )

    def __init__(self):
        super().__init__()
        self.data = ResourceReprBuilder(self)
