"""
:py:mod:`hypermedia_serde.declarative` builds mappings from static configuration.

From plain dictionaries, as loaded from a configuration file:

.. code-block:: python

   registry = registry_from_config(
       {
           "Widget": {
               "alias": "widgets",
               "properties": ["id", "name", "owner"],
               "id_properties": ["id"],
               "resource_url": "/widgets/{id}",
           },
       }
   )

Or from the classes themselves:

.. code-block:: python

   decl = Declarative()

   @decl
   @dataclasses.dataclass
   class Widget:
       id: str
       name: str
       internal_code: str

       class Meta:
           alias = "widgets"
           hidden_properties = ["internal_code"]

   registry = decl.configure()

"""

import collections.abc
import dataclasses
import typing

from .exceptions import InvalidDeclarationError
from .mapping import Mapping, MappingRegistry
from .serde.utils import underscore
from .utils.types import UNSPECIFIED, UnspecifiedType

T = typing.TypeVar("T")

_LIST_KEYS = ("properties", "id_properties", "required_properties", "hidden_properties")
_DICT_KEYS = ("aliased_properties", "urls")
_STR_KEYS = ("alias", "resource_url")
CONFIG_KEYS = frozenset(_LIST_KEYS + _DICT_KEYS + _STR_KEYS)


def _check_config(class_name: str, config: typing.Mapping[str, typing.Any]) -> None:
    for key, value in config.items():
        if key not in CONFIG_KEYS:
            raise InvalidDeclarationError(f'unknown key "{key}" in the mapping of "{class_name}"')
        if key in _STR_KEYS:
            ok = isinstance(value, str) or (key == "resource_url" and value is None)
        elif key in _LIST_KEYS:
            ok = (
                isinstance(value, collections.abc.Iterable)
                and not isinstance(value, (str, collections.abc.Mapping))
                and all(isinstance(v, str) for v in value)
            )
        else:
            ok = isinstance(value, collections.abc.Mapping) and all(
                isinstance(k, str) and isinstance(v, str) for k, v in value.items()
            )
        if not ok:
            raise InvalidDeclarationError(
                f'invalid value {value!r} for key "{key}" in the mapping of "{class_name}"'
            )


def mapping_from_config(class_name: str, config: typing.Mapping[str, typing.Any]) -> Mapping:
    """
    Builds a :py:class:`~hypermedia_serde.mapping.Mapping` from a plain dictionary.

    :param str class_name: the class name the serializer tags the objects with.
    :param Mapping[str, Any] config: the mapping options. ``alias`` and ``properties``
                                     are mandatory.
    :raises InvalidDeclarationError: if a key is unknown or a value is malformed.
    """
    _check_config(class_name, config)
    for key in ("alias", "properties"):
        if key not in config:
            raise InvalidDeclarationError(f'no "{key}" in the mapping of "{class_name}"')
    return Mapping(
        alias=config["alias"],
        class_name=class_name,
        properties=config["properties"],
        aliased_properties=config.get("aliased_properties"),
        id_properties=config.get("id_properties", ()),
        required_properties=config.get("required_properties", ()),
        hidden_properties=config.get("hidden_properties", ()),
        resource_url_template=config.get("resource_url"),
        additional_url_templates=config.get("urls"),
    )


def registry_from_config(
    config: typing.Mapping[str, typing.Mapping[str, typing.Any]]
) -> MappingRegistry:
    """
    Builds a :py:class:`~hypermedia_serde.mapping.MappingRegistry` from a dictionary
    of mapping options keyed by class name.
    """
    return MappingRegistry(
        mapping_from_config(class_name, c) for class_name, c in config.items()
    )


@dataclasses.dataclass
class Meta:
    class_name: typing.Union[UnspecifiedType, str] = UNSPECIFIED
    alias: typing.Union[UnspecifiedType, str] = UNSPECIFIED
    properties: typing.Union[UnspecifiedType, typing.Sequence[str]] = UNSPECIFIED
    aliased_properties: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    id_properties: typing.Union[UnspecifiedType, typing.Sequence[str]] = UNSPECIFIED
    required_properties: typing.Sequence[str] = ()
    hidden_properties: typing.Sequence[str] = ()
    resource_url: typing.Union[UnspecifiedType, None, str] = UNSPECIFIED
    urls: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)


META_OPTIONS = frozenset(f.name for f in dataclasses.fields(Meta))


def handle_meta(meta: typing.Type) -> Meta:
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    for k in attrs:
        if k not in META_OPTIONS:
            raise InvalidDeclarationError(f'unknown option "{k}" in {meta.__qualname__}')
    return Meta(**attrs)


def maybe_unspecified(maybe: typing.Union[UnspecifiedType, T], default: T) -> T:
    return default if isinstance(maybe, UnspecifiedType) else maybe


def default_resource_url(alias: str, id_properties: typing.Sequence[str]) -> typing.Optional[str]:
    """
    Returns ``/<alias>/{<id>}``, the id placeholders joined with ``/``, or
    :py:const:`None` when there is no id property.
    """
    if not id_properties:
        return None
    return f"/{alias}/" + "/".join("{" + p + "}" for p in id_properties)


class Declarative:
    """
    Collects classes through a class decorator and builds their mappings.
    Each class may carry an inner ``Meta`` class whose attributes are the
    fields of :py:class:`Meta`. Unless given, properties are taken from the
    fields of a dataclass or from the annotations of the class, the alias is
    the snake_cased class name, the id property is ``id`` when there is such
    a property, and the resource URL is derived from the alias and the id properties.
    """

    _classes: typing.List[typing.Type]
    _registry: typing.Optional[MappingRegistry] = None

    def default_alias(self, class_: typing.Type) -> str:
        return underscore(class_.__name__)

    def extract_properties(self, class_: typing.Type) -> typing.Sequence[str]:
        if dataclasses.is_dataclass(class_):
            return [f.name for f in dataclasses.fields(class_)]
        annotations = getattr(class_, "__annotations__", None)
        if annotations:
            return [k for k in annotations if not k.startswith("_")]
        raise InvalidDeclarationError(f"cannot tell the properties of {class_.__name__}")

    def extract_id_properties(
        self, class_: typing.Type, properties: typing.Sequence[str]
    ) -> typing.Sequence[str]:
        return ("id",) if "id" in properties else ()

    def build_mapping(self, class_: typing.Type) -> Mapping:
        meta_class = getattr(class_, "Meta", None)
        meta = handle_meta(meta_class) if meta_class is not None else Meta()
        class_name = maybe_unspecified(meta.class_name, class_.__name__)
        alias = maybe_unspecified(meta.alias, self.default_alias(class_))
        properties = maybe_unspecified(meta.properties, None)
        if properties is None:
            properties = self.extract_properties(class_)
        id_properties = maybe_unspecified(meta.id_properties, None)
        if id_properties is None:
            id_properties = self.extract_id_properties(class_, properties)
        required_properties = meta.required_properties
        if not required_properties:
            required_properties = self.extract_required_properties(class_, properties)
        return Mapping(
            alias=alias,
            class_name=class_name,
            properties=properties,
            aliased_properties=meta.aliased_properties,
            id_properties=id_properties,
            required_properties=required_properties,
            hidden_properties=meta.hidden_properties,
            resource_url_template=maybe_unspecified(
                meta.resource_url, default_resource_url(alias, id_properties)
            ),
            additional_url_templates=meta.urls,
        )

    def extract_required_properties(
        self, class_: typing.Type, properties: typing.Sequence[str]
    ) -> typing.Sequence[str]:
        """
        Returns an empty sequence, which makes every non-id property required.
        """
        return ()

    def configure(self) -> MappingRegistry:
        """
        Builds the mappings of every collected class. The registry is built once;
        later calls return the same one.
        """
        if self._registry is None:
            self._registry = MappingRegistry(self.build_mapping(c) for c in self._classes)
        return self._registry

    @property
    def registry(self) -> MappingRegistry:
        if self._registry is None:
            raise InvalidDeclarationError("configure() has not been called")
        return self._registry

    def __call__(self, class_: typing.Type[T]) -> typing.Type[T]:
        if self._registry is not None:
            raise InvalidDeclarationError(f"{class_.__name__} declared after configure()")
        self._classes.append(class_)
        return class_

    def __init__(self):
        self._classes = []
        self._registry = None
