"""
:py:mod:`hypermedia_serde.mapping` contains the per-resource-type schema
(:py:class:`Mapping`) and the read-only store of all schemas known to the
application (:py:class:`MappingRegistry`).

Both are built once at startup and never mutated afterwards, so a single
registry can be shared by every request.
"""

import re
import types
import typing
from collections import OrderedDict

from .exceptions import InvalidDeclarationError

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def placeholders(template: str) -> typing.Tuple[str, ...]:
    """
    Returns the names of the ``{property}`` placeholders found in ``template``,
    in order of appearance.
    """
    return tuple(m.group(1) for m in PLACEHOLDER_PATTERN.finditer(template))


class Mapping:
    """
    A :py:class:`Mapping` describes how a resource type is exposed.

    :param str alias: the public type name.
    :param str class_name: the name of the source class the serializer tags objects with.
    :param Iterable[str] properties: the internal property names, in order.
    :param Mapping[str, str] aliased_properties: internal name to public name renames.
    :param Iterable[str] id_properties: the properties identifying a resource.
    :param Iterable[str] required_properties: the properties required on creation;
                                              empty means every non-id property.
    :param Iterable[str] hidden_properties: the properties never exposed.
    :param Optional[str] resource_url_template: the template of the resource's own URL.
    :param Mapping[str, str] additional_url_templates: extra named link templates.
    """

    alias: str
    class_name: str
    _properties: typing.Tuple[str, ...]
    _aliased_properties: typing.Mapping[str, str]
    _reversed_aliases: typing.Mapping[str, str]
    _id_properties: typing.Tuple[str, ...]
    _required_properties: typing.Tuple[str, ...]
    _hidden_properties: typing.FrozenSet[str]
    resource_url_template: typing.Optional[str]
    _additional_url_templates: typing.Mapping[str, str]

    @property
    def properties(self) -> typing.Sequence[str]:
        return self._properties

    @property
    def aliased_properties(self) -> typing.Mapping[str, str]:
        return self._aliased_properties

    @property
    def id_properties(self) -> typing.Sequence[str]:
        return self._id_properties

    @property
    def required_properties(self) -> typing.Sequence[str]:
        return self._required_properties

    @property
    def hidden_properties(self) -> typing.AbstractSet[str]:
        return self._hidden_properties

    @property
    def additional_url_templates(self) -> typing.Mapping[str, str]:
        return self._additional_url_templates

    @property
    def public_properties(self) -> typing.Sequence[str]:
        """
        The public names of every property, in declaration order.
        """
        return tuple(self.public_name(p) for p in self._properties)

    @property
    def members(self) -> typing.AbstractSet[str]:
        """
        Every name a client may use to refer to a property: internal names and public aliases.
        """
        return frozenset(self._properties) | frozenset(self._aliased_properties.values())

    def public_name(self, name: str) -> str:
        return self._aliased_properties.get(name, name)

    def internal_name(self, public_name: str) -> str:
        return self._reversed_aliases.get(public_name, public_name)

    def is_id_property(self, name: str) -> bool:
        """
        Tells whether ``name``, either internal or public, designates an id property.
        """
        return name in self._id_properties or self.internal_name(name) in self._id_properties

    def required_public_names(self) -> typing.Sequence[str]:
        """
        Returns the public names of the attributes a creation request must supply.
        """
        required = self._required_properties or self._properties
        return tuple(
            self.public_name(p) for p in required if p not in self._id_properties
        )

    def __repr__(self) -> str:
        return f"Mapping(alias={self.alias!r}, class_name={self.class_name!r})"

    def _validate(self) -> None:
        known = set(self._properties)
        for label, names in (
            ("id property", self._id_properties),
            ("required property", self._required_properties),
            ("hidden property", self._hidden_properties),
            ("aliased property", self._aliased_properties.keys()),
        ):
            for name in names:
                if name not in known:
                    raise InvalidDeclarationError(
                        f'{label} "{name}" of "{self.alias}" is not one of its properties'
                    )
        if len(set(self._aliased_properties.values())) != len(self._aliased_properties):
            raise InvalidDeclarationError(f'aliases of "{self.alias}" are not unique')
        for name, public in self._aliased_properties.items():
            if public != name and public in known:
                raise InvalidDeclarationError(
                    f'alias "{public}" of "{self.alias}" clashes with a property of the same name'
                )
        templates: typing.List[typing.Tuple[str, str]] = []
        if self.resource_url_template is not None:
            templates.append(("resource URL", self.resource_url_template))
        templates.extend(self._additional_url_templates.items())
        for label, template in templates:
            for name in placeholders(template):
                if name not in self._id_properties:
                    raise InvalidDeclarationError(
                        f'placeholder "{{{name}}}" in the {label} template of "{self.alias}" '
                        f"does not name an id property"
                    )
        if self.resource_url_template is not None:
            missing = [
                name
                for name in self._id_properties
                if name not in placeholders(self.resource_url_template)
            ]
            if missing:
                raise InvalidDeclarationError(
                    f'the resource URL template of "{self.alias}" has no placeholder '
                    f"for id properties {', '.join(missing)}"
                )

    def __init__(
        self,
        alias: str,
        class_name: str,
        properties: typing.Iterable[str],
        aliased_properties: typing.Optional[typing.Mapping[str, str]] = None,
        id_properties: typing.Iterable[str] = (),
        required_properties: typing.Iterable[str] = (),
        hidden_properties: typing.Iterable[str] = (),
        resource_url_template: typing.Optional[str] = None,
        additional_url_templates: typing.Optional[typing.Mapping[str, str]] = None,
    ):
        if not alias:
            raise InvalidDeclarationError(f'no alias given for "{class_name}"')
        self.alias = alias
        self.class_name = class_name
        self._properties = tuple(OrderedDict.fromkeys(properties))
        self._aliased_properties = types.MappingProxyType(dict(aliased_properties or {}))
        self._reversed_aliases = types.MappingProxyType(
            {v: k for k, v in self._aliased_properties.items()}
        )
        self._id_properties = tuple(id_properties)
        self._required_properties = tuple(required_properties)
        self._hidden_properties = frozenset(hidden_properties)
        self.resource_url_template = resource_url_template
        self._additional_url_templates = types.MappingProxyType(
            OrderedDict(additional_url_templates or {})
        )
        self._validate()


class MappingRegistry:
    """
    The read-only store of every :py:class:`Mapping`, looked up by alias or by class name.
    Absent entries are reported as :py:const:`None`.
    """

    _by_alias: typing.Mapping[str, Mapping]
    _by_class_name: typing.Mapping[str, Mapping]

    def get_mapping_by_alias(self, alias: str) -> typing.Optional[Mapping]:
        return self._by_alias.get(alias)

    def get_mapping_by_class_name(self, class_name: str) -> typing.Optional[Mapping]:
        return self._by_class_name.get(class_name)

    def lookup(self, identifier: typing.Optional[str]) -> typing.Optional[Mapping]:
        """
        Resolves a class identifier emitted by the serializer, which may be
        either a class name or an alias.
        """
        if not identifier:
            return None
        mapping = self._by_class_name.get(identifier)
        if mapping is None:
            mapping = self._by_alias.get(identifier)
        return mapping

    def __iter__(self) -> typing.Iterator[Mapping]:
        return iter(self._by_alias.values())

    def __len__(self) -> int:
        return len(self._by_alias)

    def __contains__(self, alias: object) -> bool:
        return alias in self._by_alias

    def __init__(self, mappings: typing.Iterable[Mapping] = ()):
        by_alias: typing.Dict[str, Mapping] = OrderedDict()
        by_class_name: typing.Dict[str, Mapping] = OrderedDict()
        for mapping in mappings:
            if mapping.alias in by_alias:
                raise InvalidDeclarationError(f'alias "{mapping.alias}" is declared twice')
            if mapping.class_name in by_class_name:
                raise InvalidDeclarationError(
                    f'class "{mapping.class_name}" is declared twice'
                )
            by_alias[mapping.alias] = mapping
            by_class_name[mapping.class_name] = mapping
        self._by_alias = types.MappingProxyType(by_alias)
        self._by_class_name = types.MappingProxyType(by_class_name)
