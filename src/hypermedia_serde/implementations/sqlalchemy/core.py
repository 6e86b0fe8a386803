"""
:py:mod:`hypermedia_serde.implementations.sqlalchemy.core` derives mappings from
SQLAlchemy declarative models.

Synopsis
--------

.. code-block:: python

   import sqlalchemy as sa
   from sqlalchemy import orm
   from hypermedia_serde.implementations.sqlalchemy import SQLADeclarative

   Base = orm.declarative_base()
   decl = SQLADeclarative()

   @decl
   class Widget(Base):
       __tablename__ = "widgets"

       id = sa.Column(sa.Integer(), primary_key=True, nullable=False)
       name = sa.Column(sa.String(), nullable=False)
       color = sa.Column(sa.String(), nullable=True)

   registry = decl.configure()

"""

import typing

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ...declarative import Declarative, default_resource_url
from ...mapping import Mapping
from ...serde.utils import underscore
from ...utils.types import UNSPECIFIED, UnspecifiedType


def _sa_mapper(model: typing.Type) -> orm.Mapper:
    return sa.inspect(model)


def extract_properties(sa_mapper: orm.Mapper) -> typing.List[str]:
    """
    Returns the keys of the column attributes and relationships of the model.
    """
    return [
        p.key
        for p in sa_mapper.attrs
        if isinstance(p, (orm.ColumnProperty, orm.RelationshipProperty))
    ]


def extract_id_properties(sa_mapper: orm.Mapper) -> typing.List[str]:
    """
    Returns the keys of the attributes mapped to the primary key columns.
    """
    return [sa_mapper.get_property_by_column(c).key for c in sa_mapper.primary_key]


def _is_required_column(column: typing.Any) -> bool:
    return (
        isinstance(column, sa.Column)
        and not column.nullable
        and not column.primary_key
        and column.default is None
        and column.server_default is None
    )


def extract_required_properties(sa_mapper: orm.Mapper) -> typing.List[str]:
    """
    Returns the keys of the attributes a new row cannot do without: those
    mapped to non-nullable, non-key columns with no default.
    """
    pkey_cols = set(sa_mapper.primary_key)
    return [
        p.key
        for p in sa_mapper.attrs
        if isinstance(p, orm.ColumnProperty)
        and not any(c in pkey_cols for c in p.columns)
        and all(_is_required_column(c) for c in p.columns)
    ]


def default_alias(model: typing.Type) -> str:
    return getattr(model, "__tablename__", None) or underscore(model.__name__)


def mapping_from_model(
    model: typing.Type,
    alias: typing.Optional[str] = None,
    aliased_properties: typing.Optional[typing.Mapping[str, str]] = None,
    hidden_properties: typing.Iterable[str] = (),
    resource_url: typing.Union[UnspecifiedType, None, str] = UNSPECIFIED,
    urls: typing.Optional[typing.Mapping[str, str]] = None,
    class_name: typing.Optional[str] = None,
) -> Mapping:
    """
    Builds a :py:class:`~hypermedia_serde.mapping.Mapping` from a declarative model.

    :param type model: the SQLAlchemy-instrumented class.
    :param Optional[str] alias: the public type name; the table name if not given.
    :param Optional[Mapping[str, str]] aliased_properties: internal to public renames.
    :param Iterable[str] hidden_properties: the properties never exposed.
    :param resource_url: the resource URL template; derived from the alias and the
                         primary key if not given, none if :py:const:`None`.
    :param Optional[Mapping[str, str]] urls: extra link templates.
    :param Optional[str] class_name: the class identifier; the class name if not given.
    """
    sa_mapper = _sa_mapper(model)
    alias = alias if alias is not None else default_alias(model)
    id_properties = extract_id_properties(sa_mapper)
    return Mapping(
        alias=alias,
        class_name=class_name if class_name is not None else model.__name__,
        properties=extract_properties(sa_mapper),
        aliased_properties=aliased_properties,
        id_properties=id_properties,
        required_properties=extract_required_properties(sa_mapper),
        hidden_properties=hidden_properties,
        resource_url_template=(
            default_resource_url(alias, id_properties)
            if isinstance(resource_url, UnspecifiedType)
            else resource_url
        ),
        additional_url_templates=urls,
    )


class SQLADeclarative(Declarative):
    """
    A :py:class:`~hypermedia_serde.declarative.Declarative` that introspects
    SQLAlchemy models: properties come from the column attributes and the
    relationships, id properties from the primary key, required properties from
    the non-nullable columns without defaults, and the alias from the table name.
    """

    def default_alias(self, class_: typing.Type) -> str:
        return default_alias(class_)

    def extract_properties(self, class_: typing.Type) -> typing.Sequence[str]:
        return extract_properties(_sa_mapper(class_))

    def extract_id_properties(
        self, class_: typing.Type, properties: typing.Sequence[str]
    ) -> typing.Sequence[str]:
        return [p for p in extract_id_properties(_sa_mapper(class_)) if p in properties]

    def extract_required_properties(
        self, class_: typing.Type, properties: typing.Sequence[str]
    ) -> typing.Sequence[str]:
        return [p for p in extract_required_properties(_sa_mapper(class_)) if p in properties]
