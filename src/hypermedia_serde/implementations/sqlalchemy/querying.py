import typing

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ...errors import ErrorBag, InvalidSort
from ...exceptions import QueryError
from ...mapping import Mapping
from ...validation.params import Sorting


def build_order_by(
    model: typing.Type, mapping: Mapping, sorting: Sorting
) -> typing.List[sa.sql.ClauseElement]:
    """
    Translates sort fields into ``ORDER BY`` expressions on the columns of ``model``.
    Public names are translated to internal names through ``mapping``.

    .. code-block:: python

       session.query(Widget).order_by(
           *build_order_by(Widget, mapping, Sorting.from_query("-name,id"))
       )

    :raises QueryError: if a field is not a column attribute of the model.
    """
    sa_mapper: orm.Mapper = sa.inspect(model)
    column_attrs = sa_mapper.column_attrs
    clauses: typing.List[sa.sql.ClauseElement] = []
    errors = ErrorBag()
    for field in sorting:
        name = mapping.internal_name(field.name)
        if name not in column_attrs:
            errors.append(InvalidSort(field.name))
            continue
        attr = getattr(model, name)
        clauses.append(attr.desc() if field.descending else attr.asc())
    if errors:
        raise QueryError(errors)
    return clauses
