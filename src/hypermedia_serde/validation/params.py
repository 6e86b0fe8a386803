"""
Parsed forms of the ``fields``, ``include`` and ``sort`` query parameters.

.. code-block:: python

   Fields.from_query({"widgets": "name,color"})
   Included.from_query("owner,owner.company")  # {"owner": ("company",)}
   Sorting.from_query("-name,id")

"""

import collections.abc
import dataclasses
import typing
from collections import OrderedDict

FIELDS_PARAMETER = "fields"
INCLUDE_PARAMETER = "include"
SORT_PARAMETER = "sort"


def _split(value: typing.Union[str, typing.Iterable[str]]) -> typing.List[str]:
    if isinstance(value, str):
        value = value.split(",")
    return [v.strip() for v in value if v.strip()]


class Fields:
    """
    Sparse fieldsets: the public member names requested per resource type alias.
    """

    _fields: "OrderedDict[str, typing.Tuple[str, ...]]"

    @classmethod
    def from_query(
        cls, query: typing.Mapping[str, typing.Union[str, typing.Iterable[str]]]
    ) -> "Fields":
        """
        :param query: a mapping of resource type to a comma-separated member list,
                      as found in ``fields[<type>]=a,b`` query parameters.
        """
        return cls((type_, _split(members)) for type_, members in query.items())

    def get(self, type_: str) -> typing.Optional[typing.Tuple[str, ...]]:
        return self._fields.get(type_)

    def items(self) -> typing.ItemsView[str, typing.Tuple[str, ...]]:
        return self._fields.items()

    def __contains__(self, type_: object) -> bool:
        return type_ in self._fields

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Fields) and self._fields == other._fields

    def __repr__(self) -> str:
        return f"Fields({dict(self._fields)!r})"

    def __init__(
        self,
        fields: typing.Union[
            typing.Mapping[str, typing.Iterable[str]],
            typing.Iterable[typing.Tuple[str, typing.Iterable[str]]],
        ] = (),
    ):
        pairs = fields.items() if isinstance(fields, collections.abc.Mapping) else fields
        self._fields = OrderedDict((k, tuple(v)) for k, v in pairs)


class Included:
    """
    Include paths, one nesting level deep: each top-level resource name maps to
    the names of the sub-resources requested under it.
    """

    _paths: "OrderedDict[str, typing.Tuple[str, ...]]"

    @classmethod
    def from_query(cls, query: typing.Union[str, typing.Iterable[str]]) -> "Included":
        paths: "OrderedDict[str, typing.List[str]]" = OrderedDict()
        for path in _split(query):
            head, _, rest = path.partition(".")
            nested = paths.setdefault(head, [])
            if rest and rest not in nested:
                nested.append(rest)
        return cls(paths)

    def nested(self, name: str) -> typing.Tuple[str, ...]:
        return self._paths.get(name, ())

    def items(self) -> typing.ItemsView[str, typing.Tuple[str, ...]]:
        return self._paths.items()

    def __contains__(self, name: object) -> bool:
        return name in self._paths

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Included) and self._paths == other._paths

    def __repr__(self) -> str:
        return f"Included({dict(self._paths)!r})"

    def __init__(self, paths: typing.Optional[typing.Mapping[str, typing.Iterable[str]]] = None):
        self._paths = OrderedDict((k, tuple(v)) for k, v in (paths or {}).items())


@dataclasses.dataclass(frozen=True)
class SortField:
    name: str
    descending: bool = False


class Sorting:
    """
    Sort fields, in order of precedence. A leading ``-`` in the query means descending.
    """

    _fields: typing.Tuple[SortField, ...]

    @classmethod
    def from_query(cls, query: typing.Union[str, typing.Iterable[str]]) -> "Sorting":
        return cls(
            SortField(name=f[1:], descending=True) if f.startswith("-") else SortField(name=f)
            for f in _split(query)
        )

    @property
    def names(self) -> typing.Sequence[str]:
        return tuple(f.name for f in self._fields)

    def __iter__(self) -> typing.Iterator[SortField]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Sorting) and self._fields == other._fields

    def __repr__(self) -> str:
        return f"Sorting({list(self._fields)!r})"

    def __init__(self, fields: typing.Iterable[SortField] = ()):
        self._fields = tuple(fields)
