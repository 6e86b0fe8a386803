"""
:py:mod:`hypermedia_serde.errors` contains the structured errors the request
validators record and the :py:class:`ErrorBag` that collects them.

Every rule of a validation pass returns a list of :py:class:`Error`; the
caller merges them into a bag and decides pass or fail only once the whole
pass is over.
"""

import dataclasses
import typing

from .serde.models import ErrorRepr, SourceRepr


@dataclasses.dataclass
class Error:
    """
    A single violated rule.

    :param str code: a machine-readable identifier of the kind of the error.
    :param str title: a short human-readable summary.
    :param str detail: a human-readable explanation specific to this occurrence.
    :param Optional[str] source_member: a JSON pointer into the request document,
                                        or the name of the offending query parameter.
    """

    code: str
    title: str
    detail: str
    source_member: typing.Optional[str] = None

    @property
    def source_is_parameter(self) -> bool:
        return self.source_member is not None and not self.source_member.startswith("/")

    def to_repr(self, status: typing.Optional[str] = None) -> ErrorRepr:
        source: typing.Optional[SourceRepr] = None
        if self.source_member is not None:
            if self.source_is_parameter:
                source = SourceRepr(parameter=self.source_member)
            else:
                source = SourceRepr(pointer=self.source_member)
        return ErrorRepr(
            status=status,
            code=self.code,
            title=self.title,
            detail=self.detail,
            source=source,
        )


@dataclasses.dataclass(init=False)
class MissingAttribute(Error):
    attribute: str = ""

    def __init__(self, attribute: str, pointer: typing.Optional[str] = None):
        super().__init__(
            code="missing_attribute",
            title="Missing Attribute",
            detail=f"Attribute `{attribute}` is missing.",
            source_member=(f"/data/attributes/{attribute}" if pointer is None else pointer),
        )
        self.attribute = attribute


@dataclasses.dataclass(init=False)
class MissingType(Error):
    def __init__(self, pointer: str = "/data/type"):
        super().__init__(
            code="missing_type",
            title="Missing `type` Key",
            detail="Missing `type` key in the resource.",
            source_member=pointer,
        )


@dataclasses.dataclass(init=False)
class MissingData(Error):
    def __init__(self, pointer: str = "/data"):
        super().__init__(
            code="missing_data",
            title="Missing `data` Member",
            detail=f"Missing `data` member at `{pointer}`.",
            source_member=pointer,
        )


@dataclasses.dataclass(init=False)
class InvalidType(Error):
    type: str = ""

    def __init__(
        self, type: str, pointer: str = "/data/type", expected: typing.Optional[str] = None
    ):
        if expected is None:
            detail = f"Resource type `{type}` is not supported."
        else:
            detail = f"Resource type `{type}` does not match the expected type `{expected}`."
        super().__init__(
            code="invalid_type",
            title="Invalid Type",
            detail=detail,
            source_member=pointer,
        )
        self.type = type


@dataclasses.dataclass(init=False)
class InvalidAttribute(Error):
    attribute: str = ""
    type: str = ""

    def __init__(self, attribute: str, type: str, pointer: typing.Optional[str] = None):
        super().__init__(
            code="invalid_attribute",
            title="Invalid Attribute",
            detail=f"Attribute `{attribute}` is not a member of resource type `{type}`.",
            source_member=(f"/data/attributes/{attribute}" if pointer is None else pointer),
        )
        self.attribute = attribute
        self.type = type


@dataclasses.dataclass(init=False)
class InvalidParameter(Error):
    value: str = ""

    def __init__(self, value: str, parameter: str):
        super().__init__(
            code="invalid_parameter",
            title="Invalid Parameter",
            detail=f"Resource type `{value}` given in parameter `{parameter}` is not known.",
            source_member=parameter,
        )
        self.value = value


@dataclasses.dataclass(init=False)
class InvalidParameterMember(Error):
    member: str = ""
    type: str = ""

    def __init__(self, member: str, type: str, parameter: str):
        super().__init__(
            code="invalid_parameter_member",
            title="Invalid Parameter Member",
            detail=(
                f"Member `{member}` given in parameter `{parameter}` "
                f"is not a member of resource type `{type}`."
            ),
            source_member=parameter,
        )
        self.member = member
        self.type = type


@dataclasses.dataclass(init=False)
class InvalidSort(Error):
    field: str = ""

    def __init__(self, field: str, parameter: str = "sort"):
        super().__init__(
            code="invalid_sort",
            title="Invalid Sort",
            detail=f"Field `{field}` cannot be used for sorting.",
            source_member=parameter,
        )
        self.field = field


@dataclasses.dataclass(init=False)
class MalformedDocument(Error):
    def __init__(self, detail: str, pointer: typing.Optional[str] = None):
        super().__init__(
            code="malformed_document",
            title="Malformed Document",
            detail=detail,
            source_member=pointer,
        )


@dataclasses.dataclass(init=False)
class BadRequest(Error):
    def __init__(self):
        super().__init__(
            code="bad_request",
            title="Bad Request",
            detail="Request could not be served.",
        )


class ErrorBag:
    """
    An ordered collection of :py:class:`Error`. Entries are never de-duplicated.
    """

    _errors: typing.List[Error]

    def append(self, error: Error) -> None:
        self._errors.append(error)

    def extend(self, errors: typing.Iterable[Error]) -> None:
        self._errors.extend(errors)

    def to_reprs(self, status: typing.Optional[str] = None) -> typing.List[ErrorRepr]:
        return [e.to_repr(status) for e in self._errors]

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> typing.Iterator[Error]:
        return iter(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __getitem__(self, index: int) -> Error:
        return self._errors[index]

    def __repr__(self) -> str:
        return f"ErrorBag({self._errors!r})"

    def __init__(self, errors: typing.Iterable[Error] = ()):
        self._errors = list(errors)
