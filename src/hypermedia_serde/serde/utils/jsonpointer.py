import typing


def _escape(component: str) -> str:
    return component.replace("~", "~0").replace("/", "~1")


def _unescape(component: str) -> str:
    return component.replace("~1", "/").replace("~0", "~")


class JSONPointer:
    """
    An immutable `RFC 6901 <https://tools.ietf.org/html/rfc6901>`_ JSON pointer.

    .. code-block:: python

       >>> str(JSONPointer("/data") / "attributes" / "name")
       '/data/attributes/name'
    """

    components: typing.Tuple[str, ...]

    @classmethod
    def parse(cls, value: str) -> "JSONPointer":
        if value in ("", "/"):
            return cls()
        if not value.startswith("/"):
            raise ValueError(f"invalid JSON pointer: {value!r}")
        return cls(*(_unescape(c) for c in value[1:].split("/")))

    def __truediv__(self, component: typing.Union[str, int]) -> "JSONPointer":
        return JSONPointer(*self.components, str(component))

    def __getitem__(self, index: int) -> "JSONPointer":
        return self / index

    def __eq__(self, other: typing.Any) -> bool:
        if not isinstance(other, JSONPointer):
            return NotImplemented
        return self.components == other.components

    def __hash__(self) -> int:
        return hash(self.components)

    def __str__(self) -> str:
        if not self.components:
            return "/"
        return "".join("/" + _escape(c) for c in self.components)

    def __repr__(self) -> str:
        return f"JSONPointer({str(self)!r})"

    def __init__(self, *components: str):
        if len(components) == 1 and components[0].startswith("/"):
            components = JSONPointer.parse(components[0]).components
        self.components = tuple(components)
