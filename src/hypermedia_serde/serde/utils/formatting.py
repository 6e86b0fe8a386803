import re
import typing

_CAMEL_BOUNDARY_1 = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY_2 = re.compile(r"([a-z\d])([A-Z])")


def english_enumerate(items: typing.Iterable[str], conj: str = ", and ") -> str:
    buf = []

    i = iter(items)
    try:
        x = next(i)
    except StopIteration:
        return ""
    buf.append(x)

    lx: typing.Optional[str] = None

    for x in i:
        if lx is not None:
            buf.append(", ")
            buf.append(lx)
        lx = x
    if lx is not None:
        buf.append(conj)
        buf.append(lx)
    return "".join(buf)


def underscore(key: str) -> str:
    """
    Converts a camelCased or dasherized key into its snake_cased form.
    Leading underscores (as in ``_links``) are preserved.

    :param str key: the key to convert.
    :return: the converted key.
    """
    stripped = key.lstrip("_")
    prefix = key[: len(key) - len(stripped)]
    stripped = _CAMEL_BOUNDARY_1.sub(r"\1_\2", stripped)
    stripped = _CAMEL_BOUNDARY_2.sub(r"\1_\2", stripped)
    return prefix + stripped.replace("-", "_").lower()


def camelize(key: str) -> str:
    """
    Converts a snake_cased or dasherized key into its lowerCamelCased form.
    Leading underscores are preserved.

    :param str key: the key to convert.
    :return: the converted key.
    """
    stripped = key.lstrip("_")
    prefix = key[: len(key) - len(stripped)]
    head, *rest = re.split(r"[_\-]+", stripped)
    return prefix + head + "".join(w[:1].upper() + w[1:] for w in rest)
