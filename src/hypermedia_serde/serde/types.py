import typing

JSONScalar = typing.Union[bool, int, float, str, None]
JSONArray = typing.Sequence[typing.Any]
MutableJSONArray = typing.MutableSequence[typing.Any]
JSONObject = typing.Mapping[str, typing.Any]
MutableJSONObject = typing.MutableMapping[str, typing.Any]
JSONValue = typing.Union[JSONScalar, JSONArray, JSONObject]

SCALAR_TYPES: typing.Tuple[type, ...] = (bool, int, float, str)


def is_scalar(value: typing.Any) -> bool:
    """
    Tells whether ``value`` is a non-null JSON scalar.
    """
    return isinstance(value, SCALAR_TYPES)
