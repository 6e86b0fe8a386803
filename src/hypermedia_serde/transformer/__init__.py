from .base import (  # noqa
    ShapedResource,
    Transformer,
    flatten_members,
    flatten_single_key_scalars,
    format_keys,
)
from .hal import HalJsonTransformer  # noqa
from .jsonapi import JsonApiTransformer  # noqa
