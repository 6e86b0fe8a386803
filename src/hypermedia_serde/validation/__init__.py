from .data import assert_create, assert_update, get_attributes  # noqa
from .params import Fields, Included, SortField, Sorting  # noqa
from .query import assert_query  # noqa
