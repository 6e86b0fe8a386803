from .actions import ActionResult, Outcome, ResourceActions  # noqa
from .declarative import Declarative, mapping_from_config, registry_from_config  # noqa
from .errors import (  # noqa
    BadRequest,
    Error,
    ErrorBag,
    InvalidAttribute,
    InvalidParameter,
    InvalidParameterMember,
    InvalidSort,
    InvalidType,
    MalformedDocument,
    MissingAttribute,
    MissingData,
    MissingType,
)
from .exceptions import (  # noqa
    DataError,
    ForbiddenError,
    HypermediaSerdeException,
    InvalidDeclarationError,
    NoMappingConfiguredError,
    QueryError,
    RequestError,
)
from .links import DocumentLinks, resolve_template  # noqa
from .mapping import Mapping, MappingRegistry  # noqa
from .nodes import CollectionNode, Node, ObjectNode, ScalarNode, parse_node  # noqa
from .transformer import HalJsonTransformer, JsonApiTransformer, Transformer  # noqa
from .validation import (  # noqa
    Fields,
    Included,
    Sorting,
    assert_create,
    assert_query,
    assert_update,
    get_attributes,
)
