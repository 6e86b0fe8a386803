from .core import (  # noqa
    SQLADeclarative,
    extract_id_properties,
    extract_properties,
    extract_required_properties,
    mapping_from_model,
)
from .querying import build_order_by  # noqa
