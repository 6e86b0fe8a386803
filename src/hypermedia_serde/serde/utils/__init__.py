from .jsonpointer import JSONPointer  # noqa
from .formatting import camelize, english_enumerate, underscore  # noqa
