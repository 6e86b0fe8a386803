import abc
import typing

from .serde.utils import english_enumerate


class HypermediaSerdeException(Exception, metaclass=abc.ABCMeta):
    pass


class InvalidDeclarationError(HypermediaSerdeException):
    """
    Raised when a mapping or the configuration it is built from violates
    an invariant. This happens at startup, never per request.
    """

    message: str

    def __str__(self):
        return self.message

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoMappingConfiguredError(HypermediaSerdeException):
    """
    Raised when a transformer is asked to serialize while no mapping has
    been registered at all.
    """

    @property
    def message(self) -> str:
        return "no mapping configured; register at least one mapping before serializing"

    def __str__(self):
        return self.message


class RequestError(HypermediaSerdeException, metaclass=abc.ABCMeta):
    """
    The base class of the aggregate failures raised once a validation pass
    has collected one or more errors.
    """

    errors: "ErrorBag"

    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return f"{self.message}: {english_enumerate(e.detail for e in self.errors)}"

    def __init__(self, errors: "ErrorBag"):
        super().__init__(errors)
        self.errors = errors


class DataError(RequestError):
    @property
    def message(self) -> str:
        return "an error with the provided data occurred"


class QueryError(RequestError):
    @property
    def message(self) -> str:
        return "an error with the provided query parameters occurred"


class ForbiddenError(HypermediaSerdeException):
    """
    Raised by application code when the requester is not allowed to perform
    the operation. It may carry errors describing why.
    """

    errors: typing.Optional["ErrorBag"]

    def __init__(self, errors: typing.Optional["ErrorBag"] = None):
        super().__init__(errors)
        self.errors = errors


if typing.TYPE_CHECKING:
    from .errors import ErrorBag  # noqa: E402
