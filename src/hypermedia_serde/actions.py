"""
:py:mod:`hypermedia_serde.actions` wires the validators and a transformer
around application callbacks, and classifies the outcome of each request.

.. code-block:: python

   actions = ResourceActions(registry, HalJsonTransformer(registry))

   def create_widget(payload, attributes, error_bag):
       return serializer.serialize(Widget(**attributes))

   result = actions.create(request_document, "Widget", create_widget)
   return Response(result.body, status=result.status)

"""

import dataclasses
import enum
import json
import logging
import typing

from .errors import BadRequest, ErrorBag
from .exceptions import DataError, ForbiddenError, QueryError
from .links import DocumentLinks
from .mapping import MappingRegistry
from .serde.models import ErrorDocumentRepr
from .serde.renderer import ReprRenderer
from .transformer import Transformer
from .validation.data import assert_create, assert_update
from .validation.params import Fields, Included, Sorting
from .validation.query import assert_query

logger = logging.getLogger(__name__)

WriteCallback = typing.Callable[
    [typing.Any, typing.Mapping[str, typing.Any], ErrorBag], typing.Any
]
ReadCallback = typing.Callable[[], typing.Any]


class Outcome(enum.Enum):
    OK = 200
    CREATED = 201
    BAD_REQUEST = 400
    FORBIDDEN = 403
    UNPROCESSABLE = 422

    @property
    def status(self) -> int:
        return self.value


@dataclasses.dataclass
class ActionResult:
    outcome: Outcome
    body: str

    @property
    def status(self) -> int:
        return self.outcome.status


class ResourceActions:
    """
    Runs requests through validation, the application callback and the
    transformer. Failures are turned into error documents:

    * :py:class:`~hypermedia_serde.exceptions.DataError` and
      :py:class:`~hypermedia_serde.exceptions.QueryError` yield
      :py:attr:`Outcome.UNPROCESSABLE` with the collected errors;
    * :py:class:`~hypermedia_serde.exceptions.ForbiddenError` yields
      :py:attr:`Outcome.FORBIDDEN`;
    * anything else yields :py:attr:`Outcome.BAD_REQUEST` with a fixed payload.
    """

    registry: MappingRegistry
    transformer: Transformer
    renderer: ReprRenderer

    def _error_result(self, outcome: Outcome, error_bag: ErrorBag) -> ActionResult:
        document = self.renderer(
            ErrorDocumentRepr(errors=error_bag.to_reprs(status=str(outcome.status)))
        )
        document.setdefault("errors", [])
        return ActionResult(outcome=outcome, body=json.dumps(document, ensure_ascii=False))

    def _handle_error(self, e: Exception, error_bag: ErrorBag) -> ActionResult:
        if isinstance(e, (DataError, QueryError)):
            return self._error_result(Outcome.UNPROCESSABLE, e.errors)
        elif isinstance(e, ForbiddenError):
            return self._error_result(
                Outcome.FORBIDDEN, e.errors if e.errors is not None else error_bag
            )
        else:
            logger.exception("request could not be served")
            return self._error_result(Outcome.BAD_REQUEST, ErrorBag([BadRequest()]))

    def _write(
        self,
        validate: typing.Callable[..., typing.Mapping[str, typing.Any]],
        success: Outcome,
        payload: typing.Any,
        resource_type_hint: typing.Optional[str],
        callback: WriteCallback,
        links: typing.Optional[DocumentLinks],
        meta: typing.Optional[typing.Mapping[str, typing.Any]],
    ) -> ActionResult:
        error_bag = ErrorBag()
        try:
            attributes = validate(payload, self.registry, resource_type_hint, error_bag)
            value = callback(payload, attributes, error_bag)
            body = self.transformer.serialize(value, links=links, meta=meta)
        except Exception as e:
            return self._handle_error(e, error_bag)
        return ActionResult(outcome=success, body=body)

    def create(
        self,
        payload: typing.Any,
        resource_type_hint: typing.Optional[str],
        callback: WriteCallback,
        links: typing.Optional[DocumentLinks] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> ActionResult:
        """
        Validates a creation request, then hands the payload, its attributes keyed by
        internal names and the error bag to ``callback``, whose return value is
        transformed into the response document.
        """
        return self._write(
            assert_create, Outcome.CREATED, payload, resource_type_hint, callback, links, meta
        )

    def update(
        self,
        payload: typing.Any,
        resource_type_hint: typing.Optional[str],
        callback: WriteCallback,
        links: typing.Optional[DocumentLinks] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> ActionResult:
        return self._write(
            assert_update, Outcome.OK, payload, resource_type_hint, callback, links, meta
        )

    def _read(
        self,
        callback: ReadCallback,
        resource_class_name: typing.Optional[str],
        fields: typing.Optional[Fields],
        included: typing.Optional[Included],
        sorting: typing.Optional[Sorting],
        links: typing.Optional[DocumentLinks],
        meta: typing.Optional[typing.Mapping[str, typing.Any]],
    ) -> ActionResult:
        error_bag = ErrorBag()
        try:
            assert_query(
                self.registry,
                fields=fields,
                included=included,
                sorting=sorting,
                resource_class_name=resource_class_name,
                error_bag=error_bag,
            )
            body = self.transformer.serialize(
                callback(), links=links, meta=meta, fields=fields, include=included
            )
        except Exception as e:
            return self._handle_error(e, error_bag)
        return ActionResult(outcome=Outcome.OK, body=body)

    def fetch(
        self,
        callback: ReadCallback,
        resource_class_name: typing.Optional[str] = None,
        fields: typing.Optional[Fields] = None,
        included: typing.Optional[Included] = None,
        links: typing.Optional[DocumentLinks] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> ActionResult:
        return self._read(callback, resource_class_name, fields, included, None, links, meta)

    def list(
        self,
        callback: ReadCallback,
        resource_class_name: typing.Optional[str] = None,
        fields: typing.Optional[Fields] = None,
        included: typing.Optional[Included] = None,
        sorting: typing.Optional[Sorting] = None,
        links: typing.Optional[DocumentLinks] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> ActionResult:
        """
        Validates the query parameters, then transforms the collection ``callback``
        returns. ``sorting`` is checked against the mapping of ``resource_class_name``.
        """
        return self._read(callback, resource_class_name, fields, included, sorting, links, meta)

    def __init__(
        self,
        registry: MappingRegistry,
        transformer: Transformer,
        renderer: typing.Optional[ReprRenderer] = None,
    ):
        self.registry = registry
        self.transformer = transformer
        self.renderer = renderer if renderer is not None else ReprRenderer()
