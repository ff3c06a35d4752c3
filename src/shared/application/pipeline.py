"""Request dispatch pipeline (validation → handler → result).

Every command/query is a pydantic model.  ``RequestDispatcher.send``
validates the raw payload against the request type and only then invokes
the registered handler.  Validation failures short-circuit into a single
``Failure(VALIDATION)`` whose details group the messages by field name;
the handler never runs and nothing is written.

The dispatcher also owns the cross-cutting behaviours: request logging,
timing, and translating ``StoreUnavailable`` into an opaque
``STORE_UNAVAILABLE`` failure.
"""

from __future__ import annotations

import time
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Optional, Protocol, Type, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from shared.domain.cancellation import Deadline
from shared.domain.result import Error, Result
from shared.infrastructure.retry import StoreUnavailable

logger = structlog.get_logger(__name__)

NON_FIELD_ERRORS = "__all__"

R = TypeVar("R", bound=BaseModel)


class IRequestHandler(Protocol[R]):
    def handle(self, request: R, deadline: Optional[Deadline] = None) -> Result: ...


def validation_details(exc: PydanticValidationError) -> Dict[str, List[str]]:
    """Group pydantic errors by field name, keeping their order."""
    grouped: Dict[str, List[str]] = defaultdict(list)
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or NON_FIELD_ERRORS
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        grouped[field].append(message)
    return dict(grouped)


class RequestDispatcher:
    """Routes validated requests to their handlers."""

    def __init__(self) -> None:
        self._handlers: Dict[Type[BaseModel], IRequestHandler] = {}

    def register(self, request_type: Type[R], handler: IRequestHandler[R]) -> None:
        if request_type in self._handlers:
            raise ValueError(f"A handler is already registered for {request_type.__name__}.")
        self._handlers[request_type] = handler

    def send(
        self,
        request_type: Type[R],
        payload: Mapping[str, Any],
        deadline: Optional[Deadline] = None,
    ) -> Result:
        try:
            handler = self._handlers[request_type]
        except KeyError:
            raise LookupError(f"No handler registered for {request_type.__name__}.") from None

        log = logger.bind(request=request_type.__name__)
        try:
            request = request_type.model_validate(dict(payload))
        except PydanticValidationError as exc:
            details = validation_details(exc)
            log.info("request.validation_failed", fields=sorted(details))
            return Result.failure(Error.validation(details))

        started = time.perf_counter()
        try:
            result = handler.handle(request, deadline=deadline)
        except StoreUnavailable:
            log.error("request.store_unavailable")
            return Result.failure(Error.store_unavailable())
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            log.info("request.completed", elapsed_ms=elapsed_ms)

        if result.is_failure:
            log.info("request.failed", error_code=result.error.code.value)
        return result
