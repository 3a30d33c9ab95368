"""ServiceResult and ServiceError: what every echo operation returns.

INVARIANT: ``send`` and ``serve`` never raise for network failures; a
process-scoped :class:`EchoError` becomes a failed result via
:meth:`ServiceResult.failure`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from echoctl.domain.errors import EchoError

Op = Literal["send", "serve"]


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    ``detail`` holds ``endpoint`` (the address involved) and ``cause``
    (the underlying OS error type) when they are known.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: EchoError) -> ServiceError:
        detail: dict[str, str] = {}
        if exc.endpoint is not None:
            detail["endpoint"] = exc.endpoint
        if exc.__cause__ is not None:
            detail["cause"] = type(exc.__cause__).__name__
        return cls(code=exc.code, message=exc.message, detail=detail)


class ServiceResult(BaseModel):
    """Outcome of one echo operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: ``"send"`` or ``"serve"``.
        data: ``{"reply"}`` for send, ``{"host", "port"}`` for serve.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: The endpoint or mode the operation ran with.
    """

    model_config = {"frozen": True}

    ok: bool
    op: Op
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(cls, op: Op, data: dict[str, Any], **meta: Any) -> ServiceResult:
        return cls(ok=True, op=op, data=data, meta=meta or None)

    @classmethod
    def failure(cls, op: Op, exc: EchoError) -> ServiceResult:
        """Convert a process-scoped error into a failed result."""
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))
