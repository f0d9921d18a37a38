"""BaseService — shared foundation for furnictl services.

Every service receives the resolved :class:`FurniSettings` at
construction time, so tax rate, default shipping tier, and analytics
thresholds come from one place.  Services never perform I/O; they
compose pure domain functions and wrap the outcome in a ServiceResult.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from furnictl.config.logging import get_logger
from furnictl.services.result import ErrorCode, ServiceResult
from furnictl.services.timeouts import with_timeout

if TYPE_CHECKING:
    from furnictl.config.settings import FurniSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class CheckoutService(BaseService):
            def evaluate_coupon(self, code: str, subtotal: float) -> ServiceResult:
                ...
    """

    def __init__(self, settings: FurniSettings | None = None) -> None:
        if settings is None:
            from furnictl.config.settings import FurniSettings

            settings = FurniSettings()
        self._settings = settings
        self._log = get_logger(f"services.{type(self).__name__}")

    @property
    def settings(self) -> FurniSettings:
        return self._settings

    async def call_backend[T](self, awaitable: Awaitable[T]) -> T:
        """Await a hosted-backend call under the configured request timeout.

        Raises:
            RequestTimeoutError: If the call outlives
                ``[checkout] request_timeout_ms``.
        """
        return await with_timeout(awaitable, self.settings.checkout.request_timeout_ms)

    @staticmethod
    def _parse[M: BaseModel](
        op: str,
        model: type[M],
        payload: Any,
    ) -> M | ServiceResult:
        """Validate *payload* into *model*, or return an INVALID_INPUT failure."""
        if isinstance(payload, model):
            return payload
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_INPUT,
                f"Invalid {model.__name__} input",
                detail={"errors": exc.errors(include_url=False, include_context=False)},
            )


def records(payload: Any, key: str) -> list[dict[str, Any]]:
    """Extract a list of row mappings from a dashboard document.

    Missing keys read as an empty collection; non-mapping rows are skipped.
    """
    rows = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(rows, list):
        return []
    return [row for row in rows if isinstance(row, dict)]

