"""WebhookReconciler — applies provider status callbacks to stored orders.

Flow per delivery:
  1. verify the HMAC signature (unless verification was explicitly disabled)
  2. parse the payload into WebhookPayload
  3. overwrite status / tx_hash / completed_at / error_message on the order

Nothing is written unless steps 1 and 2 succeed. The overwrite is
unconditional, so a replayed delivery reapplies the same values.
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from src.gift_common.errors import InternalError, InvalidSignatureError, ValidationError
from src.gift_gateway.auth.signature import verify_signature
from src.gift_order.domain.repository import OrderStoreProtocol
from src.gift_webhook.application.schemas import WebhookPayload


class WebhookReconciler:
    def __init__(
        self,
        store: OrderStoreProtocol,
        secret: str | None,
        *,
        verification_disabled: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        if not secret and not verification_disabled:
            raise ValueError(
                "a webhook secret is required unless verification is explicitly disabled"
            )
        self._store = store
        self._secret = secret
        self._verification_disabled = verification_disabled
        self._logger = logger or logging.getLogger("gift.webhook")
        if verification_disabled:
            self._logger.warning("Webhook signature verification is DISABLED")

    def verify(self, body: bytes, signature: str | None) -> None:
        if self._verification_disabled or not self._secret:
            return
        if not verify_signature(self._secret, body, signature):
            self._logger.warning("Invalid webhook signature")
            raise InvalidSignatureError()

    def parse(self, body: bytes) -> WebhookPayload:
        try:
            return WebhookPayload.model_validate_json(body)
        except PydanticValidationError as exc:
            self._logger.error("Invalid webhook payload: %s", exc)
            raise ValidationError(_describe(exc)) from exc

    async def handle(self, body: bytes, signature: str | None) -> WebhookPayload:
        self.verify(body, signature)
        payload = self.parse(body)
        order = payload.order

        try:
            await self._store.update_order_status(
                order.order_id,
                order.order_status,
                tx_hash=payload.tx_hash,
                completed_at=payload.completed_at,
                error_message=order.error,
            )
        except Exception as exc:
            self._logger.exception("Failed to update order %s", order.id)
            raise InternalError("Failed to update order") from exc

        self._logger.info(
            "Webhook processed: event_type=%s order_id=%s status=%s",
            payload.event_type,
            order.id,
            order.status,
        )
        return payload


def _describe(exc: PydanticValidationError) -> str:
    """Short caller-facing message naming the first offending field."""
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    if first.get("type") == "missing":
        return f"Missing {loc}" if loc else "Invalid webhook payload"
    if loc:
        return f"Invalid webhook payload: {loc}"
    return "Invalid webhook payload"
