"""
Signed weight-change webhook.

Tells an external system that a rollout's desired canary weight changed.
Delivery is fire-and-forget: ``send_set_weight_event`` never raises, every
failure is logged and dropped so notification can never block routing.

The request carries two headers:
- X-Rollout-Timestamp: RFC 3339 UTC timestamp, second precision
- X-Rollout-Signature: hex HMAC-SHA256 of ``"<timestamp>:<body>"``

Signing the timestamp together with the body lets receivers reject replays
by checking freshness. Receivers can use ``verify_signature``:

    from canaryroute.webhook import verify_signature

    ok = verify_signature(secret, request.headers["X-Rollout-Timestamp"],
                          request.body, request.headers["X-Rollout-Signature"])
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

import httpx

from canaryroute.config import get_config, get_webhook_secret
from canaryroute.contracts.types import (
    ANNOTATION_ROLLOUT_ID,
    ANNOTATION_TARGET_URL,
    WEBHOOK_SECRET_ENV_VAR,
    WEBHOOK_SIGNATURE_HEADER,
    WEBHOOK_TIMESTAMP_HEADER,
)
from canaryroute.errors import NotificationError
from canaryroute.logger import RolloutLogger
from canaryroute.models.events import WeightChangeEvent
from canaryroute.models.rollout import RolloutContext
from canaryroute.tracing import add_span_event, tracer


def format_timestamp(moment: datetime) -> str:
    """RFC 3339 in UTC with second precision, e.g. ``2024-05-01T12:00:00Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def sign_payload(secret: str, timestamp: str, body: bytes) -> str:
    """Hex HMAC-SHA256 over ``"<timestamp>:<body>"`` keyed by ``secret``."""
    basestring = f"{timestamp}:{body.decode('utf-8')}"
    return hmac.new(
        secret.encode("utf-8"),
        basestring.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_signature(secret: str, timestamp: str, body: bytes, signature: str) -> bool:
    """Check a received signature in constant time."""
    try:
        expected = sign_payload(secret, timestamp, body)
    except UnicodeDecodeError:
        return False
    return hmac.compare_digest(
        expected.encode("ascii"),
        signature.encode("utf-8", "surrogateescape"),
    )


class Webhook:
    """
    Sends signed weight-change events to the URL named in rollout annotations.

    Args:
        secret: HMAC key; read from AMBASSADOR_WEBHOOK_SECRET when None.
            An empty secret disables notification.
        http_client: Async client to send with; a short-lived one is created
            per delivery when None. An injected client is never closed here.
        timeout_seconds: Deadline for the whole delivery, connect through
            response headers; defaults to the configured value (5s).
        log: Logger for delivery failures; one is bound per rollout when None.
        clock: Source of the current time.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: Optional[float] = None,
        log: Optional[RolloutLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._secret = get_webhook_secret() if secret is None else secret
        self.timeout = (
            get_config().webhook_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        self._http = http_client
        self.log = log
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    def send_set_weight_event(self, desired_weight: int, rollout: RolloutContext) -> None:
        """Notify the rollout's webhook of a new desired weight. Never raises."""
        log = self.log or RolloutLogger.for_rollout(rollout)
        with tracer.start_as_current_span(
            "ambassador.webhook",
            attributes={
                "rollout.name": rollout.name,
                "canary.desired_weight": desired_weight,
            },
        ):
            try:
                self.deliver(desired_weight, rollout)
            except NotificationError as e:
                add_span_event("webhook.failed", {"error": str(e)})
                log.warning(f"rollout webhook error: {e}")

    def deliver(self, desired_weight: int, rollout: RolloutContext) -> None:
        """
        Build, sign and send the event, waiting at most ``timeout`` seconds.

        Runs the delivery on a private event loop; from async code await
        ``deliver_async`` instead.

        Raises:
            NotificationError: on any failure, including transport errors and
                the total deadline. HTTP error statuses are not failures.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise NotificationError("deliver() called from a running event loop, use deliver_async()")
        asyncio.run(self.deliver_async(desired_weight, rollout))

    async def deliver_async(self, desired_weight: int, rollout: RolloutContext) -> None:
        """Async form of ``deliver``."""
        url, body, timestamp = self._prepare(desired_weight, rollout)
        try:
            await asyncio.wait_for(self._post(url, body, timestamp), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise NotificationError(
                f"error sending request: no response within {self.timeout:g}s"
            ) from e

    def _prepare(self, desired_weight: int, rollout: RolloutContext) -> Tuple[str, bytes, str]:
        if not self._secret:
            raise NotificationError(f"variable {WEBHOOK_SECRET_ENV_VAR!r} is not set")

        annotations = rollout.annotations
        if annotations is None:
            raise NotificationError(f"no annotations found for {rollout.name!r}")

        webhook_url = annotations.get(ANNOTATION_TARGET_URL)
        if not webhook_url:
            raise NotificationError(
                f"annotation {ANNOTATION_TARGET_URL!r} not found for {rollout.name!r}"
            )
        rollout_id = annotations.get(ANNOTATION_ROLLOUT_ID)
        if not rollout_id:
            raise NotificationError(
                f"annotation {ANNOTATION_ROLLOUT_ID!r} not found for {rollout.name!r}"
            )

        now = format_timestamp(self._clock())
        try:
            body = WeightChangeEvent(
                rollout_id=rollout_id,
                desired_weight=desired_weight,
                verified_at=now,
            ).to_payload()
        except ValueError as e:
            raise NotificationError(f"error building body: {e}") from e
        return webhook_url, body, now

    async def _post(self, url: str, body: bytes, timestamp: str) -> None:
        if self._http is not None:
            await self._send(self._http, url, body, timestamp)
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            await self._send(client, url, body, timestamp)

    async def _send(self, client: httpx.AsyncClient, url: str, body: bytes, timestamp: str) -> None:
        try:
            request = client.build_request(
                "POST",
                url,
                content=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise NotificationError(f"error building request: {e}") from e

        self._sign_request(request, body, timestamp)

        # Only the status line matters; the body is never read.
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise NotificationError(f"error sending request: {e}") from e
        await response.aclose()

    def _sign_request(self, request: httpx.Request, body: bytes, timestamp: str) -> None:
        request.headers[WEBHOOK_TIMESTAMP_HEADER] = timestamp
        try:
            signature = sign_payload(self._secret, timestamp, body)
        except UnicodeError as e:
            raise NotificationError(f"error signing request: {e}") from e
        request.headers[WEBHOOK_SIGNATURE_HEADER] = signature
