import threading
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

import client_settings as cs
from config import REFERRAL_MARKER
from dispatcher import SubmissionError, send_to_webhook
from duplicates import DuplicateProber
from formatting import format_phone, normalize_field, normalize_phone
from models import (
    ClientIntake,
    Notification,
    PendingSubmission,
    RecentClient,
    SubmissionResult,
    SubmissionState,
    WebhookPayload,
)
from storage import LocalFallbackStore
from validation import IntakeValidationError, ensure_valid, validate_field

WATCHED_FIELDS = ("email", "phone")


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class IntakeSubmitter:
    """
    Sends one intake to the webhook per trigger.

    IDLE -> SUBMITTING -> SUCCESS | FAILED, then back to IDLE once the
    rolling list or the pending queue has been updated.
    """

    def __init__(
        self,
        store: LocalFallbackStore,
        webhook_url: Optional[str] = None,
        timeout: float = cs.WEBHOOK_TIMEOUT,
        submitted_by: str = cs.SUBMITTED_BY,
        form_version: str = cs.FORM_VERSION,
        clock=utc_timestamp,
    ):
        self.store = store
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.submitted_by = submitted_by
        self.form_version = form_version
        self.clock = clock
        self.state = SubmissionState.IDLE
        self.recent_clients = store.load_recent_clients()
        self._in_flight = threading.Lock()

    @property
    def is_submitting(self) -> bool:
        return self._in_flight.locked()

    def build_payload(self, intake: ClientIntake) -> WebhookPayload:
        data = {field: normalize_field(field, value) for field, value in intake.model_dump().items()}
        data["phone"] = normalize_phone(intake.phone)
        return WebhookPayload(
            **data,
            timestamp=self.clock(),
            submitted_by=self.submitted_by,
            form_version=self.form_version,
        )

    def submit(self, intake: ClientIntake) -> SubmissionResult:
        try:
            ensure_valid(intake)
        except IntakeValidationError as e:
            logger.info(f"Intake blocked by validation: {e}")
            return SubmissionResult(state=SubmissionState.IDLE, errors=e.errors)
        return self.retry(self.build_payload(intake))

    def retry(self, payload: WebhookPayload) -> SubmissionResult:
        """Send an already stamped payload again, unchanged."""
        if not self._in_flight.acquire(blocking=False):
            return SubmissionResult(
                state=SubmissionState.SUBMITTING,
                notification=Notification(
                    level="info",
                    title="Submission already in progress",
                    description="Wait for the current submission to finish.",
                ),
            )
        try:
            self.state = SubmissionState.SUBMITTING
            return self._deliver(payload)
        finally:
            self.state = SubmissionState.IDLE
            self._in_flight.release()

    def replay_pending(self) -> tuple[int, int]:
        """Re-send every queued submission once. Returns (sent, still pending)."""
        if not self._in_flight.acquire(blocking=False):
            return 0, len(self.store.load_pending())
        try:
            self.state = SubmissionState.SUBMITTING
            delivered = []
            for record in self.store.load_pending():
                payload = self.build_payload(ClientIntake(**record.model_dump(include=set(ClientIntake.model_fields))))
                try:
                    send_to_webhook(payload, self.webhook_url, self.timeout)
                except SubmissionError as e:
                    logger.warning(f"Replay failed for {record.name}: {e}")
                    continue
                self._remember(RecentClient.from_payload(payload))
                delivered.append(record)
            # Entries queued by other sessions during the sends stay put
            remaining = self.store.remove_pending(delivered)
            logger.info(f"Replayed pending submissions: {len(delivered)} sent, {remaining} still pending")
            return len(delivered), remaining
        finally:
            self.state = SubmissionState.IDLE
            self._in_flight.release()

    def clear_pending(self) -> None:
        self.store.clear_pending()

    def _deliver(self, payload: WebhookPayload) -> SubmissionResult:
        try:
            send_to_webhook(payload, self.webhook_url, self.timeout)
        except SubmissionError as e:
            logger.error(f"Submission error for {payload.name}: {e}")
            self.state = SubmissionState.FAILED
            pending = payload.intake().model_dump()
            pending["phone"] = format_phone(payload.phone)
            self.store.append_pending(PendingSubmission(**pending, timestamp=self.clock()))
            return SubmissionResult(
                state=SubmissionState.FAILED,
                payload=payload,
                notification=Notification(
                    level="error",
                    title="❌ Failed to save client",
                    description=str(e) or "Please check your internet connection and try again.",
                    retry=payload,
                ),
            )

        self.state = SubmissionState.SUCCESS
        self._remember(RecentClient.from_payload(payload))
        return SubmissionResult(
            state=SubmissionState.SUCCESS,
            payload=payload,
            notification=Notification(
                level="success",
                title=f"✅ {payload.name} added successfully",
                description=f"Welcome email sent to {payload.email}",
            ),
        )

    def _remember(self, client: RecentClient) -> None:
        self.recent_clients = [client] + self.recent_clients[: self.store.recent_limit - 1]
        self.store.save_recent_clients(self.recent_clients)


class IntakeForm:
    """Working record of one intake session, normalized as it is typed."""

    def __init__(self, submitter: IntakeSubmitter, prober: Optional[DuplicateProber] = None):
        self.submitter = submitter
        self.prober = prober
        self.values: dict[str, str] = {}
        self.errors: dict[str, str] = {}
        self.focus: Optional[str] = None
        self.reset()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def referred_by_enabled(self) -> bool:
        return REFERRAL_MARKER in (self.values.get("source") or "")

    @property
    def recent_clients(self) -> list[RecentClient]:
        return self.submitter.recent_clients

    @property
    def is_submitting(self) -> bool:
        return self.submitter.is_submitting

    @property
    def duplicate_warning(self) -> Optional[str]:
        return self.prober.warning if self.prober else None

    def set_field(self, name: str, raw) -> str:
        if name not in self.values:
            raise KeyError(f"Unknown intake field: {name}")
        value = normalize_field(name, raw)
        if name == "referred_by" and not self.referred_by_enabled:
            value = ""
        self.values[name] = value
        self.errors.pop(name, None)

        if name == "source" and not self.referred_by_enabled:
            self.values["referred_by"] = ""
        if name in WATCHED_FIELDS and self.prober:
            self.prober.watch(self.values["email"], self.values["phone"])
        return value

    def check_field(self, name: str) -> Optional[str]:
        message = validate_field(name, self.values)
        if message:
            self.errors[name] = message
        else:
            self.errors.pop(name, None)
        return message

    def intake(self) -> ClientIntake:
        return ClientIntake(**self.values)

    def submit(self) -> SubmissionResult:
        return self._apply(self.submitter.submit(self.intake()))

    def retry(self, notification: Notification) -> SubmissionResult:
        if notification.retry is None:
            raise ValueError("Notification has no retry action")
        return self._apply(self.submitter.retry(notification.retry))

    def reset(self) -> None:
        self.values = ClientIntake().model_dump()
        self.errors = {}
        if self.prober:
            self.prober.clear()

    def close(self) -> None:
        if self.prober:
            self.prober.close()

    def _apply(self, result: SubmissionResult) -> SubmissionResult:
        if result.errors:
            self.errors = dict(result.errors)
            self.focus = next(iter(result.errors))
        elif result.state == SubmissionState.SUCCESS:
            self.reset()
            self.focus = "name"
        return result
