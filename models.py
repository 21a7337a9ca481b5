from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from config import DEFAULT_ASSIGNEE


class ClientIntake(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    service_type: str = ""
    source: str = ""
    referred_by: str = ""
    notes: str = ""
    assigned_to: str = DEFAULT_ASSIGNEE


class WebhookPayload(ClientIntake):
    timestamp: str
    submitted_by: str
    form_version: str = Field(description="Lets the receiving system tell payload shapes apart")

    def intake(self) -> ClientIntake:
        return ClientIntake(**self.model_dump(include=set(ClientIntake.model_fields)))


class RecentClient(BaseModel):
    name: str
    email: str
    service_type: str
    timestamp: str

    @classmethod
    def from_payload(cls, payload: WebhookPayload) -> "RecentClient":
        return cls(
            name=payload.name,
            email=payload.email,
            service_type=payload.service_type,
            timestamp=payload.timestamp,
        )


class PendingSubmission(ClientIntake):
    timestamp: str = Field(description="When the failed attempt happened")


class ClientSummary(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    last_contact: Optional[str] = None
    service_type: Optional[str] = None


class DuplicateCheckResponse(BaseModel):
    exists: bool = False
    client: Optional[ClientSummary] = None


class ProbeResult(BaseModel):
    match: Optional[ClientSummary] = None


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class Notification(BaseModel):
    level: str = Field(description="success|error|info|warning")
    title: str
    description: str = ""
    retry: Optional[WebhookPayload] = None

    @property
    def sticky(self) -> bool:
        # Only a failure offering Retry stays up until the next outcome
        return self.retry is not None


class SubmissionResult(BaseModel):
    state: SubmissionState
    notification: Optional[Notification] = None
    errors: dict[str, str] = Field(default_factory=dict)
    payload: Optional[WebhookPayload] = None
