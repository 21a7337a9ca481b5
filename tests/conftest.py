import pytest
import requests

from backend import IntakeForm, IntakeSubmitter
from duplicates import DuplicateProber
from storage import LocalFallbackStore, MemoryStore

FIXED_TIME = "2026-01-01T12:00:00.000Z"
WEBHOOK_URL = "https://hooks.example.com/intake"


class DummyResponse:
    def __init__(self, status_code=200, reason="OK", payload=None):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")

    def json(self):
        return self._payload


class ManualTimer:
    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args)


@pytest.fixture
def timers():
    created = []

    def factory(interval, function, args=()):
        timer = ManualTimer(interval, function, args)
        created.append(timer)
        return timer

    factory.created = created
    return factory


@pytest.fixture
def store():
    return LocalFallbackStore(MemoryStore(), recent_limit=5)


@pytest.fixture
def submitter(store):
    return IntakeSubmitter(store, webhook_url=WEBHOOK_URL, clock=lambda: FIXED_TIME)


@pytest.fixture
def form(submitter, timers):
    with IntakeForm(submitter, DuplicateProber(timer_factory=timers)) as intake_form:
        yield intake_form


def fill_valid(form, **overrides):
    values = {
        "name": "john smith",
        "email": "JOHN@X.COM",
        "phone": "5551234567",
        "service_type": "Personal Tax Return",
        "source": "Walk-In",
    }
    values.update(overrides)
    for field, value in values.items():
        form.set_field(field, value)
