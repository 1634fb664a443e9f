from __future__ import annotations

import random

import pytest

from tests.utils import RecordingSleep
from vysper.config import Settings
from vysper.retry import RetryOrchestrator
from vysper.state import ServiceState


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="AIzaSyTestKey1234567890",
        timeout_s=5.0,
        max_retries=3,
        preflight_enabled=False,
    )


@pytest.fixture
def state() -> ServiceState:
    return ServiceState()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def orchestrator(recording_sleep: RecordingSleep) -> RetryOrchestrator:
    return RetryOrchestrator(sleep=recording_sleep, rng=random.Random(7))
