import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from fastapi.testclient import TestClient
from pydantic import TypeAdapter

from charterdesk.domain.pricing.models import BookingSettings
from charterdesk.domain.pricing.rules import PricingRule
from charterdesk.main import create_app
from charterdesk.settings import Settings

RULE_ADAPTER = TypeAdapter(PricingRule)


def make_rule(rule_id: str, rule_type: str, adjustment=10, *, priority: int = 0, conditions=None, **extra):
    payload = {
        "id": rule_id,
        "name": f"Rule {rule_id}",
        "type": rule_type,
        "adjustment_percent": adjustment,
        "priority": priority,
        "conditions": conditions or {},
        **extra,
    }
    return RULE_ADAPTER.validate_python(payload)


@pytest.fixture
def rule_factory():
    return make_rule


@pytest.fixture
def booking_settings() -> BookingSettings:
    return BookingSettings()


@pytest.fixture
def app_settings() -> Settings:
    return Settings(app_env="dev", log_level="WARNING")


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings)
    with TestClient(app) as test_client:
        yield test_client
