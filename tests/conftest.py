import os

import django
import pytest
from django.conf import settings

from sendgrid_rt.conf import ENV_PREFIX


def pytest_configure():
    from tests import settings as test_settings

    settings.configure(
        **{
            name: getattr(test_settings, name)
            for name in dir(test_settings)
            if name.isupper()
        }
    )
    django.setup()


@pytest.fixture(autouse=True)
def clean_relay_state(monkeypatch):
    """Drop SGRT_* overrides from the host environment and the cached relay."""
    from sendgrid_rt.services.relay_service import get_relay_service

    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    get_relay_service.cache_clear()
    yield
    get_relay_service.cache_clear()


@pytest.fixture
def rule_table():
    from sendgrid_rt.rules import Rule, RuleTable

    return RuleTable.build(
        [
            ("a@x.com", Rule(queue="Support", action="correspond")),
            ("billing@x.com", Rule(queue="Billing", action="comment")),
        ]
    )


@pytest.fixture
def default_rule():
    from sendgrid_rt.rules import Rule

    return Rule(queue="General", action="correspond")
