# barberbook/conftest.py
import logging
import sys
import pytest
from pathlib import Path

# Add project root to PYTHONPATH
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="function")
def raw_limits():
    """
    Fresh copy of the default raw plan table.

    Tests mutate this to build alternate configurations without touching
    the module-level defaults.
    """
    from barberbook.features.plans.service import DEFAULT_PLAN_LIMITS

    return {tier: dict(values) for tier, values in DEFAULT_PLAN_LIMITS.items()}


@pytest.fixture(scope="function")
def resolver():
    """Resolver over the default plan table."""
    from barberbook.features.entitlements.service import EntitlementResolver

    return EntitlementResolver()


@pytest.fixture(scope="function", autouse=True)
def clear_resolver_cache():
    """
    Each test starts without a cached process-wide resolver.

    Handlers installed by configure_logging point at the captured stdout of
    the test that created them, so they are dropped afterwards too.
    """
    from barberbook.main import get_resolver

    get_resolver.cache_clear()
    yield
    get_resolver.cache_clear()
    logging.getLogger("barberbook").handlers = []


@pytest.fixture(scope="function")
def make_settings(monkeypatch):
    """Build Settings from a clean environment plus overrides."""
    from barberbook.core.config import Settings

    for key in ("ENV", "LOG_LEVEL", "ENTITLEMENTS_TABLE_PATH", "ENTITLEMENTS_ON_CONFIG_ERROR", "SKIP_ENV_VALIDATION"):
        monkeypatch.delenv(key, raising=False)

    def _make(**overrides):
        return Settings(_env_file=None, **overrides)

    return _make
