"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from decimal import Decimal

from venues.managers import set_current_venue

from core_backend.tests.fixtures import *  # noqa: F401,F403


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def reset_venue_context():
    """
    Reset venue context after each test.

    CRITICAL: This prevents venue context from leaking between tests.
    If venue context leaks, tests may pass when they should fail.
    """
    yield  # Run the test

    # After test: ALWAYS reset to None
    set_current_venue(None)


@pytest.fixture(autouse=True)
def simulated_card_processor(settings):
    """Card payments in tests always go through the in-process processor."""
    settings.PAYMENT_CARD_PROCESSOR = "payments.processors.SimulatedCardProcessor"
    settings.SIMULATED_PROCESSOR_FEE_RATE = Decimal("0.029")
    settings.SIMULATED_PROCESSOR_FEE_FIXED = Decimal("0.30")


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "venue_isolation: mark test as venue isolation test (critical)"
    )
    config.addinivalue_line(
        "markers", "business_logic: mark test as business logic test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (API + DB)"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (isolated)"
    )


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def assert_venue_isolated(queryset, expected_venue):
    """
    Helper function to assert queryset is filtered by expected venue.

    Usage:
        orders = Order.objects.all()
        assert_venue_isolated(orders, venue_a)
    """
    for obj in queryset:
        assert obj.venue == expected_venue, (
            f"Object {obj} has venue {obj.venue}, expected {expected_venue}"
        )
