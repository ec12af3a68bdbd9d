import pytest

from tabsplit.app import create_app
from tabsplit.models import Member


@pytest.fixture
def app():
    """Flask app in testing mode with default engine settings."""
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def lenient_client():
    """Client for an app that accepts malformed splits like the legacy code did."""
    return create_app({"TESTING": True, "STRICT_VALIDATION": False}).test_client()


@pytest.fixture
def trio():
    return [Member("A", "Alice"), Member("B", "Bob"), Member("C", "Carol")]


@pytest.fixture
def group_payload():
    return {
        "members": [
            {"id": "A", "name": "Alice"},
            {"id": "B", "name": "Bob"},
            {"id": "C", "name": "Carol"},
        ],
        "expenses": [
            {"id": 1, "description": "Dinner", "amount": 90, "paid_by": "A"},
            {
                "id": 2,
                "description": "Taxi",
                "amount": "30.00",
                "paid_by": "B",
                "split": {"type": "unequal", "shares": {"A": 10, "C": 20}},
            },
        ],
    }
