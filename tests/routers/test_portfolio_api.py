# tests/routers/test_portfolio_api.py
"""
API layer tests for portfolio endpoints.

These tests verify the HTTP layer using FastAPI's TestClient:
- Correct status codes (200, 400, 404, 422)
- camelCase response JSON matching the Pydantic schemas
- Query parameter handling (filters, sorting, metric)
- Error responses in the ErrorDetail format

Test Methodology:
    1. Override database dependency with test database
    2. Seed test data
    3. Make HTTP requests via TestClient
    4. Assert status codes and response structure
"""

import logging
import os
from datetime import date

import pytest

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from proptrack.database import get_db
from proptrack.main import app
from proptrack.models import TransactionType
from tests.conftest import (
    create_loan,
    create_property,
    create_transaction,
    create_user,
    create_valuation,
)

AS_OF = "2024-06-15"


# =============================================================================
# TEST CLIENT SETUP
# =============================================================================

@pytest.fixture(scope="function")
def client(db: Session) -> TestClient:
    """
    Create TestClient with database dependency override.

    This ensures all API calls use the test database.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db: Session) -> dict:
    """Sydney (valued, geared, rented) and Melbourne (no data) properties."""
    owner = create_user(db)

    sydney = create_property(
        db, owner, suburb="Sydney", state="NSW", entity_name="Personal",
        purchase_price="500000",
    )
    melbourne = create_property(
        db, owner, suburb="Melbourne", state="VIC", entity_name="Trust",
        purchase_price="600000",
    )

    create_valuation(db, sydney, "600000", date(2024, 1, 10))
    create_loan(db, sydney, "400000")
    create_transaction(db, owner, sydney, "2400", date(2024, 6, 3))
    create_transaction(db, owner, sydney, "-300", date(2024, 6, 18), TransactionType.EXPENSE)

    return {"owner": owner, "sydney": sydney, "melbourne": melbourne}


def summary_url(owner_id: int) -> str:
    return f"/owners/{owner_id}/portfolio/summary"


def properties_url(owner_id: int) -> str:
    return f"/owners/{owner_id}/portfolio/properties"


# =============================================================================
# SUMMARY ENDPOINT
# =============================================================================

class TestSummaryEndpoint:
    """Tests for GET /owners/{id}/portfolio/summary."""

    def test_summary_response(self, client, seeded):
        response = client.get(summary_url(seeded["owner"].id), params={"as_of": AS_OF})

        assert response.status_code == 200
        data = response.json()

        assert data["propertyCount"] == 2
        assert data["totalValue"] == "600000.00"
        assert data["totalDebt"] == "400000.00"
        assert data["totalEquity"] == "200000.00"
        assert data["portfolioLVR"] == "0.6667"
        assert data["cashFlow"] == "2100.00"
        assert data["averageYield"] == "0.0480"
        assert data["periodStart"] == "2024-06-01"
        assert data["periodEnd"] == "2024-06-30"

    def test_state_filter(self, client, seeded):
        response = client.get(
            summary_url(seeded["owner"].id),
            params={"as_of": AS_OF, "state": "VIC"},
        )

        data = response.json()
        assert data["propertyCount"] == 1
        assert data["portfolioLVR"] is None
        assert data["averageYield"] is None

    def test_owner_without_properties(self, client, db):
        owner = create_user(db, email="new@example.com")

        response = client.get(summary_url(owner.id))

        assert response.status_code == 200
        assert response.json()["propertyCount"] == 0

    def test_unknown_owner_returns_404(self, client):
        response = client.get(summary_url(999))

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "OwnerNotFoundError"
        assert data["details"] == {"owner_id": 999}

    def test_invalid_period_returns_400(self, client, seeded):
        response = client.get(summary_url(seeded["owner"].id), params={"period": "weekly"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "InvalidPeriodError"
        assert data["details"]["field"] == "period"
        assert data["details"]["valid_options"] == ["monthly", "quarterly", "annual"]

    def test_invalid_period_is_logged(self, client, seeded, caplog):
        url = summary_url(seeded["owner"].id)

        with caplog.at_level(logging.WARNING, logger="proptrack.main"):
            client.get(url, params={"period": "weekly"})

        assert f"Rejected {url}: Invalid period: 'weekly'" in caplog.text

    def test_invalid_status_returns_400(self, client, seeded):
        response = client.get(summary_url(seeded["owner"].id), params={"status": "archived"})

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidStatusError"

    def test_non_integer_owner_returns_422(self, client):
        response = client.get("/owners/abc/portfolio/summary")

        assert response.status_code == 422
        assert response.json()["error"] == "RequestValidationError"


# =============================================================================
# PROPERTIES ENDPOINT
# =============================================================================

class TestPropertiesEndpoint:
    """Tests for GET /owners/{id}/portfolio/properties."""

    def test_default_sort_is_alphabetical(self, client, seeded):
        response = client.get(properties_url(seeded["owner"].id), params={"as_of": AS_OF})

        assert response.status_code == 200
        assert [item["suburb"] for item in response.json()] == ["Melbourne", "Sydney"]

    def test_property_fields(self, client, seeded):
        response = client.get(properties_url(seeded["owner"].id), params={"as_of": AS_OF})

        by_suburb = {item["suburb"]: item for item in response.json()}
        sydney = by_suburb["Sydney"]
        melbourne = by_suburb["Melbourne"]

        assert sydney["propertyId"] == seeded["sydney"].id
        assert sydney["entityName"] == "Personal"
        assert sydney["status"] == "active"
        assert sydney["currentValue"] == "600000.00"
        assert sydney["totalLoans"] == "400000.00"
        assert sydney["lvr"] == "0.6667"
        assert sydney["grossYield"] == "0.0480"
        assert sydney["netYield"] == "0.0420"
        assert sydney["annualIncome"] == "28800.00"
        assert sydney["annualExpenses"] == "3600.00"
        assert sydney["capitalGrowthPercent"] == "20.00"
        assert sydney["hasValue"] is True

        assert melbourne["lvr"] is None
        assert melbourne["grossYield"] is None
        assert melbourne["hasValue"] is False

    def test_sort_by_equity_desc(self, client, seeded):
        response = client.get(
            properties_url(seeded["owner"].id),
            params={"as_of": AS_OF, "sort_by": "equity", "sort_order": "desc"},
        )

        assert [item["suburb"] for item in response.json()] == ["Sydney", "Melbourne"]

    def test_entity_filter(self, client, seeded):
        response = client.get(
            properties_url(seeded["owner"].id),
            params={"entity_type": "Trust"},
        )

        assert [item["propertyId"] for item in response.json()] == [seeded["melbourne"].id]

    def test_empty_result_is_empty_list(self, client, seeded):
        response = client.get(properties_url(seeded["owner"].id), params={"status": "sold"})

        assert response.status_code == 200
        assert response.json() == []

    def test_invalid_sort_key_returns_400(self, client, seeded):
        response = client.get(properties_url(seeded["owner"].id), params={"sort_by": "price"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "InvalidSortKeyError"
        assert data["details"]["field"] == "sort_by"

    def test_invalid_sort_order_returns_400(self, client, seeded):
        response = client.get(properties_url(seeded["owner"].id), params={"sort_order": "up"})

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidSortOrderError"


# =============================================================================
# PERFORMERS ENDPOINT
# =============================================================================

class TestPerformersEndpoint:
    """Tests for GET /owners/{id}/portfolio/performers."""

    def test_best_and_worst_by_equity(self, client, seeded):
        response = client.get(
            f"/owners/{seeded['owner'].id}/portfolio/performers",
            params={"metric": "equity", "as_of": AS_OF},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["metric"] == "equity"
        assert data["best"] == seeded["sydney"].id
        assert data["worst"] == seeded["melbourne"].id

    def test_invalid_metric_returns_400(self, client, seeded):
        response = client.get(
            f"/owners/{seeded['owner'].id}/portfolio/performers",
            params={"metric": "suburb"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidMetricError"


# =============================================================================
# HEALTH
# =============================================================================

class TestHealthEndpoint:

    def test_health_reports_database(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["database"] == "sqlite"
