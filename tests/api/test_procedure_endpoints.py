from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from govassist.core.dependencies import get_procedure_service, get_search_service
from govassist.core.exceptions import ProcedureNotFoundError
from govassist.main import app
from govassist.schemas.enums import Language, ProcedureCategory
from govassist.schemas.procedure import SearchResult


@pytest.fixture
def search_service() -> AsyncMock:
    service = AsyncMock()
    app.dependency_overrides[get_search_service] = lambda: service
    return service


@pytest.fixture
def procedure_service() -> AsyncMock:
    service = AsyncMock()
    app.dependency_overrides[get_procedure_service] = lambda: service
    return service


class TestSearchEndpoint:

    def test_search(self, test_client, search_service, nic_procedure):
        search_service.search.return_value = SearchResult(
            procedures=[nic_procedure], total=1, suggestions=["nic renewal"]
        )

        response = test_client.get(
            "/api/v1/procedures/search",
            params={"query": "nic", "category": "IDENTITY_DOCUMENTS", "language": "EN", "limit": 5},
            headers={"X-Correlation-ID": "req-123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] is True
        assert body["meta"]["request_id"] == "req-123"
        assert body["data"]["procedures"][0]["slug"] == "apply-new-national-identity-card"
        assert body["data"]["suggestions"] == ["nic renewal"]
        assert body["data"]["pagination"] == {"page": 1, "limit": 5, "total": 1, "total_pages": 1}
        search_service.search.assert_awaited_once_with(
            "nic",
            category=ProcedureCategory.IDENTITY_DOCUMENTS,
            language=Language.EN,
            limit=5,
            offset=0,
        )

    def test_degraded_search_is_empty_not_an_error(self, test_client, search_service):
        search_service.search.return_value = SearchResult(failed=True)

        response = test_client.get("/api/v1/procedures/search", params={"query": "passport"})

        assert response.status_code == 200
        assert response.json()["data"]["procedures"] == []
        assert response.json()["data"]["total"] == 0

    @pytest.mark.parametrize("params", [{}, {"query": ""}, {"query": "nic", "limit": 0}, {"query": "nic", "limit": 101}])
    def test_invalid_parameters(self, test_client, search_service, params):
        response = test_client.get("/api/v1/procedures/search", params=params)
        assert response.status_code == 422
        search_service.search.assert_not_awaited()


class TestProcedureEndpoints:

    def test_get_by_slug(self, test_client, procedure_service, nic_procedure):
        procedure_service.get_by_slug.return_value = nic_procedure

        response = test_client.get(f"/api/v1/procedures/slug/{nic_procedure.slug}")

        assert response.status_code == 200
        assert response.json()["data"]["title"] == nic_procedure.title

    def test_unknown_procedure_returns_404(self, test_client, procedure_service):
        procedure_service.get_procedure.side_effect = ProcedureNotFoundError("Procedure not found")

        response = test_client.get(f"/api/v1/procedures/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Procedure not found"

    def test_invalid_procedure_id(self, test_client, procedure_service):
        response = test_client.get("/api/v1/procedures/not-a-uuid")
        assert response.status_code == 422

    def test_popular_wraps_list(self, test_client, procedure_service, nic_procedure):
        procedure_service.get_popular.return_value = [nic_procedure]

        response = test_client.get("/api/v1/procedures/popular", params={"limit": 3})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["data"]["items"]] == [str(nic_procedure.id)]
        procedure_service.get_popular.assert_awaited_once_with(limit=3)


class TestHealthAndRoot:

    def test_root(self, test_client):
        response = test_client.get("/")
        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    def test_health_without_database_is_degraded(self, test_client):
        response = test_client.get("/health/")
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unavailable"
