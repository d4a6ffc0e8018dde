"""Tests for the chart, catalog and health HTTP routes.

Runs against the real app with the registry provider overridden by an
in-memory one; the lifespan is not entered.
"""

import asyncio
import random
import uuid

import pytest
from fastapi.testclient import TestClient

from chart_registry.api.routes.charts import get_registry_provider, get_synthesizer
from chart_registry.catalog.registry import TemplateCatalog
from chart_registry.db.store import InMemoryChartStore, serialize_charts
from chart_registry.domain.synthesizer import ChartSynthesizer
from chart_registry.main import app
from chart_registry.schemas.charts import ChartPermissions
from chart_registry.services.registry_provider import RegistryProvider

pytestmark = pytest.mark.integration

ALICE = {"X-Viewer-Id": "alice", "X-Organization-Id": "org-1", "X-Viewer-Role": "team_member", "X-Viewer-Name": "Alice"}
BOB = {"X-Viewer-Id": "bob", "X-Organization-Id": "org-1", "X-Viewer-Role": "team_member"}
CAROL = {"X-Viewer-Id": "carol", "X-Organization-Id": "org-1", "X-Viewer-Role": "viewer"}
MANAGER = {"X-Viewer-Id": "mgr-1", "X-Organization-Id": "org-1", "X-Viewer-Role": "manager"}
OTHER_ORG_ADMIN = {"X-Viewer-Id": "root", "X-Organization-Id": "org-2", "X-Viewer-Role": "admin"}

PROMPT = "Show monthly sales trends for the last year"


@pytest.fixture
def client():
    provider = RegistryProvider(InMemoryChartStore(), TemplateCatalog())
    app.dependency_overrides[get_registry_provider] = lambda: provider
    app.dependency_overrides[get_synthesizer] = lambda: ChartSynthesizer(rng=random.Random(1))
    yield TestClient(app)
    app.dependency_overrides.clear()


def _generate(client, headers=ALICE, **options):
    body = {"prompt": PROMPT, "options": {"save_to_organization": True, **options}}
    response = client.post("/api/charts/generate", json=body, headers=headers)
    assert response.status_code == 200
    return response.json()["chart"]


class TestViewerHeaders:
    def test_missing_viewer_is_401_with_debug_id(self, client):
        response = client.get("/api/charts/library")

        assert response.status_code == 401
        uuid.UUID(response.json()["debug_id"])

    def test_missing_organization_is_401(self, client):
        response = client.get("/api/charts/library", headers={"X-Viewer-Id": "alice"})

        assert response.status_code == 401


class TestGenerate:
    def test_generate_without_saving(self, client):
        response = client.post("/api/charts/generate", json={"prompt": PROMPT}, headers=ALICE)

        data = response.json()
        assert response.status_code == 200
        assert data["success"] is True
        assert data["chart"]["chart_type"] == "line"
        assert len(data["suggestions"]) == 2

    def test_generate_and_save_appears_in_my_charts(self, client):
        chart = _generate(client)

        assert chart["approval_status"] == "pending"
        assert chart["created_by"] == "alice"
        mine = client.get("/api/charts/mine", headers=ALICE).json()
        assert [c["id"] for c in mine] == [chart["id"]]

    def test_invalid_visibility_is_422(self, client):
        body = {"prompt": PROMPT, "options": {"visibility": "everyone"}}

        assert client.post("/api/charts/generate", json=body, headers=ALICE).status_code == 422


class TestLibrary:
    def test_library_shape(self, client):
        _generate(client)

        data = client.get("/api/charts/library", headers=ALICE).json()

        assert [c["id"] for c in data["categories"]][-2:] == ["generated", "organization"]
        assert len(data["my_charts"]) == 1
        assert data["stats"]["total_count"] == 1
        assert data["featured"][0]["id"] == "marketing-campaign-roi"

    def test_other_organization_sees_nothing(self, client):
        _generate(client, visibility="public")

        data = client.get("/api/charts/library", headers=OTHER_ORG_ADMIN).json()

        assert data["stats"]["total_count"] == 0
        assert data["generated_charts"] == []


class TestApproval:
    def test_pending_lists_team_charts_for_manager(self, client):
        chart = _generate(client, visibility="team")

        pending = client.get("/api/charts/pending", headers=MANAGER).json()

        assert [c["id"] for c in pending] == [chart["id"]]
        assert client.get("/api/charts/pending", headers=BOB).json() == []

    def test_manager_approves(self, client):
        chart = _generate(client, visibility="organization")
        before = client.get("/api/charts/library", headers=CAROL).json()
        assert before["stats"]["total_count"] == 0

        response = client.post(f"/api/charts/{chart['id']}/approval", json={"action": "approve"}, headers=MANAGER)

        assert response.status_code == 200
        assert response.json()["approval_status"] == "approved"
        library = client.get("/api/charts/library", headers=CAROL).json()
        organization = next(c for c in library["categories"] if c["id"] == "organization")
        assert [t["id"] for t in organization["templates"]] == [chart["id"]]

    def test_team_member_cannot_approve(self, client):
        chart = _generate(client)

        response = client.post(f"/api/charts/{chart['id']}/approval", json={"action": "approve"}, headers=BOB)

        assert response.status_code == 403

    def test_unknown_chart_is_404(self, client):
        response = client.post("/api/charts/nope/approval", json={"action": "approve"}, headers=MANAGER)

        assert response.status_code == 404

    def test_second_decision_is_409(self, client):
        chart = _generate(client)
        url = f"/api/charts/{chart['id']}/approval"
        client.post(url, json={"action": "approve"}, headers=MANAGER)

        response = client.post(url, json={"action": "reject", "reason": "Too late"}, headers=MANAGER)

        assert response.status_code == 409

    def test_reject_then_resubmit(self, client):
        chart = _generate(client)
        client.post(f"/api/charts/{chart['id']}/approval", json={"action": "reject", "reason": "Bad"}, headers=MANAGER)

        response = client.post(f"/api/charts/{chart['id']}/submit", headers=ALICE)

        assert response.status_code == 200
        assert response.json()["approval_status"] == "pending"

    def test_submit_pending_chart_is_409(self, client):
        chart = _generate(client)

        assert client.post(f"/api/charts/{chart['id']}/submit", headers=ALICE).status_code == 409


class TestUsage:
    def test_record_install(self, client):
        chart = _generate(client)

        response = client.post(f"/api/charts/{chart['id']}/usage", json={"action": "install"}, headers=BOB)

        assert response.status_code == 200
        assert response.json()["usage"]["total_installs"] == 1

    def test_invisible_chart_is_404(self, client):
        chart = _generate(client, visibility="private")

        response = client.post(f"/api/charts/{chart['id']}/usage", json={}, headers=BOB)

        assert response.status_code == 404

    def test_visible_chart_without_use_grant_is_403(self, make_chart):
        chart = make_chart(chart_id="restricted", created_by="alice")
        chart.permissions = ChartPermissions(can_view=["team_member"], can_use=[], can_modify=["alice"])
        store = InMemoryChartStore()
        asyncio.run(store.save("org-1", serialize_charts([chart])))
        provider = RegistryProvider(store, TemplateCatalog())
        app.dependency_overrides[get_registry_provider] = lambda: provider
        try:
            client = TestClient(app)
            refused = client.post("/api/charts/restricted/usage", json={"action": "install"}, headers=BOB)
            owner = client.post("/api/charts/restricted/usage", json={"action": "install"}, headers=ALICE)
            manager = client.post("/api/charts/restricted/usage", json={"action": "view"}, headers=MANAGER)
        finally:
            app.dependency_overrides.clear()

        assert refused.status_code == 403
        assert owner.status_code == 200
        assert owner.json()["usage"]["total_installs"] == 1
        assert manager.status_code == 200


class TestUnsupportedMutations:
    def test_update_requires_elevated_role(self, client):
        response = client.put("/api/charts/any", json={"change_description": "x"}, headers=BOB)

        assert response.status_code == 403

    def test_update_not_available(self, client):
        response = client.put("/api/charts/any", json={"change_description": "x"}, headers=MANAGER)

        assert response.status_code == 501

    def test_delete(self, client):
        assert client.delete("/api/charts/any", headers=BOB).status_code == 403
        assert client.delete("/api/charts/any", headers=MANAGER).status_code == 501


class TestCatalogRoutes:
    def test_categories(self, client):
        data = client.get("/api/charts/catalog/categories", headers=ALICE).json()

        assert [c["id"] for c in data] == ["sales", "marketing", "analytics", "finance", "operations"]

    def test_search(self, client):
        response = client.get("/api/charts/catalog/search", params={"chart_type": "line"}, headers=ALICE)

        assert [t["id"] for t in response.json()] == ["sales-revenue-trend", "marketing-campaign-timeline"]

    def test_template_lookup(self, client):
        assert client.get("/api/charts/catalog/sales-pipeline-funnel", headers=ALICE).status_code == 200
        assert client.get("/api/charts/catalog/missing", headers=ALICE).status_code == 404

    def test_popular(self, client):
        data = client.get("/api/charts/catalog/popular", headers=ALICE).json()

        assert data[0]["id"] == "marketing-campaign-roi"


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "x-request-id" in response.headers

    def test_custom_correlation_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "custom-id-123"})

        assert response.headers["x-request-id"] == "custom-id-123"
