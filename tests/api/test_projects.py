import pytest
from datetime import date, timedelta
from httpx import AsyncClient
from clientdesk.services import file_service

pytestmark = pytest.mark.asyncio

class TestProjects:
    async def test_create_project(self, client: AsyncClient, seeded_client):
        response = await client.post("/api/v1/projects/", json={
            "client_id": seeded_client["id"],
            "title": "Website",
            "description": "Marketing site",
            "deadline": "2026-12-31",
            "budget": "₱10,000",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["budget"] == 10000
        assert data["status"] == "Started"
        assert data["invoice_url"] is None

    async def test_create_project_for_missing_client(self, client: AsyncClient):
        response = await client.post("/api/v1/projects/", json={
            "client_id": 999,
            "title": "Ghost",
            "deadline": "2026-12-31",
            "budget": 100,
        })
        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"

    async def test_create_project_rejects_negative_budget(self, client: AsyncClient, seeded_client):
        response = await client.post("/api/v1/projects/", json={
            "client_id": seeded_client["id"],
            "title": "Website",
            "deadline": "2026-12-31",
            "budget": -5,
        })
        assert response.status_code == 422

    async def test_list_projects_with_stats(self, client: AsyncClient, fake_supabase, seeded_project):
        fake_supabase.seed("payments", project_id=seeded_project["id"], amount=2500,
                           payment_date="2026-10-10", payment_method="Check")
        fake_supabase.seed("project_updates", project_id=seeded_project["id"], description="Kickoff")

        response = await client.get("/api/v1/projects/")

        assert response.status_code == 200
        project = response.json()["items"][0]
        assert project["client"]["full_name"] == "Maria Santos"
        assert project["payment_count"] == 1
        assert project["total_paid"] == 2500
        assert project["update_count"] == 1

    async def test_list_projects_filters(self, client: AsyncClient, fake_supabase, seeded_client, seeded_project):
        fake_supabase.seed(
            "projects", client_id=seeded_client["id"], title="Logo", description="",
            deadline="2026-12-01", budget=2500, status="Finished", invoice_url=None,
        )

        finished = (await client.get("/api/v1/projects/", params={"status": "Finished"})).json()
        assert [p["title"] for p in finished["items"]] == ["Logo"]

        by_client = (await client.get("/api/v1/projects/", params={"search": "maria"})).json()
        assert by_client["total_count"] == 2

        by_title = (await client.get("/api/v1/projects/", params={"search": "web"})).json()
        assert [p["title"] for p in by_title["items"]] == ["Website"]

    async def test_read_project_detail(self, client: AsyncClient, fake_supabase, seeded_project):
        fake_supabase.seed("payments", project_id=seeded_project["id"], amount=2500,
                           payment_date="2026-10-01", payment_method="Cash")
        fake_supabase.seed("payments", project_id=seeded_project["id"], amount=2500,
                           payment_date="2026-10-15", payment_method="Cash")

        response = await client.get(f"/api/v1/projects/{seeded_project['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["progress"] == 50
        assert data["payment_completed"] is False
        assert [p["payment_date"] for p in data["payments"]] == ["2026-10-15", "2026-10-01"]
        assert data["deadline_status"]["status"] == "normal"
        assert data["deadline_status"]["is_overdue"] is False

    async def test_overdue_project(self, client: AsyncClient, fake_supabase, seeded_client):
        project = fake_supabase.seed(
            "projects", client_id=seeded_client["id"], title="Late", description="",
            deadline=(date.today() - timedelta(days=2)).isoformat(), budget=100, status="Started",
            invoice_url=None,
        )

        data = (await client.get(f"/api/v1/projects/{project['id']}")).json()

        assert data["deadline_status"]["is_overdue"] is True
        assert data["deadline_status"]["status"] == "overdue"

    async def test_read_missing_project(self, client: AsyncClient):
        response = await client.get("/api/v1/projects/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Project not found"

    async def test_manual_status_change_is_kept(self, client: AsyncClient, seeded_project):
        response = await client.put(f"/api/v1/projects/{seeded_project['id']}", json={"status": "finished"})

        assert response.status_code == 200
        assert response.json()["status"] == "Finished"
        assert response.json()["title"] == "Website"

    async def test_delete_project(self, client: AsyncClient, fake_supabase, seeded_project):
        assert (await client.delete(f"/api/v1/projects/{seeded_project['id']}")).status_code == 400

        response = await client.delete(f"/api/v1/projects/{seeded_project['id']}", params={"confirm": "true"})

        assert response.status_code == 200
        assert fake_supabase.tables["projects"] == []

    async def test_upload_invoice(self, client: AsyncClient, fake_supabase, seeded_project):
        response = await client.post(
            f"/api/v1/projects/{seeded_project['id']}/invoice",
            files={"file": ("october invoice.pdf", b"%PDF-1.4 test", "application/pdf")},
        )

        assert response.status_code == 200
        url = response.json()["invoice_url"]
        assert url.startswith("https://fake.supabase.co/storage/v1/object/public/project-files/invoices/")
        assert url.endswith("-october_invoice.pdf")
        ((bucket, path), (content, options)), = fake_supabase.storage.files.items()
        assert bucket == "project-files"
        assert path.startswith(f"invoices/{seeded_project['id']}-")
        assert content == b"%PDF-1.4 test"

    async def test_upload_invoice_failure(self, client: AsyncClient, fake_supabase, seeded_project, notifications):
        fake_supabase.storage.fail_uploads = True

        response = await client.post(
            f"/api/v1/projects/{seeded_project['id']}/invoice",
            files={"file": ("invoice.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Failed to upload invoice")
        assert notifications.active()[-1].title == "Failed to Upload Invoice"

    @pytest.mark.parametrize("field", ["title", "deadline", "budget", "status", "description"])
    async def test_update_rejects_null_for_required_field(self, client: AsyncClient, fake_supabase,
                                                          seeded_project, field):
        response = await client.put(f"/api/v1/projects/{seeded_project['id']}", json={field: None})

        assert response.status_code == 422
        stored = fake_supabase.tables["projects"][0]
        assert stored[field] == seeded_project[field]
        assert ("projects", "update") not in fake_supabase.executed
        listed = await client.get("/api/v1/projects/")
        assert listed.status_code == 200

    async def test_invoice_for_project_removed_during_upload(self, client: AsyncClient, fake_supabase,
                                                             seeded_project, monkeypatch):
        async def upload_then_remove(supabase, project_id, *args):
            fake_supabase.tables["projects"].clear()
            return "https://fake.supabase.co/storage/v1/object/public/project-files/invoices/gone.pdf"

        monkeypatch.setattr(file_service, "upload_invoice", upload_then_remove)

        response = await client.post(
            f"/api/v1/projects/{seeded_project['id']}/invoice",
            files={"file": ("invoice.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Project not found"
