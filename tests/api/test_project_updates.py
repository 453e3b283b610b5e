import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

class TestProjectUpdates:
    async def test_add_and_list_updates(self, client: AsyncClient, seeded_project):
        url = f"/api/v1/projects/{seeded_project['id']}/updates"
        assert (await client.post(url, json={"description": "Kickoff call done"})).status_code == 201
        assert (await client.post(url, json={"description": "Wireframes sent"})).status_code == 201

        page = (await client.get(url)).json()

        assert [u["description"] for u in page["items"]] == ["Wireframes sent", "Kickoff call done"]

    async def test_empty_description_rejected(self, client: AsyncClient, seeded_project):
        response = await client.post(f"/api/v1/projects/{seeded_project['id']}/updates", json={"description": ""})
        assert response.status_code == 422

    async def test_update_for_missing_project(self, client: AsyncClient):
        response = await client.post("/api/v1/projects/999/updates", json={"description": "Hello"})
        assert response.status_code == 404

    async def test_all_updates_carry_project(self, client: AsyncClient, fake_supabase, seeded_project):
        fake_supabase.seed("project_updates", project_id=seeded_project["id"], description="Kickoff")

        page = (await client.get("/api/v1/updates")).json()

        assert page["items"][0]["project"]["client"]["company_name"] == "Acme"

    async def test_delete_update(self, client: AsyncClient, fake_supabase, seeded_project):
        row = fake_supabase.seed("project_updates", project_id=seeded_project["id"], description="Kickoff")

        assert (await client.delete(f"/api/v1/updates/{row['id']}")).status_code == 400
        response = await client.delete(f"/api/v1/updates/{row['id']}", params={"confirm": True})

        assert response.status_code == 200
        assert fake_supabase.tables["project_updates"] == []
        missing = await client.delete(f"/api/v1/updates/{row['id']}", params={"confirm": True})
        assert missing.status_code == 404
