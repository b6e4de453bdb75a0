"""Tests for candidate management endpoints."""

import uuid

import pytest

from conftest import API


@pytest.mark.asyncio
class TestCreateCandidate:

    async def test_admin_adds_candidate_to_election(self, client, create_candidate, election, admin_auth, storage):
        response = await create_candidate(election["id"], full_name="Jane Candidate", motto="Libraries")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Candidate added successfully"
        candidate = body["candidate"]
        assert candidate["fullName"] == "Jane Candidate"
        assert candidate["motto"] == "Libraries"
        assert candidate["voteCount"] == 0
        assert candidate["election"] == election["id"]
        assert candidate["image"] == storage.uploads[-1].url
        assert storage.uploads[-1].asset_id.startswith("candidates/")

        refreshed = (await client.get(f"{API}/elections/{election['id']}", headers=admin_auth["headers"])).json()
        assert refreshed["candidates"] == [candidate["id"]]

        listed = (await client.get(f"{API}/elections/{election['id']}/candidates", headers=admin_auth["headers"])).json()
        assert [c["id"] for c in listed] == [candidate["id"]]

    async def test_unknown_election_returns_404_without_upload(self, create_candidate, admin_auth, storage):
        response = await create_candidate(str(uuid.uuid4()))

        assert response.status_code == 404
        assert response.json() == {"message": "Election not found"}
        assert storage.uploads == []

    async def test_missing_fields_fail(self, create_candidate, election):
        response = await create_candidate(election["id"], motto=None)

        assert response.status_code == 422
        assert response.json() == {"message": "Full name, motto and election are required"}

    async def test_missing_election_fails(self, create_candidate, admin_auth):
        response = await create_candidate(None)

        assert response.status_code == 422

    async def test_missing_image_fails(self, create_candidate, election):
        response = await create_candidate(election["id"], image=None)

        assert response.status_code == 422
        assert response.json() == {"message": "Image is required"}

    async def test_oversized_image_fails(self, create_candidate, election):
        response = await create_candidate(election["id"], image=b"\x00" * 1_000_001)

        assert response.status_code == 422
        assert response.json() == {"message": "Image size should be less than 1MB"}


@pytest.mark.asyncio
class TestGetCandidate:

    async def test_get_candidate(self, client, candidate, voter_auth):
        response = await client.get(f"{API}/candidates/{candidate['id']}", headers=voter_auth["headers"])

        assert response.status_code == 200
        assert response.json()["id"] == candidate["id"]
        assert response.json()["voteCount"] == 0

    async def test_get_unknown_candidate_returns_404(self, client, voter_auth):
        response = await client.get(f"{API}/candidates/{uuid.uuid4()}", headers=voter_auth["headers"])

        assert response.status_code == 404
        assert response.json() == {"message": "Candidate not found"}


@pytest.mark.asyncio
class TestRemoveCandidate:

    async def test_remove_detaches_from_election(self, client, create_candidate, election, admin_auth, storage):
        keep = (await create_candidate(election["id"], full_name="Keep")).json()["candidate"]
        drop = (await create_candidate(election["id"], full_name="Drop")).json()["candidate"]
        drop_asset = storage.uploads[-1].asset_id

        response = await client.delete(f"{API}/candidates/{drop['id']}", headers=admin_auth["headers"])

        assert response.status_code == 200
        assert response.json() == {"message": "Candidate removed successfully"}

        refreshed = (await client.get(f"{API}/elections/{election['id']}", headers=admin_auth["headers"])).json()
        assert refreshed["candidates"] == [keep["id"]]

        gone = await client.get(f"{API}/candidates/{drop['id']}", headers=admin_auth["headers"])
        assert gone.status_code == 404
        assert storage.deleted == [drop_asset]

    async def test_remove_unknown_candidate_returns_404(self, client, admin_auth):
        response = await client.delete(f"{API}/candidates/{uuid.uuid4()}", headers=admin_auth["headers"])

        assert response.status_code == 404

    async def test_non_admin_cannot_remove_candidate(self, client, candidate, voter_auth):
        response = await client.delete(f"{API}/candidates/{candidate['id']}", headers=voter_auth["headers"])

        assert response.status_code == 403
