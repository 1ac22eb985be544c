"""직원 관계 그래프 API 테스트.

Relation graph API tests — Upsert, type change, delete and graph listing.
Tests self-loop rejection, idempotent upsert and admin-only access.
"""

import asyncio

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hrportal.models.employee import EmployeeRelation
from hrportal.schemas.employee import RelationUpsert
from hrportal.services.employee_service import relation_service
from tests.conftest import auth_header, make_employee

URL = "/api/employees/relations"


@pytest_asyncio.fixture
async def team(db: AsyncSession):
    """매니저 한 명과 직원 두 명."""
    manager = await make_employee(db, "m1", "Jane", "Doe", department="Sales", is_manager=True)
    first = await make_employee(db, "e1", "Eve", "One", department="Sales")
    second = await make_employee(db, "e2", "Sam", "Two", department="Sales")
    return manager, first, second


class TestRelationUpsert:
    """관계 업서트 테스트."""

    async def test_create_relation(self, client: AsyncClient, admin_headers, team):
        """신규 관계는 201."""
        res = await client.post(f"{URL}/manage", json={
            "fromId": "m1", "toId": "e1", "type": "MANAGER",
        }, headers=admin_headers)
        assert res.status_code == 201
        data = res.json()
        assert data["fromId"] == "m1"
        assert data["toId"] == "e1"
        assert data["type"] == "MANAGER"

    async def test_upsert_is_idempotent(self, client: AsyncClient, admin_headers, team):
        """같은 (from, to, type) 재요청은 기존 관계를 200으로 반환."""
        payload = {"fromId": "m1", "toId": "e1", "type": "MANAGER"}
        first = await client.post(f"{URL}/manage", json=payload, headers=admin_headers)
        second = await client.post(f"{URL}/manage", json=payload, headers=admin_headers)
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]

    async def test_parallel_upsert_creates_one_edge(self, engine, db: AsyncSession, team, client: AsyncClient, admin_headers):
        """동시에 같은 관계를 요청해도 하나만 생성되고 둘 다 성공."""
        await db.commit()
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        payload = RelationUpsert(from_id="m1", to_id="e1", type="MANAGER")

        async with factory() as first, factory() as second:
            results = await asyncio.gather(
                relation_service.upsert_relation(first, payload),
                relation_service.upsert_relation(second, payload),
            )
            await first.commit()
            await second.commit()

        assert results[0][0].id == results[1][0].id
        assert sorted(created for _, created in results) == [False, True]
        count = (await db.execute(select(func.count()).select_from(EmployeeRelation))).scalar()
        assert count == 1

        graph = await client.get(URL, headers=admin_headers)
        assert len(graph.json()["relations"]) == 1

    async def test_same_pair_different_type_allowed(self, client: AsyncClient, admin_headers, team):
        await client.post(f"{URL}/manage", json={"fromId": "m1", "toId": "e1", "type": "MANAGER"}, headers=admin_headers)
        res = await client.post(f"{URL}/manage", json={"fromId": "m1", "toId": "e1", "type": "COLLEAGUE"}, headers=admin_headers)
        assert res.status_code == 201

    async def test_self_relation_rejected(self, client: AsyncClient, admin_headers, team):
        """자기 자신과의 관계는 400."""
        res = await client.post(f"{URL}/manage", json={
            "fromId": "e1", "toId": "e1", "type": "COLLEAGUE",
        }, headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["detail"] == "An employee cannot be related to themselves"

    async def test_unknown_employee(self, client: AsyncClient, admin_headers, team):
        res = await client.post(f"{URL}/manage", json={
            "fromId": "m1", "toId": "ghost", "type": "MANAGER",
        }, headers=admin_headers)
        assert res.status_code == 404
        assert "ghost" in res.json()["detail"]

    async def test_invalid_type(self, client: AsyncClient, admin_headers, team):
        """허용되지 않은 유형은 400 + 필드 오류."""
        res = await client.post(f"{URL}/manage", json={
            "fromId": "m1", "toId": "e1", "type": "BOSS",
        }, headers=admin_headers)
        assert res.status_code == 400
        body = res.json()
        assert body["detail"] == "Invalid data"
        assert body["errors"][0]["field"] == "type"

    async def test_employee_forbidden(self, client: AsyncClient, identity, team):
        """관리자가 아니면 403."""
        identity.add_user("e1", "e1@company.com", "Eve", "One")
        res = await client.post(f"{URL}/manage", json={
            "fromId": "m1", "toId": "e2", "type": "MANAGER",
        }, headers=auth_header("e1"))
        assert res.status_code == 403

    async def test_missing_token(self, client: AsyncClient, team):
        res = await client.post(f"{URL}/manage", json={"fromId": "m1", "toId": "e1", "type": "MANAGER"})
        assert res.status_code == 401


class TestRelationChange:
    """관계 유형 변경 및 삭제 테스트."""

    async def test_change_type(self, client: AsyncClient, admin_headers, team):
        created = (await client.post(f"{URL}/manage", json={
            "fromId": "m1", "toId": "e1", "type": "MANAGER",
        }, headers=admin_headers)).json()
        res = await client.patch(URL, json={"id": created["id"], "type": "LEAD"}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["type"] == "LEAD"
        assert res.json()["id"] == created["id"]

    async def test_change_type_collision(self, client: AsyncClient, admin_headers, team):
        """같은 쌍에 이미 그 유형이 있으면 400."""
        manager = (await client.post(f"{URL}/manage", json={
            "fromId": "m1", "toId": "e1", "type": "MANAGER",
        }, headers=admin_headers)).json()
        await client.post(f"{URL}/manage", json={"fromId": "m1", "toId": "e1", "type": "LEAD"}, headers=admin_headers)
        res = await client.patch(URL, json={"id": manager["id"], "type": "LEAD"}, headers=admin_headers)
        assert res.status_code == 400

    async def test_delete_relation(self, client: AsyncClient, admin_headers, team):
        created = (await client.post(f"{URL}/manage", json={
            "fromId": "m1", "toId": "e1", "type": "MANAGER",
        }, headers=admin_headers)).json()
        res = await client.request("DELETE", URL, json={"id": created["id"]}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["success"] is True

        again = await client.request("DELETE", URL, json={"id": created["id"]}, headers=admin_headers)
        assert again.status_code == 404


class TestRelationGraph:
    """관계 그래프 조회 테스트."""

    async def test_graph_includes_endpoints(self, client: AsyncClient, admin_headers, team):
        await client.post(f"{URL}/manage", json={"fromId": "m1", "toId": "e1", "type": "MANAGER"}, headers=admin_headers)
        res = await client.get(URL, headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert {e["id"] for e in data["employees"]} == {"m1", "e1", "e2"}
        relation = data["relations"][0]
        assert relation["from"]["id"] == "m1"
        assert relation["to"]["firstName"] == "Eve"

        manager = next(e for e in data["employees"] if e["id"] == "m1")
        assert [r["toId"] for r in manager["relationsFrom"]] == ["e1"]
