"""배정 및 응답 API 테스트.

Assignment and response API tests — The caller's assignments, one-response
guard, required-answer validation and admin response browsing.
"""

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.form import Assignment, Response
from hrportal.services.response_service import DUPLICATE_SUBMISSION_MESSAGE, validate_answers
from tests.conftest import auth_header, make_employee

ASSIGNMENT_ID = "employee-eval-m1-e1-employee-form"


@pytest_asyncio.fixture
async def assignment(db: AsyncSession, identity, canonical_forms) -> Assignment:
    """매니저 m1이 직원 e1을 평가하는 배정."""
    identity.add_user("m1", "m1@company.com", "Jane", "Doe")
    identity.add_user("e1", "e1@company.com", "Eve", "One")
    await make_employee(db, "m1", "Jane", "Doe", is_manager=True)
    await make_employee(db, "e1", "Eve", "One")
    row = Assignment(
        id=ASSIGNMENT_ID,
        form_id="employee-form",
        employee_id="m1",
        employee_email="m1@company.com",
        evaluation_target={
            "type": "EMPLOYEE",
            "targetId": "e1",
            "targetName": "Eve One",
            "targetRole": "Employee",
            "targetDepartment": "",
        },
    )
    db.add(row)
    await db.flush()
    return row


def _url(assignment_id: str = ASSIGNMENT_ID) -> str:
    return f"/api/assignments/{assignment_id}/responses"


class TestValidateAnswers:
    """답변 검증 순수 함수 테스트."""

    QUESTIONS = [
        {"id": "q1", "label": "Required", "type": "text"},
        {"id": "q2", "label": "Optional", "type": "text", "optional": True},
    ]

    def test_valid(self):
        assert validate_answers(self.QUESTIONS, {"q1": "Great"}) == []

    def test_missing_required(self):
        errors = validate_answers(self.QUESTIONS, {"q2": "extra"})
        assert errors == [{"field": "q1", "message": "This question is required"}]

    def test_blank_required(self):
        assert validate_answers(self.QUESTIONS, {"q1": "   "})[0]["field"] == "q1"

    def test_non_string_answer(self):
        errors = validate_answers(self.QUESTIONS, {"q1": 5})
        assert errors == [{"field": "q1", "message": "Answer must be a string"}]

    def test_blank_optional_allowed(self):
        assert validate_answers(self.QUESTIONS, {"q1": "ok", "q2": ""}) == []


class TestMyAssignments:
    """내 배정 목록 테스트."""

    async def test_list_mine(self, client: AsyncClient, assignment):
        res = await client.get("/api/assignments", headers=auth_header("m1"))
        assert res.status_code == 200
        data = res.json()
        assert [a["id"] for a in data] == [ASSIGNMENT_ID]
        assert data[0]["hasResponse"] is False
        assert data[0]["formTitle"] == "Employee Performance Form"
        assert data[0]["evaluationTarget"]["targetName"] == "Eve One"

    async def test_other_employee_sees_nothing(self, client: AsyncClient, assignment):
        res = await client.get("/api/assignments", headers=auth_header("e1"))
        assert res.json() == []

    async def test_get_assignment_with_form(self, client: AsyncClient, assignment):
        res = await client.get(f"/api/assignments/{ASSIGNMENT_ID}", headers=auth_header("m1"))
        assert res.status_code == 200
        assert res.json()["form"]["id"] == "employee-form"

    async def test_get_foreign_assignment(self, client: AsyncClient, assignment):
        res = await client.get(f"/api/assignments/{ASSIGNMENT_ID}", headers=auth_header("e1"))
        assert res.status_code == 404


class TestSubmitResponse:
    """응답 제출 테스트."""

    async def test_submit(self, client: AsyncClient, assignment):
        res = await client.post(_url(), json={"answers": {"q1": "Always on time"}}, headers=auth_header("m1"))
        assert res.status_code == 201
        data = res.json()
        assert data["assignmentId"] == ASSIGNMENT_ID
        assert data["responderId"] == "m1"
        assert data["answers"] == {"q1": "Always on time"}

        listed = await client.get("/api/assignments", headers=auth_header("m1"))
        assert listed.json()[0]["hasResponse"] is True
        assert listed.json()[0]["submittedAt"] is not None

    async def test_duplicate_submission(self, client: AsyncClient, assignment):
        """같은 배정에 두 번째 제출은 400."""
        await client.post(_url(), json={"answers": {"q1": "First"}}, headers=auth_header("m1"))
        res = await client.post(_url(), json={"answers": {"q1": "Second"}}, headers=auth_header("m1"))
        assert res.status_code == 400
        assert res.json()["detail"] == DUPLICATE_SUBMISSION_MESSAGE

        mine = await client.get(_url(), headers=auth_header("m1"))
        assert len(mine.json()) == 1

    async def test_peer_flag_in_body_does_not_bypass_guard(
        self, client: AsyncClient, db: AsyncSession, assignment
    ):
        """본문의 isPeer 값은 무시되고 중복 제출은 계속 400."""
        await client.post(_url(), json={"answers": {"q1": "First"}}, headers=auth_header("m1"))
        for _ in range(2):
            res = await client.post(
                _url(), json={"answers": {"q1": "Again"}, "isPeer": True}, headers=auth_header("m1")
            )
            assert res.status_code == 400

        rows = (await db.execute(select(Response))).scalars().all()
        assert len(rows) == 1
        assert rows[0].is_peer is False

    async def test_missing_required_answer(self, client: AsyncClient, assignment):
        res = await client.post(_url(), json={"answers": {"q2": "Only optional"}}, headers=auth_header("m1"))
        assert res.status_code == 400
        body = res.json()
        assert body["detail"] == "Invalid data"
        assert body["errors"] == [{"field": "q1", "message": "This question is required"}]

    async def test_not_the_filler(self, client: AsyncClient, assignment):
        """배정 작성자가 아니면 403."""
        res = await client.post(_url(), json={"answers": {"q1": "Hi"}}, headers=auth_header("e1"))
        assert res.status_code == 403

    async def test_unknown_assignment(self, client: AsyncClient, assignment):
        res = await client.post(_url("nope"), json={"answers": {"q1": "Hi"}}, headers=auth_header("m1"))
        assert res.status_code == 404


class TestResponseBrowsing:
    """응답 조회 테스트."""

    async def test_own_response_detail(self, client: AsyncClient, assignment):
        created = (await client.post(_url(), json={"answers": {"q1": "Good"}}, headers=auth_header("m1"))).json()
        res = await client.get(f"{_url()}/{created['id']}", headers=auth_header("m1"))
        assert res.status_code == 200
        data = res.json()
        assert data["formTitle"] == "Employee Performance Form"
        assert data["responderName"] == "Jane Doe"

    async def test_admin_lists_all(self, client: AsyncClient, admin_headers, assignment):
        await client.post(_url(), json={"answers": {"q1": "Good"}}, headers=auth_header("m1"))
        res = await client.get("/api/responses", headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert len(data) == 1
        assert data[0]["evaluationTarget"]["targetId"] == "e1"

    async def test_employee_cannot_list_all(self, client: AsyncClient, assignment):
        res = await client.get("/api/responses", headers=auth_header("m1"))
        assert res.status_code == 403
