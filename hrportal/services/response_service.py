"""응답 서비스 — 평가 양식 응답 제출 및 조회 비즈니스 로직.

Response Service — Submission and retrieval of form responses.

Submission guards (순서 고정):
    1. 배정 존재 (404)
    2. 요청자 == 배정 작성자 (403)
    3. 같은 배정에 대한 본인의 비동료(non-peer) 응답이 없어야 함 (400)
    4. 필수 질문마다 비어 있지 않은 문자열 답변 (400, 잘못된 키 목록)

저장된 응답은 수정되지 않는 감사 기록입니다.
"""

from typing import Any, Iterable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.form import Response
from hrportal.repositories.employee_repository import employee_repository
from hrportal.repositories.form_repository import assignment_repository, response_repository
from hrportal.schemas.form import FormResponseOut, Question, ResponseCreate, ResponseDetail
from hrportal.utils.exceptions import (
    ConflictError,
    FieldValidationError,
    ForbiddenError,
    NotFoundError,
)

DUPLICATE_SUBMISSION_MESSAGE: str = "You have already submitted this form."


def validate_answers(questions: Iterable[dict[str, Any]], answers: dict[str, Any]) -> list[dict[str, str]]:
    """답변을 양식 질문과 대조해 필드 오류 목록을 반환합니다.

    Check an answer map against a form's questions. Every non-optional
    question needs a non-empty string; any provided value must be a string.
    Keys that match no question are stored as-is.

    Returns:
        list[dict]: [{"field": 질문 ID, "message": 사유}] — 비어 있으면 유효
    """
    errors: list[dict[str, str]] = []
    checked: set[str] = set()
    for raw in questions:
        question = Question.model_validate(raw)
        checked.add(question.id)
        value = answers.get(question.id)
        if value is None:
            if not question.optional:
                errors.append({"field": question.id, "message": "This question is required"})
        elif not isinstance(value, str):
            errors.append({"field": question.id, "message": "Answer must be a string"})
        elif not value.strip() and not question.optional:
            errors.append({"field": question.id, "message": "This question is required"})
    for key, value in answers.items():
        if key not in checked and not isinstance(value, str):
            errors.append({"field": key, "message": "Answer must be a string"})
    return errors


class ResponseService:

    async def submit(
        self, db: AsyncSession, assignment_id: str, user_id: str, data: ResponseCreate
    ) -> FormResponseOut:
        """응답을 제출합니다.

        Raises:
            NotFoundError: 배정 없음
            ForbiddenError: 배정 작성자가 아님
            ConflictError: 이미 제출함
            FieldValidationError: 필수 답변 누락/형식 오류
        """
        assignment = await assignment_repository.get_with_form(db, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        if assignment.employee_id != user_id:
            raise ForbiddenError("This form is assigned to someone else")
        if await response_repository.find_non_peer(db, assignment_id, user_id):
            raise ConflictError(DUPLICATE_SUBMISSION_MESSAGE)

        errors = validate_answers(assignment.form.questions or [], data.answers)
        if errors:
            raise FieldValidationError(errors)

        response = await response_repository.create(db, {
            "assignment_id": assignment_id,
            "responder_id": user_id,
            "answers": data.answers,
            "is_peer": False,
        })
        return FormResponseOut.model_validate(response)

    async def list_mine_for_assignment(
        self, db: AsyncSession, assignment_id: str, user_id: str
    ) -> list[FormResponseOut]:
        responses = await response_repository.list_for_assignment(db, assignment_id, responder_id=user_id)
        return [FormResponseOut.model_validate(r) for r in responses]

    async def _to_details(self, db: AsyncSession, responses: Sequence[Response]) -> list[ResponseDetail]:
        # 배정이 삭제된 응답도 그대로 반환 (양식/대상 정보만 비어 있음)
        assignments = await assignment_repository.get_map_by_ids(
            db, [r.assignment_id for r in responses if r.assignment_id], with_details=True
        )
        responders = {
            e.id: e for e in await employee_repository.get_by_ids(db, list({r.responder_id for r in responses}))
        }
        details: list[ResponseDetail] = []
        for response in responses:
            assignment = assignments.get(response.assignment_id or "")
            responder = responders.get(response.responder_id)
            details.append(ResponseDetail(
                **FormResponseOut.model_validate(response).model_dump(),
                responder_name=responder.full_name if responder else None,
                responder_email=responder.email if responder else (assignment.employee_email if assignment else None),
                form_id=assignment.form_id if assignment else None,
                form_title=assignment.form.title if assignment else None,
                questions=assignment.form.questions if assignment else [],
                evaluation_target=assignment.evaluation_target if assignment else None,
            ))
        return details

    async def get_own_response(
        self, db: AsyncSession, assignment_id: str, response_id: UUID, user_id: str
    ) -> ResponseDetail:
        """응답자 본인만 조회 가능."""
        response = await response_repository.get_by_id(db, response_id)
        if response is None or response.assignment_id != assignment_id:
            raise NotFoundError("Response not found")
        if response.responder_id != user_id:
            raise ForbiddenError()
        return (await self._to_details(db, [response]))[0]

    async def list_all(self, db: AsyncSession) -> list[ResponseDetail]:
        return await self._to_details(db, await response_repository.list_recent(db))

    async def get_any(self, db: AsyncSession, response_id: UUID) -> ResponseDetail:
        response = await response_repository.get_by_id(db, response_id)
        if response is None:
            raise NotFoundError("Response not found")
        return (await self._to_details(db, [response]))[0]


response_service: ResponseService = ResponseService()
