"""initial_hr_portal_schema

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-18 09:00:00.000000

HR 포털 초기 스키마: 직원, 관계, 온보딩, 양식/배정/응답, 교육 과정.
Initial HR portal schema: employees, relations, onboarding requests,
forms/assignments/responses and courses/employee_courses.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = 'a0b1c2d3e4f5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # employees — id는 인증 공급자 사용자 ID
    op.create_table(
        'employees',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, server_default=''),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('role', sa.String(100), nullable=True),
        sa.Column('is_manager', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_lead', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('profile_picture_url', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_employees_department', 'employees', ['department'])

    # employee_relations — 방향성 간선, (from, to, type) 유일
    op.create_table(
        'employee_relations',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('from_id', sa.String(64), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('to_id', sa.String(64), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('from_id', 'to_id', 'type', name='uq_employee_relation_from_to_type'),
    )
    op.create_index('ix_employee_relations_from_id', 'employee_relations', ['from_id'])
    op.create_index('ix_employee_relations_to_id', 'employee_relations', ['to_id'])

    # onboarding_requests — 사용자당 1건
    op.create_table(
        'onboarding_requests',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), server_default=''),
        sa.Column('last_name', sa.String(100), server_default=''),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('role', sa.String(100), nullable=True),
        sa.Column('is_manager', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_lead', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('manager_name', sa.String(255), nullable=True),
        sa.Column('profile_picture_url', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), server_default='PENDING', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_by', sa.String(64), nullable=True),
        sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejected_by', sa.String(64), nullable=True),
    )

    # forms — 질문 목록은 JSON
    op.create_table(
        'forms',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('questions', sa.JSON(), nullable=False),
        sa.Column('created_by', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # assignments — 자동 배정 ID는 내용 기반 문자열
    op.create_table(
        'assignments',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('form_id', sa.String(64), sa.ForeignKey('forms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('employee_id', sa.String(64), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('employee_email', sa.String(255), server_default=''),
        sa.Column('assigned_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('evaluation_target', sa.JSON(), nullable=True),
    )
    op.create_index('ix_assignments_form_id', 'assignments', ['form_id'])
    op.create_index('ix_assignments_employee_id', 'assignments', ['employee_id'])

    # responses — assignment_id는 FK 없음 (배정 삭제 후에도 보존)
    op.create_table(
        'responses',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('assignment_id', sa.String(255), nullable=True),
        sa.Column('responder_id', sa.String(64), nullable=False),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('is_peer', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_responses_assignment_id', 'responses', ['assignment_id'])
    op.create_index('ix_responses_responder_id', 'responses', ['responder_id'])

    # courses / employee_courses
    op.create_table(
        'courses',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), server_default='ACTIVE', nullable=False),
        sa.Column('color', sa.String(20), server_default='#10b981', nullable=False),
        sa.Column('link', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'employee_courses',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('employee_id', sa.String(64), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('course_id', UUID(as_uuid=True), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), server_default='ASSIGNED', nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('employee_id', 'course_id', name='uq_employee_course'),
    )
    op.create_index('ix_employee_courses_employee_id', 'employee_courses', ['employee_id'])
    op.create_index('ix_employee_courses_course_id', 'employee_courses', ['course_id'])


def downgrade() -> None:
    op.drop_table('employee_courses')
    op.drop_table('courses')
    op.drop_table('responses')
    op.drop_table('assignments')
    op.drop_table('forms')
    op.drop_table('onboarding_requests')
    op.drop_table('employee_relations')
    op.drop_table('employees')
