"""Initial migration - catalog, plans and transcripts

Revision ID: 001_initial
Revises:
Create Date: 2025-10-22
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Catalog courses
    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('course_code', sa.String(length=10), nullable=False),
        sa.Column('course_number', sa.String(length=10), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('units', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('course_code', 'course_number', name='unique_course_code_number')
    )
    op.create_index(op.f('ix_courses_id'), 'courses', ['id'], unique=False)
    op.create_index(op.f('ix_courses_course_code'), 'courses', ['course_code'], unique=False)

    # Student plans
    op.create_table(
        'student_plans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_student_plans_id'), 'student_plans', ['id'], unique=False)
    op.create_index(op.f('ix_student_plans_student_id'), 'student_plans', ['student_id'], unique=False)

    # Courses placed in plan terms
    op.create_table(
        'plan_courses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('term', sa.String(length=10), nullable=False),
        sa.Column('year', sa.String(length=4), nullable=False),
        sa.Column('term_order', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['plan_id'], ['student_plans.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('plan_id', 'course_id', name='unique_plan_course')
    )
    op.create_index(op.f('ix_plan_courses_id'), 'plan_courses', ['id'], unique=False)
    op.create_index(op.f('ix_plan_courses_plan_id'), 'plan_courses', ['plan_id'], unique=False)

    # Uploaded transcripts with their parsed course list
    op.create_table(
        'transcripts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('parsed_data', sa.JSON(), nullable=True),
        sa.Column('extraction_strategy', sa.String(length=20), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_transcripts_id'), 'transcripts', ['id'], unique=False)
    op.create_index(op.f('ix_transcripts_user_id'), 'transcripts', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_transcripts_user_id'), table_name='transcripts')
    op.drop_index(op.f('ix_transcripts_id'), table_name='transcripts')
    op.drop_table('transcripts')
    op.drop_index(op.f('ix_plan_courses_plan_id'), table_name='plan_courses')
    op.drop_index(op.f('ix_plan_courses_id'), table_name='plan_courses')
    op.drop_table('plan_courses')
    op.drop_index(op.f('ix_student_plans_student_id'), table_name='student_plans')
    op.drop_index(op.f('ix_student_plans_id'), table_name='student_plans')
    op.drop_table('student_plans')
    op.drop_index(op.f('ix_courses_course_code'), table_name='courses')
    op.drop_index(op.f('ix_courses_id'), table_name='courses')
    op.drop_table('courses')
