"""Create surveys, questions, options, responses and answers tables

Revision ID: 5e1a9c3d7b20
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = '5e1a9c3d7b20'
down_revision = None
branch_labels = None
depends_on = None

survey_status = sa.Enum('draft', 'active', 'closed', name='survey_status')


def upgrade() -> None:
    op.create_table(
        'surveys',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', survey_status, nullable=False, server_default='draft'),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_surveys_status', 'surveys', ['status'])
    op.create_index('ix_surveys_created_at', 'surveys', ['created_at'])

    op.create_table(
        'questions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('survey_id', sa.Uuid(),
                  sa.ForeignKey('surveys.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.String(500), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_questions_survey_id', 'questions', ['survey_id'])

    op.create_table(
        'options',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('question_id', sa.Uuid(),
                  sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.String(200), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_options_question_id', 'options', ['question_id'])

    op.create_table(
        'responses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('survey_id', sa.Uuid(),
                  sa.ForeignKey('surveys.id', ondelete='CASCADE'), nullable=False),
        sa.Column('participant_id', sa.String(100), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_responses_survey_id', 'responses', ['survey_id'])
    op.create_index('ix_responses_participant_id', 'responses', ['participant_id'])
    op.create_index('ix_responses_submitted_at', 'responses', ['submitted_at'])
    op.create_index('ix_responses_survey_participant', 'responses',
                    ['survey_id', 'participant_id'])

    op.create_table(
        'answers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('response_id', sa.Uuid(),
                  sa.ForeignKey('responses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', sa.Uuid(),
                  sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('selected_option_id', sa.Uuid(),
                  sa.ForeignKey('options.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('response_id', 'question_id', name='uq_answers_response_question'),
    )
    op.create_index('ix_answers_response_id', 'answers', ['response_id'])
    op.create_index('ix_answers_question_id', 'answers', ['question_id'])
    op.create_index('ix_answers_selected_option_id', 'answers', ['selected_option_id'])


def downgrade() -> None:
    op.drop_table('answers')
    op.drop_table('responses')
    op.drop_table('options')
    op.drop_table('questions')
    op.drop_table('surveys')
    survey_status.drop(op.get_bind(), checkfirst=True)
