"""Initial schema: users, vocabulary, progress and placement

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from core.database import GUID, StringList

revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('current_level', sa.String(2), nullable=False, server_default='N5'),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'vocabulary',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('word', sa.String(255), nullable=False),
        sa.Column('reading', sa.String(255), nullable=False),
        sa.Column('short_meaning', sa.String(500), nullable=False),
        sa.Column('detailed_explanation', sa.Text),
        sa.Column('example_sentences', StringList()),
        sa.Column('usage_notes', sa.Text),
        sa.Column('jlpt_level', sa.String(2), nullable=False),
        sa.Column('index_position', sa.Integer, nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint('jlpt_level', 'index_position', name='uq_vocabulary_level_position'),
    )
    op.create_index('ix_vocabulary_jlpt_level', 'vocabulary', ['jlpt_level'])

    op.create_table(
        'user_progress',
        sa.Column('user_id', GUID(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('current_vocab_index', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_word_id', GUID(), sa.ForeignKey('vocabulary.id', ondelete='SET NULL')),
        sa.Column('streak_days', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_study_date', sa.Date),
        sa.Column('words_learned_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('words_skipped_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )

    op.create_table(
        'user_vocab_status',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('user_id', GUID(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('vocab_id', GUID(), sa.ForeignKey('vocabulary.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='learning'),
        sa.Column('marked_at', sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'vocab_id', name='uq_user_vocab_status'),
    )
    op.create_index('ix_user_vocab_status_user_status', 'user_vocab_status', ['user_id', 'status'])

    op.create_table(
        'placement_questions',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('question_text', sa.Text, nullable=False),
        sa.Column('correct_answer', sa.String(500), nullable=False),
        sa.Column('wrong_answers', StringList()),
        sa.Column('difficulty_level', sa.String(2), nullable=False),
        sa.Column('order_index', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )

    op.create_table(
        'placement_test_results',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('user_id', GUID(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('test_score', sa.Integer, nullable=False),
        sa.Column('assigned_level', sa.String(2), nullable=False),
        sa.Column('completed_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        'ix_placement_test_results_user_completed',
        'placement_test_results',
        ['user_id', 'completed_at'],
    )


def downgrade() -> None:
    op.drop_table('placement_test_results')
    op.drop_table('placement_questions')
    op.drop_table('user_vocab_status')
    op.drop_table('user_progress')
    op.drop_table('vocabulary')
    op.drop_table('users')
