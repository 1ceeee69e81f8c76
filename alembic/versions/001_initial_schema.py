"""initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('provider', sa.String(length=32), nullable=False, server_default='email'),
        sa.Column('email_confirmed', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_sign_in_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Create profiles table (one row per user, same id)
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=320), nullable=True),
        sa.Column('batch', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    # Create user_roles table
    op.create_table(
        'user_roles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'role', name='uq_user_roles_user_id_role')
    )
    op.create_index(op.f('ix_user_roles_user_id'), 'user_roles', ['user_id'], unique=False)

    # Create companies table
    op.create_table(
        'companies',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.String(length=1024), nullable=True),
        sa.Column('website', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_companies_name'), 'companies', ['name'], unique=False)
    op.create_index(op.f('ix_companies_slug'), 'companies', ['slug'], unique=True)

    # Create reviews table
    op.create_table(
        'reviews',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('author_id', sa.String(length=36), nullable=False),
        sa.Column('company_id', sa.String(length=36), nullable=False),
        sa.Column('review_type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='pending'),
        sa.Column('position_applied_for', sa.String(length=255), nullable=True),
        sa.Column('batch', sa.String(length=32), nullable=True),
        sa.Column('timeline', sa.String(length=255), nullable=True),
        sa.Column('ctc_stipend', sa.String(length=255), nullable=True),
        sa.Column('final_offer_status', sa.String(length=255), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_reviews_author_id'), 'reviews', ['author_id'], unique=False)
    op.create_index(op.f('ix_reviews_company_id'), 'reviews', ['company_id'], unique=False)
    op.create_index(op.f('ix_reviews_review_type'), 'reviews', ['review_type'], unique=False)
    op.create_index(op.f('ix_reviews_status'), 'reviews', ['status'], unique=False)
    op.create_index(op.f('ix_reviews_created_at'), 'reviews', ['created_at'], unique=False)

    # Create placement_rounds table
    op.create_table(
        'placement_rounds',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('review_id', sa.String(length=36), nullable=False),
        sa.Column('round_order', sa.Integer(), nullable=False),
        sa.Column('round_type', sa.String(length=32), nullable=False),
        sa.Column('round_name', sa.String(length=255), nullable=True),
        sa.Column('difficulty', sa.Integer(), nullable=True),
        sa.Column('topics_covered', sa.Text(), nullable=True),
        sa.Column('sections', sa.Text(), nullable=True),
        sa.Column('pass_status', sa.String(length=32), nullable=True),
        sa.Column('tips', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_placement_rounds_review_id'), 'placement_rounds', ['review_id'], unique=False)

    # Create work_experience_details table
    op.create_table(
        'work_experience_details',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('review_id', sa.String(length=36), nullable=False),
        sa.Column('job_title', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=255), nullable=True),
        sa.Column('work_life_balance', sa.Integer(), nullable=True),
        sa.Column('culture_rating', sa.Integer(), nullable=True),
        sa.Column('learning_opportunities', sa.Text(), nullable=True),
        sa.Column('growth_prospects', sa.Text(), nullable=True),
        sa.Column('pros', sa.Text(), nullable=True),
        sa.Column('cons', sa.Text(), nullable=True),
        sa.Column('overall_experience', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        op.f('ix_work_experience_details_review_id'), 'work_experience_details', ['review_id'], unique=False
    )

    # Create placed_students table
    op.create_table(
        'placed_students',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('company_id', sa.String(length=36), nullable=False),
        sa.Column('student_name', sa.String(length=255), nullable=False),
        sa.Column('batch', sa.String(length=32), nullable=False),
        sa.Column('linkedin_url', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=255), nullable=True),
        sa.Column('package', sa.String(length=64), nullable=True),
        sa.Column('img_url', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_placed_students_company_id'), 'placed_students', ['company_id'], unique=False)
    op.create_index(op.f('ix_placed_students_batch'), 'placed_students', ['batch'], unique=False)


def downgrade() -> None:
    # Drop tables in reverse dependency order (indexes go with their tables)
    op.drop_table('placed_students')
    op.drop_table('work_experience_details')
    op.drop_table('placement_rounds')
    op.drop_table('reviews')
    op.drop_table('companies')
    op.drop_table('user_roles')
    op.drop_table('profiles')
    op.drop_table('users')
