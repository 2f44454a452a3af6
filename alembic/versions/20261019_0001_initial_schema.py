"""Initial schema - version ledger, vocabulary and component tables

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Component tables in creation order
COMPONENT_TABLES = (
    'constellation',
    'name',
    'name_contributor',
    'date_range',
    'place_link',
    'scm',
    'language',
    'source',
    'biog_hist',
    'nationality',
    'gender',
    'legal_status',
    'subject',
    'occupation',
    'function',
    'otherid',
    'structure_genealogy',
    'general_context',
    'mandate',
    'convention_declaration',
    'related_identity',
    'related_resource',
)


def _versioned_table(name: str, *columns: sa.Column) -> None:
    """Create an append-only component table with the shared version columns."""
    op.create_table(
        name,
        sa.Column('row_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('main_id', sa.Integer(), nullable=False),
        sa.Column('owner_kind', sa.String(50), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, default=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        *columns,
    )
    op.create_index(f'ix_{name}_id_version', name, ['id', 'version'], unique=True)
    op.create_index(f'ix_{name}_owner', name, ['owner_kind', 'owner_id', 'version'])
    op.create_index(f'ix_{name}_main_id', name, ['main_id'])


def _text_table(name: str) -> None:
    _versioned_table(name, sa.Column('text', sa.Text(), nullable=False))


def _term_table(name: str) -> None:
    _versioned_table(name, sa.Column('term_id', sa.Integer(), nullable=True))


def upgrade() -> None:
    # Record id allocator
    op.create_table(
        'constellation_identity',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Version history ledger
    op.create_table(
        'version_history',
        sa.Column('row_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('main_id', sa.Integer(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_version_history_main_version', 'version_history', ['main_id', 'version'], unique=True)
    op.create_index('ix_version_history_main_status', 'version_history', ['main_id', 'status'])

    # Controlled vocabulary
    op.create_table(
        'vocabulary',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('uri', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
    )
    op.create_index('ix_vocabulary_type', 'vocabulary', ['type'])

    op.create_table(
        'geo_place',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('uri', sa.Text(), nullable=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('admin_code', sa.String(50), nullable=True),
        sa.Column('country_code', sa.String(10), nullable=True),
    )

    # Record core
    _versioned_table(
        'constellation',
        sa.Column('ark', sa.String(255), nullable=True),
        sa.Column('entity_type_id', sa.Integer(), nullable=True),
    )
    op.create_index('ix_constellation_ark', 'constellation', ['ark'])

    # Names
    _versioned_table(
        'name',
        sa.Column('original', sa.Text(), nullable=False),
        sa.Column('preference_score', sa.Integer(), nullable=True),
    )
    _versioned_table(
        'name_contributor',
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('type_id', sa.Integer(), nullable=True),
    )

    # Shared nested components
    _versioned_table(
        'date_range',
        sa.Column('is_range', sa.Boolean(), nullable=False, default=False),
        sa.Column('from_date', sa.String(32), nullable=True),
        sa.Column('from_original', sa.Text(), nullable=True),
        sa.Column('from_type_id', sa.Integer(), nullable=True),
        sa.Column('from_bc', sa.Boolean(), nullable=False, default=False),
        sa.Column('from_not_before', sa.String(32), nullable=True),
        sa.Column('from_not_after', sa.String(32), nullable=True),
        sa.Column('to_date', sa.String(32), nullable=True),
        sa.Column('to_original', sa.Text(), nullable=True),
        sa.Column('to_type_id', sa.Integer(), nullable=True),
        sa.Column('to_bc', sa.Boolean(), nullable=False, default=False),
        sa.Column('to_not_before', sa.String(32), nullable=True),
        sa.Column('to_not_after', sa.String(32), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
    )
    _versioned_table(
        'place_link',
        sa.Column('original', sa.Text(), nullable=True),
        sa.Column('confirmed', sa.Boolean(), nullable=False, default=False),
        sa.Column('score', sa.Float(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('type_id', sa.Integer(), nullable=True),
        sa.Column('role_id', sa.Integer(), nullable=True),
        sa.Column('geo_term_id', sa.Integer(), nullable=True),
    )
    _versioned_table(
        'scm',
        sa.Column('sub_citation', sa.Text(), nullable=True),
        sa.Column('source_data', sa.Text(), nullable=True),
        sa.Column('descriptive_rule_id', sa.Integer(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
    )
    _versioned_table(
        'language',
        sa.Column('language_id', sa.Integer(), nullable=True),
        sa.Column('script_id', sa.Integer(), nullable=True),
        sa.Column('vocabulary_source', sa.Text(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
    )
    _versioned_table(
        'source',
        sa.Column('text', sa.Text(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('uri', sa.Text(), nullable=True),
        sa.Column('type_id', sa.Integer(), nullable=True),
    )

    # Record-level components
    _text_table('biog_hist')
    for name in ('nationality', 'gender', 'legal_status', 'subject'):
        _term_table(name)
    _versioned_table(
        'occupation',
        sa.Column('term_id', sa.Integer(), nullable=True),
        sa.Column('vocabulary_source', sa.Text(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
    )
    _versioned_table(
        'function',
        sa.Column('function_type', sa.String(100), nullable=True),
        sa.Column('term_id', sa.Integer(), nullable=True),
        sa.Column('vocabulary_source', sa.Text(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
    )
    _versioned_table(
        'otherid',
        sa.Column('text', sa.Text(), nullable=True),
        sa.Column('uri', sa.Text(), nullable=True),
        sa.Column('type_id', sa.Integer(), nullable=True),
    )
    for name in ('structure_genealogy', 'general_context', 'mandate', 'convention_declaration'):
        _text_table(name)

    # Relations
    _versioned_table(
        'related_identity',
        sa.Column('target_constellation', sa.Integer(), nullable=True),
        sa.Column('target_ark', sa.String(255), nullable=True),
        sa.Column('target_entity_type_id', sa.Integer(), nullable=True),
        sa.Column('type_id', sa.Integer(), nullable=True),
        sa.Column('cpf_relation_type_id', sa.Integer(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
    )
    _versioned_table(
        'related_resource',
        sa.Column('document_type_id', sa.Integer(), nullable=True),
        sa.Column('entry_type_id', sa.Integer(), nullable=True),
        sa.Column('link', sa.Text(), nullable=True),
        sa.Column('role_id', sa.Integer(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('source', sa.Text(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
    )


def downgrade() -> None:
    for name in reversed(COMPONENT_TABLES):
        op.drop_table(name)
    op.drop_table('geo_place')
    op.drop_table('vocabulary')
    op.drop_table('version_history')
    op.drop_table('constellation_identity')
