"""Create associations, properties and documents tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'associations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    # Unique name: concurrent intakes of a new association resolve to one row
    op.create_index('ix_associations_name', 'associations', ['name'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('association_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('unit_number', sa.String(50), nullable=False),
        sa.Column('address', sa.String(500)),
        sa.Column('property_type', sa.String(50), nullable=False, server_default='unit'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['association_id'], ['associations.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_properties_association_unit', 'properties', ['association_id', 'unit_number'])

    op.create_table(
        'documents',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('association_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('url', sa.String(1000), nullable=False),
        sa.Column('storage_path', sa.String(1000), nullable=False),
        sa.Column('file_type', sa.String(50)),
        sa.Column('file_size', sa.BigInteger()),
        sa.Column('category', sa.String(100), nullable=False, server_default='general'),
        sa.Column('folder_path', sa.String(1000)),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('uploaded_by', sa.String(255)),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['association_id'], ['associations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_documents_association_property', 'documents', ['association_id', 'property_id'])


def downgrade() -> None:
    op.drop_index('idx_documents_association_property', table_name='documents')
    op.drop_table('documents')
    op.drop_index('idx_properties_association_unit', table_name='properties')
    op.drop_table('properties')
    op.drop_index('ix_associations_name', table_name='associations')
    op.drop_table('associations')
