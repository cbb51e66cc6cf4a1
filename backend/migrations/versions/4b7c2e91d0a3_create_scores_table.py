"""create scores table

Revision ID: 4b7c2e91d0a3
Revises:
Create Date: 2025-09-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7c2e91d0a3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'scores' in set(insp.get_table_names()):
        return

    op.create_table(
        'scores',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('seconds', sa.Integer(), nullable=False),
        sa.Column('moves', sa.Integer(), nullable=False),
        sa.Column('difficulty', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('scores') as batch_op:
        batch_op.create_index(batch_op.f('ix_scores_difficulty'), ['difficulty'], unique=False)
        batch_op.create_index(batch_op.f('ix_scores_created_at'), ['created_at'], unique=False)


def downgrade():
    with op.batch_alter_table('scores') as batch_op:
        batch_op.drop_index(batch_op.f('ix_scores_created_at'))
        batch_op.drop_index(batch_op.f('ix_scores_difficulty'))
    op.drop_table('scores')
