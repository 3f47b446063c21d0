"""Create scout commission tables.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

Scouts, artists and their tier payments, discoveries, the listener
network and the scout commission ledger.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_000001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, sa.DateTime(timezone=True), nullable=True)
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text('now()')
    )


def upgrade() -> None:
    """Create scout commission tables."""
    op.create_table(
        'scouts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column(
            'payout_account_id',
            sa.String(length=255),
            nullable=True,
            comment='Payment processor destination'
        ),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            server_default='ACTIVE'
        ),
        sa.Column(
            'total_earnings',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default='0'
        ),
        sa.Column(
            'total_commissions',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default='0'
        ),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'INACTIVE')",
            name='check_scout_status_valid'
        ),
        sa.CheckConstraint(
            'total_earnings >= 0',
            name='check_scout_total_earnings_non_negative'
        ),
        sa.CheckConstraint(
            'total_commissions >= 0',
            name='check_scout_total_commissions_non_negative'
        )
    )
    op.create_index('ix_scouts_status', 'scouts', ['status'])

    op.create_table(
        'artists',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column(
            'airplay_tier',
            sa.String(length=20),
            nullable=False,
            server_default='FREE'
        ),
        _timestamp('last_tier_upgrade', nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_artists_airplay_tier', 'artists', ['airplay_tier'])

    op.create_table(
        'airplay_payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('artist_id', sa.Integer(), nullable=False),
        sa.Column('tier', sa.String(length=20), nullable=False),
        sa.Column(
            'period',
            sa.String(length=7),
            nullable=False,
            comment='YYYY-MM'
        ),
        sa.Column(
            'amount',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default='0'
        ),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(
            ['artist_id'],
            ['artists.id'],
            ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'idx_airplay_payments_artist_period',
        'airplay_payments',
        ['artist_id', 'period']
    )

    op.create_table(
        'artist_discoveries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('scout_id', sa.Integer(), nullable=False),
        sa.Column('artist_id', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            server_default='DISCOVERED'
        ),
        sa.Column(
            'has_converted',
            sa.Boolean(),
            nullable=False,
            server_default=sa.false()
        ),
        _timestamp('converted_at', nullable=True),
        sa.Column(
            'is_prepurchase',
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment='Upfront purchase, locks the lifetime rate'
        ),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['scout_id'], ['scouts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['artist_id'], ['artists.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'scout_id', 'artist_id',
            name='uq_artist_discovery_scout_artist'
        ),
        sa.CheckConstraint(
            'has_converted = false OR converted_at IS NOT NULL',
            name='check_discovery_conversion_has_timestamp'
        )
    )
    op.create_index(
        'ix_artist_discoveries_scout_id', 'artist_discoveries', ['scout_id']
    )
    op.create_index(
        'ix_artist_discoveries_artist_id', 'artist_discoveries', ['artist_id']
    )
    op.create_index(
        'idx_artist_discovery_scout_status',
        'artist_discoveries',
        ['scout_id', 'status']
    )

    op.create_table(
        'listener_referrals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('scout_id', sa.Integer(), nullable=False),
        sa.Column('listener_id', sa.Integer(), nullable=False),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['scout_id'], ['scouts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'scout_id', 'listener_id',
            name='uq_listener_referral_scout_listener'
        )
    )
    op.create_index(
        'ix_listener_referrals_scout_id', 'listener_referrals', ['scout_id']
    )
    op.create_index(
        'ix_listener_referrals_listener_id',
        'listener_referrals',
        ['listener_id']
    )

    op.create_table(
        'listener_playbacks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('listener_id', sa.Integer(), nullable=False),
        sa.Column('artist_id', sa.Integer(), nullable=False),
        sa.Column('track_id', sa.String(length=100), nullable=True),
        sa.Column(
            'track_title',
            sa.String(length=300),
            nullable=False,
            server_default=''
        ),
        sa.Column('session_id', sa.String(length=100), nullable=True),
        sa.Column(
            'duration',
            sa.Integer(),
            nullable=True,
            comment='Seconds listened'
        ),
        sa.Column(
            'completed_track',
            sa.Boolean(),
            nullable=False,
            server_default=sa.false()
        ),
        _timestamp('played_at'),
        sa.ForeignKeyConstraint(['artist_id'], ['artists.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_listener_playbacks_artist_id', 'listener_playbacks', ['artist_id']
    )
    op.create_index(
        'idx_listener_playback_listener_artist_played',
        'listener_playbacks',
        ['listener_id', 'artist_id', 'played_at']
    )

    op.create_table(
        'scout_commissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('scout_id', sa.Integer(), nullable=False),
        sa.Column('artist_id', sa.Integer(), nullable=False),
        sa.Column('discovery_id', sa.Integer(), nullable=True),
        sa.Column(
            'commission_type',
            sa.String(length=20),
            nullable=False,
            server_default='RECURRING'
        ),
        sa.Column(
            'period',
            sa.String(length=7),
            nullable=False,
            comment='YYYY-MM'
        ),
        sa.Column('artist_tier', sa.String(length=20), nullable=False),
        sa.Column(
            'artist_payment',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            comment='Tier price at computation time'
        ),
        sa.Column(
            'commission_rate',
            sa.DECIMAL(precision=5, scale=4),
            nullable=False
        ),
        sa.Column(
            'months_since_conversion',
            sa.Integer(),
            nullable=False,
            server_default='0'
        ),
        sa.Column(
            'commission_amount',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False
        ),
        sa.Column(
            'bonus_amount',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default='0'
        ),
        sa.Column(
            'total_amount',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False
        ),
        sa.Column(
            'is_upgrade_bonus',
            sa.Boolean(),
            nullable=False,
            server_default=sa.false()
        ),
        sa.Column(
            'is_influence_bonus',
            sa.Boolean(),
            nullable=False,
            server_default=sa.false()
        ),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            server_default='PENDING'
        ),
        sa.Column('payout_id', sa.String(length=100), nullable=True),
        sa.Column('failure_reason', sa.Text(), nullable=True),
        _timestamp('paid_at', nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['scout_id'], ['scouts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['artist_id'], ['artists.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['discovery_id'],
            ['artist_discoveries.id'],
            ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'scout_id', 'artist_id', 'period',
            name='uq_scout_commission_scout_artist_period'
        ),
        sa.CheckConstraint(
            "status IN ('PENDING', 'PAID', 'FAILED')",
            name='check_scout_commission_status_valid'
        ),
        sa.CheckConstraint(
            'commission_amount >= 0',
            name='check_scout_commission_amount_non_negative'
        ),
        sa.CheckConstraint(
            'bonus_amount >= 0',
            name='check_scout_commission_bonus_non_negative'
        ),
        sa.CheckConstraint(
            'months_since_conversion >= 0',
            name='check_scout_commission_months_non_negative'
        )
    )
    op.create_index(
        'ix_scout_commissions_artist_id', 'scout_commissions', ['artist_id']
    )
    op.create_index(
        'idx_scout_commission_period_status',
        'scout_commissions',
        ['period', 'status']
    )
    op.create_index(
        'idx_scout_commission_scout_period',
        'scout_commissions',
        ['scout_id', 'period']
    )


def downgrade() -> None:
    """Drop scout commission tables."""
    op.drop_table('scout_commissions')
    op.drop_table('listener_playbacks')
    op.drop_table('listener_referrals')
    op.drop_table('artist_discoveries')
    op.drop_table('airplay_payments')
    op.drop_table('artists')
    op.drop_table('scouts')
