from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('activities',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('strava_id', sa.BigInteger, nullable=False, unique=True),
        sa.Column('name', sa.String(255)),
        sa.Column('distance', sa.Float),
        sa.Column('moving_time', sa.Integer),
        sa.Column('elapsed_time', sa.Integer),
        sa.Column('total_elevation_gain', sa.Float),
        sa.Column('average_heartrate', sa.Float),
        sa.Column('calories', sa.Float),
        sa.Column('average_speed', sa.Float),
        sa.Column('type', sa.String(64)),
        sa.Column('sport_type', sa.String(64)),
        sa.Column('start_date', sa.DateTime(timezone=True)),
        sa.Column('start_date_local', sa.DateTime),
        sa.Column('timezone', sa.String(64)),
        sa.Column('utc_offset', sa.Float),
        sa.Column('location_city', sa.String(128)),
        sa.Column('location_state', sa.String(128)),
        sa.Column('location_country', sa.String(128)),
        sa.Column('achievement_count', sa.Integer),
        sa.Column('kudos_count', sa.Integer),
        sa.Column('comment_count', sa.Integer),
        sa.Column('athlete_count', sa.Integer),
        sa.Column('photo_count', sa.Integer),
        sa.Column('trainer', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('commute', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('manual', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('private', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('flagged', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('workout_type', sa.Integer),
        sa.Column('upload_id', sa.BigInteger),
        sa.Column('external_id', sa.String(255)),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_activities_start_date', 'activities', ['start_date'])

    op.create_table('training_blocks',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('race_name', sa.String(200), nullable=False),
        sa.Column('identifier', sa.String(64), nullable=False),
        sa.Column('race_date', sa.Date, nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('duration_weeks', sa.Integer, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_training_blocks_race_date', 'training_blocks', ['race_date'])

    op.create_table('strava_tokens',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('access_token', sa.String(512), nullable=False),
        sa.Column('refresh_token', sa.String(512), nullable=False),
        sa.Column('expires_at', sa.Integer, nullable=False),
        sa.Column('scope', sa.Text),
        sa.Column('athlete_id', sa.BigInteger),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

def downgrade():
    op.drop_table('strava_tokens')
    op.drop_index('ix_training_blocks_race_date', table_name='training_blocks')
    op.drop_table('training_blocks')
    op.drop_index('idx_activities_start_date', table_name='activities')
    op.drop_table('activities')
