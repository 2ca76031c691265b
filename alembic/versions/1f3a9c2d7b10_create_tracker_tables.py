"""Create tracker tables

Revision ID: 1f3a9c2d7b10
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "1f3a9c2d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def _athlete_fk(table: str) -> sa.Column:
    return sa.Column(
        "athlete_id",
        sa.Integer(),
        sa.ForeignKey(
            "athlete_profiles.id",
            name=f"fk_{table}_athlete_id_athlete_profiles",
            ondelete="CASCADE",
        ),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "athlete_profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("sport", sa.Enum("football", "basketball", name="sport_enum"), nullable=False),
        sa.Column("team", sa.String(length=120), nullable=True),
        sa.Column("league", sa.String(length=120), nullable=True),
        sa.Column("position", sa.String(length=64), nullable=True),
        sa.Column("jersey_number", sa.Integer(), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("api_football_id", sa.Integer(), nullable=True),
        sa.Column("balldontlie_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_athlete_profiles"),
        sa.UniqueConstraint("slug", name="uq_athlete_profiles_slug"),
    )
    op.create_index(
        "ix_athlete_profiles_sport_name", "athlete_profiles", ["sport", "name"], unique=False
    )

    op.create_table(
        "athlete_daily_updates",
        sa.Column("id", sa.Integer(), nullable=False),
        _athlete_fk("athlete_daily_updates"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("opponent", sa.String(length=120), nullable=True),
        sa.Column("competition", sa.String(length=120), nullable=True),
        sa.Column("home_away", sa.String(length=8), nullable=True),
        sa.Column("match_result", sa.String(length=16), nullable=True),
        sa.Column("played", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("minutes_played", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("stats", JSON_TYPE, nullable=False),
        sa.Column("injury_status", sa.String(length=32), nullable=True),
        sa.Column("injury_details", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_athlete_daily_updates"),
        sa.UniqueConstraint("athlete_id", "date", name="uq_athlete_daily_updates_athlete_date"),
    )
    op.create_index(
        "ix_athlete_daily_updates_athlete_id", "athlete_daily_updates", ["athlete_id"]
    )

    op.create_table(
        "athlete_season_stats",
        sa.Column("id", sa.Integer(), nullable=False),
        _athlete_fk("athlete_season_stats"),
        sa.Column("season", sa.String(length=16), nullable=False),
        sa.Column("competition", sa.String(length=120), nullable=False),
        sa.Column("games_played", sa.Integer(), nullable=True),
        sa.Column("games_started", sa.Integer(), nullable=True),
        sa.Column("stats", JSON_TYPE, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_athlete_season_stats"),
        sa.UniqueConstraint(
            "athlete_id",
            "season",
            "competition",
            name="uq_athlete_season_stats_athlete_season_competition",
        ),
    )
    op.create_index("ix_athlete_season_stats_athlete_id", "athlete_season_stats", ["athlete_id"])

    op.create_table(
        "athlete_upcoming_matches",
        sa.Column("id", sa.Integer(), nullable=False),
        _athlete_fk("athlete_upcoming_matches"),
        sa.Column("match_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("opponent", sa.String(length=120), nullable=False),
        sa.Column("competition", sa.String(length=120), nullable=False),
        sa.Column("home_away", sa.String(length=8), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_athlete_upcoming_matches"),
    )
    op.create_index(
        "ix_athlete_upcoming_matches_athlete_date",
        "athlete_upcoming_matches",
        ["athlete_id", "match_date"],
    )

    op.create_table(
        "athlete_live_matches",
        sa.Column("id", sa.Integer(), nullable=False),
        _athlete_fk("athlete_live_matches"),
        sa.Column("opponent", sa.String(length=120), nullable=False),
        sa.Column("competition", sa.String(length=120), nullable=False),
        sa.Column("kickoff_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "match_status",
            sa.Enum("scheduled", "live", "halftime", "finished", name="live_match_status_enum"),
            nullable=False,
        ),
        sa.Column("home_away", sa.String(length=8), nullable=True),
        sa.Column("current_minute", sa.Integer(), nullable=True),
        sa.Column("home_score", sa.Integer(), nullable=True),
        sa.Column("away_score", sa.Integer(), nullable=True),
        sa.Column("last_event", sa.String(), nullable=True),
        sa.Column("athlete_stats", JSON_TYPE, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_athlete_live_matches"),
    )
    op.create_index("ix_athlete_live_matches_athlete_id", "athlete_live_matches", ["athlete_id"])

    op.create_table(
        "ingested_payloads",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("provider", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_key", sa.String(), nullable=False),
        sa.Column(
            "athlete_id",
            sa.Integer(),
            sa.ForeignKey(
                "athlete_profiles.id",
                name="fk_ingested_payloads_athlete_id_athlete_profiles",
                ondelete="SET NULL",
            ),
            nullable=True,
        ),
        sa.Column("fetched_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payload_json", JSON_TYPE, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_ingested_payloads"),
    )
    op.create_index(
        "ix_ingested_payloads_lookup",
        "ingested_payloads",
        ["provider", "entity_key", "fetched_at"],
    )
    op.create_index(
        "ix_ingested_payloads_athlete_fetched",
        "ingested_payloads",
        ["athlete_id", "fetched_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_ingested_payloads_athlete_fetched", table_name="ingested_payloads")
    op.drop_index("ix_ingested_payloads_lookup", table_name="ingested_payloads")
    op.drop_table("ingested_payloads")
    op.drop_index("ix_athlete_live_matches_athlete_id", table_name="athlete_live_matches")
    op.drop_table("athlete_live_matches")
    op.drop_index(
        "ix_athlete_upcoming_matches_athlete_date", table_name="athlete_upcoming_matches"
    )
    op.drop_table("athlete_upcoming_matches")
    op.drop_index("ix_athlete_season_stats_athlete_id", table_name="athlete_season_stats")
    op.drop_table("athlete_season_stats")
    op.drop_index("ix_athlete_daily_updates_athlete_id", table_name="athlete_daily_updates")
    op.drop_table("athlete_daily_updates")
    op.drop_index("ix_athlete_profiles_sport_name", table_name="athlete_profiles")
    op.drop_table("athlete_profiles")
    sa.Enum(name="live_match_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="sport_enum").drop(op.get_bind(), checkfirst=True)
