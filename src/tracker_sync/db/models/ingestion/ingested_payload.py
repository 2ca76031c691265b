from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from tracker_sync.db.base import Base


class IngestedPayload(Base):
    """Raw provider response captured before normalization, one row per athlete fetch."""

    __tablename__ = "ingested_payloads"

    id: Mapped[int] = mapped_column(primary_key=True)

    provider: Mapped[str] = mapped_column(String, nullable=False)  # "api_football" | "balldontlie"
    entity_type: Mapped[str] = mapped_column(String, nullable=False)  # "athlete_sync"
    entity_key: Mapped[str] = mapped_column(String, nullable=False)  # provider player id

    # Kept when the athlete is deleted; the payload is still a record of what was fetched.
    athlete_id: Mapped[int | None] = mapped_column(
        ForeignKey("athlete_profiles.id", ondelete="SET NULL"),
        nullable=True,
    )

    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payload_json: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_ingested_payloads_lookup", "provider", "entity_key", "fetched_at"),
        Index("ix_ingested_payloads_athlete_fetched", "athlete_id", "fetched_at"),
    )
