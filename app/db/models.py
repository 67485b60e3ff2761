from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Float, String, Text, Integer, DateTime, JSON, UniqueConstraint, func

class Base(DeclarativeBase):
    pass

class StartSitNote(Base):
    """Admin-authored start/sit override. Any non-null override beats the calculated value."""
    __tablename__ = "start_sit_notes"
    __table_args__ = (UniqueConstraint("player_id", "week", "season", name="uq_start_sit_note_player_week"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    # Sleeper player_id, or a slug of the full name ("josh_allen") for hand-entered rows
    player_id: Mapped[str] = mapped_column(String(128), index=True)
    week: Mapped[int] = mapped_column(Integer, index=True)
    season: Mapped[int] = mapped_column(Integer, index=True)

    custom_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendation_override: Mapped[str | None] = mapped_column(String(16), nullable=True)   # start/sit/flex
    confidence_override: Mapped[str | None] = mapped_column(String(16), nullable=True)       # high/medium/low
    projection_override: Mapped[float | None] = mapped_column(Float, nullable=True)
    difficulty_override: Mapped[str | None] = mapped_column(String(16), nullable=True)       # Easy/Medium/Hard
    risk_level_override: Mapped[str | None] = mapped_column(String(16), nullable=True)       # Low/Medium/High
    reasoning_override: Mapped[list | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
