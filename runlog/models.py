# runlog/models.py
from datetime import datetime, date
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import (
    String, Integer, BigInteger, Boolean, Date, DateTime, Float, Text, Index, func
)

class Base(DeclarativeBase):
    pass

class Activity(Base):
    __tablename__ = "activities"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    strava_id: Mapped[int] = mapped_column(BigInteger, unique=True)

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # kilometers; converted to miles on the read path
    distance: Mapped[float | None] = mapped_column(Float, nullable=True)
    moving_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    elapsed_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_elevation_gain: Mapped[float | None] = mapped_column(Float, nullable=True)
    average_heartrate: Mapped[float | None] = mapped_column(Float, nullable=True)
    calories: Mapped[float | None] = mapped_column(Float, nullable=True)
    average_speed: Mapped[float | None] = mapped_column(Float, nullable=True)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sport_type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # wall-clock time at the athlete's location, stored naive
    start_date_local: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    utc_offset: Mapped[float | None] = mapped_column(Float, nullable=True)

    location_city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    location_state: Mapped[str | None] = mapped_column(String(128), nullable=True)
    location_country: Mapped[str | None] = mapped_column(String(128), nullable=True)

    achievement_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    kudos_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comment_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    athlete_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    photo_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    trainer: Mapped[bool] = mapped_column(Boolean, default=False)
    commute: Mapped[bool] = mapped_column(Boolean, default=False)
    manual: Mapped[bool] = mapped_column(Boolean, default=False)
    private: Mapped[bool] = mapped_column(Boolean, default=False)
    flagged: Mapped[bool] = mapped_column(Boolean, default=False)

    workout_type: Mapped[int | None] = mapped_column(Integer, nullable=True)
    upload_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    external_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_activities_start_date", "start_date"),
    )

class TrainingBlock(Base):
    __tablename__ = "training_blocks"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    race_name: Mapped[str] = mapped_column(String(200))
    identifier: Mapped[str] = mapped_column(String(64))
    race_date: Mapped[date] = mapped_column(Date, index=True)
    start_date: Mapped[date] = mapped_column(Date)
    duration_weeks: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class StravaToken(Base):
    __tablename__ = "strava_tokens"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    access_token: Mapped[str] = mapped_column(String(512))
    refresh_token: Mapped[str] = mapped_column(String(512))
    # epoch seconds, as returned by the token endpoint
    expires_at: Mapped[int] = mapped_column(Integer)
    scope: Mapped[str | None] = mapped_column(Text, nullable=True)
    athlete_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
