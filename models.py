from __future__ import annotations

from pydantic import BaseModel, Field


class LiveTotals(BaseModel):
    confirmed: int = Field(..., ge=0)
    deaths: int = Field(..., ge=0)
    recovered: int = Field(..., ge=0)
    active: int


class LiveCountry(BaseModel):
    name: str = Field(..., min_length=1)
    confirmed: int | None = None
    deaths: int | None = None
    recovered: int | None = None
    active: int | None = None


class LiveUpdate(BaseModel):
    global_totals: LiveTotals
    per_country: list[LiveCountry] = Field(default_factory=list)


class RefreshStatus(BaseModel):
    started_at: str | None = None
    finished_at: str | None = None
    synced: bool | None = None
    ingested_dates: int = 0
    failed_dates: list[str] = Field(default_factory=list)
    live_update: dict | None = None
    errors: list[str] = Field(default_factory=list)


class HealthStatus(BaseModel):
    last_date: str | None
    loaded_days: int
    refresh_in_progress: bool
    last_refresh: RefreshStatus | None = None
