"""Simulation summary schema."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SimulationSummary(BaseModel):
    jobs_completed: int = Field(..., ge=0)
    incomplete_jobs: int = Field(..., ge=0)
    compliant_jobs: int = Field(..., ge=0)
    average_travel_seconds: int = Field(..., ge=0)
    compliance_rate: float = Field(..., ge=0.0, le=100.0, description="Percentage of jobs reached within the compliance window.")
    started_at: datetime
    finished_at: datetime
    ticks: int = Field(..., ge=0)

    @property
    def average_travel_minutes(self) -> int:
        return self.average_travel_seconds // 60
