"""Configuration models and YAML loader for the preparedness scoring service."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class ScoringConfig(BaseModel):
    """Caps and weights for the preparedness scoring engine."""

    # Saturating caps: values at or above the cap score 100.
    mock_session_cap: float = Field(default=3.0, gt=0.0)
    question_cap: float = Field(default=10.0, gt=0.0)
    practice_hours_cap: float = Field(default=5.0, gt=0.0)

    # Role match blend
    match_overall_weight: float = Field(default=0.50, ge=0.0, le=1.0)
    match_skills_weight: float = Field(default=0.30, ge=0.0, le=1.0)
    match_experience_weight: float = Field(default=0.20, ge=0.0, le=1.0)

    # Preparation blend
    task_weight: float = Field(default=0.40, ge=0.0, le=1.0)
    mock_weight: float = Field(default=0.25, ge=0.0, le=1.0)
    question_weight: float = Field(default=0.20, ge=0.0, le=1.0)
    hours_weight: float = Field(default=0.10, ge=0.0, le=1.0)
    insights_bonus: float = Field(default=5.0, ge=0.0)

    # Base probability blend
    base_preparation_weight: float = Field(default=0.35, ge=0.0, le=1.0)
    base_role_match_weight: float = Field(default=0.30, ge=0.0, le=1.0)
    base_research_weight: float = Field(default=0.20, ge=0.0, le=1.0)
    base_hours_weight: float = Field(default=0.15, ge=0.0, le=1.0)

    # Historical adjustment
    neutral_success_rate: float = Field(default=50.0, ge=0.0, le=100.0)
    historical_weight: float = Field(default=0.30, ge=0.0, le=1.0)
    trend_weight: float = Field(default=0.10, ge=0.0, le=1.0)
    recent_window: int = Field(default=5, ge=1)
    success_outcomes: list[str] = Field(default_factory=lambda: ["offer", "accepted"])

    # Confidence buckets (count of present data sources, 0-5)
    high_confidence_min: int = Field(default=4, ge=0, le=5)
    medium_confidence_min: int = Field(default=2, ge=0, le=5)

    @field_validator("success_outcomes")
    @classmethod
    def normalize_outcomes(cls, v: list[str]) -> list[str]:
        cleaned = [o.lower().strip() for o in v if o.strip()]
        if not cleaned:
            msg = "success_outcomes must not be empty"
            raise ValueError(msg)
        return cleaned

    @model_validator(mode="after")
    def thresholds_ordered(self) -> "ScoringConfig":
        if self.medium_confidence_min > self.high_confidence_min:
            msg = "medium_confidence_min must not exceed high_confidence_min"
            raise ValueError(msg)
        return self


class LLMConfig(BaseModel):
    """Provider settings for narrative augmentation."""

    provider: str = "gemini"
    model: str | None = None
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_tokens: int = Field(default=2048, ge=256)


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/careerprep.db"


class APIConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
