"""Configuration contracts."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

DEFAULT_BASE_URL = "https://challenge.crossmint.io/api"


class MegaverseConfig(BaseModel):
    candidate_id: str = Field(min_length=1)
    base_url: str = DEFAULT_BASE_URL
    parallel_degree: int = Field(default=3, ge=1, le=20)
    max_retry_attempts: int = Field(default=5, ge=0, le=20)
    backoff_seconds: float = Field(default=2.0, ge=0)
    max_backoff_seconds: float = Field(default=30.0, ge=0)
    jitter_factor: float = Field(default=0.5, ge=0, le=1)
    request_delay_seconds: float = Field(default=1.0, ge=0)
    timeout_seconds: float = Field(default=30.0, gt=0)
    goal_path_template: str = "/map/{candidate_id}/goal"
    map_path_template: str = "/map/{candidate_id}"

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_templates(self) -> MegaverseConfig:
        if not self.candidate_id.strip():
            raise ValueError("candidate_id must not be blank")
        for name in ("goal_path_template", "map_path_template"):
            template = getattr(self, name)
            if "{candidate_id}" not in template:
                raise ValueError(f"{name} must contain '{{candidate_id}}'")
        return self

    @property
    def goal_path(self) -> str:
        return self.goal_path_template.format(candidate_id=self.candidate_id)

    @property
    def map_path(self) -> str:
        return self.map_path_template.format(candidate_id=self.candidate_id)
