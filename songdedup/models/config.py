"""Engine configuration loaded from YAML."""

from pydantic import BaseModel, Field, field_validator

from songdedup.models.dedup import CheckOptions


class EngineConfig(BaseModel):
    """Top-level configuration for scans run from the command line"""

    options: CheckOptions = Field(default_factory=CheckOptions)
    log_level: str = Field("INFO", description="DEBUG, INFO, WARNING, ERROR")
    json_logs: bool = True
    large_corpus_warning: int = Field(
        2000,
        ge=1,
        description="Warn when a fuzzy check runs on more records than this",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
