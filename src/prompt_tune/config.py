"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    timeout: int = 60
    max_tokens: int = 4096
    temperature: float = 0.7
    api_key_env: str = "ANTHROPIC_API_KEY"

    def __post_init__(self) -> None:
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"llm.timeout must be between 1 and 600, got {self.timeout}")
        if not 256 <= self.max_tokens <= 32000:
            raise ValueError(f"llm.max_tokens must be between 256 and 32000, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"llm.temperature must be between 0.0 and 1.0, got {self.temperature}")
        if not self.api_key_env:
            raise ValueError("llm.api_key_env must not be empty")


@dataclass(frozen=True)
class PipelineConfig:
    output_language: str = "Uzbek"
    # PREPROCESSING, OPTIMIZING, GENERATING, FORMATTING
    stage_delays: tuple[float, ...] = (0.8, 1.0, 0.8, 0.6)
    max_grammar_issues_shown: int = 2

    def __post_init__(self) -> None:
        # YAML gives us a list; keep the frozen dataclass hashable
        object.__setattr__(self, "stage_delays", tuple(float(d) for d in self.stage_delays))
        if len(self.stage_delays) != 4:
            raise ValueError(
                f"pipeline.stage_delays needs exactly 4 values, got {len(self.stage_delays)}"
            )
        if any(d < 0 for d in self.stage_delays):
            raise ValueError("pipeline.stage_delays must not be negative")
        if not self.output_language.strip():
            raise ValueError("pipeline.output_language must not be empty")
        if self.max_grammar_issues_shown < 0:
            raise ValueError("pipeline.max_grammar_issues_shown must not be negative")


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
    )
