"""Environment-driven settings.

Read once and cached so the rest of the code depends on a typed object
instead of scattered ``os.getenv`` calls.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

EXTRACTION_STRATEGY_CHOICES = {"regex", "dom"}


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    openai_base_url: Optional[str]
    openai_model: str
    openai_image_model: str
    openai_timeout: float
    llm_max_attempts: int
    pdftotext_bin: str
    pdftotext_timeout: float
    extraction_strategy: str
    log_level: str


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}.")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}.")
    if value < 1:
        raise ValueError(f"{name} must be at least 1.")
    return value


def load_settings() -> Settings:
    """Build a :class:`Settings` from the current environment."""
    strategy = os.getenv("EXTRACTION_STRATEGY", "regex").strip().lower()
    if strategy not in EXTRACTION_STRATEGY_CHOICES:
        raise ValueError(
            f"EXTRACTION_STRATEGY must be one of {sorted(EXTRACTION_STRATEGY_CHOICES)}, "
            f"got {strategy!r}."
        )

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        openai_image_model=os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3"),
        openai_timeout=_float_env("OPENAI_TIMEOUT", 60.0),
        llm_max_attempts=_int_env("LLM_MAX_ATTEMPTS", 3),
        pdftotext_bin=os.getenv("PDFTOTEXT_BIN", "pdftotext"),
        pdftotext_timeout=_float_env("PDFTOTEXT_TIMEOUT", 30.0),
        extraction_strategy=strategy,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
