"""App-level configuration.

Everything runs locally against a static question bank (JSON Lines, one
question per line). Values come from environment variables, optionally loaded
from a `.env` file next to the project.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parent

load_dotenv(ROOT / ".env")

DEFAULT_VISUAL_KEYWORDS: tuple[str, ...] = (
    "image",
    "figure",
    "photograph",
    "micrograph",
    "picture",
    "diagram",
    "shown below",
    "shown above",
    "shown in the",
    "illustrated",
    "illustration",
)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def _env_keywords(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return DEFAULT_VISUAL_KEYWORDS
    return tuple(k.strip().lower() for k in raw.split(",") if k.strip())


def _bank_path() -> Path:
    path = Path(os.getenv("QBANK_PATH", "questions/US_qbank.jsonl"))
    return path if path.is_absolute() else ROOT / path


@dataclass(frozen=True)
class AppConfig:
    """Configuration values used across the app."""

    # JSONL question bank, re-read on every request.
    question_bank_path: Path = field(default_factory=_bank_path)

    default_limit: int = _env_int("QBANK_DEFAULT_LIMIT", 50)

    # When set, the quiz UI fetches questions over HTTP instead of in-process.
    api_url: str = os.getenv("QBANK_API_URL", "").strip()
    api_host: str = os.getenv("QBANK_API_HOST", "0.0.0.0")
    api_port: int = _env_int("QBANK_API_PORT", 8000)
    api_timeout: float = _env_float("QBANK_API_TIMEOUT", 10.0)

    # Optional global seed for reproducible shuffles (leave empty for randomness).
    seed: int | None = int(os.getenv("QBANK_SEED")) if os.getenv("QBANK_SEED") else None

    log_level: str = os.getenv("QBANK_LOG_LEVEL", "INFO").upper()

    # Pixel distance within which the eraser removes a stroke.
    eraser_threshold: float = _env_float("QBANK_ERASER_THRESHOLD", 20.0)

    pdf_default_questions: int = _env_int("QBANK_PDF_QUESTIONS", 10)
    pdf_filename: str = "quiz-questions.pdf"

    visual_keywords: tuple[str, ...] = field(default_factory=lambda: _env_keywords("QBANK_VISUAL_KEYWORDS"))


CONFIG = AppConfig()
