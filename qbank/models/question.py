"""Question records as stored in the question bank.

Each line of the bank is a JSON object shaped like:

    {"question": "...", "answer": "C", "options": {"A": "...", ...}, "meta_info": "step1"}

Extra keys found in public USMLE dumps (`answer_idx`, `metamap_phrases`, ...)
are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

_STEP_RE = re.compile(r"^step\s*([12])")


@dataclass(frozen=True)
class Question:
    """A single multiple-choice vignette + its answer key."""

    question: str
    answer: str
    options: dict[str, str] = field(default_factory=dict)
    meta_info: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Question":
        """Validate a decoded JSON record and build a `Question`."""

        if not isinstance(payload, Mapping):
            raise ValueError(f"question record must be an object, got {type(payload).__name__}")

        text = payload.get("question")
        if not isinstance(text, str) or not text.strip():
            raise ValueError("question record is missing the 'question' text")

        options = payload.get("options")
        if not isinstance(options, Mapping) or not options:
            raise ValueError("question record needs a non-empty 'options' object")

        answer = payload.get("answer")
        if not isinstance(answer, str) or answer not in options:
            raise ValueError(f"answer {answer!r} is not one of the option keys {sorted(options)}")

        meta_info = payload.get("meta_info") or ""

        return cls(
            question=text,
            answer=answer,
            options={str(k): str(v) for k, v in options.items()},
            meta_info=str(meta_info),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "question": self.question,
            "answer": self.answer,
            "options": dict(self.options),
            "meta_info": self.meta_info,
        }

    @property
    def option_keys(self) -> list[str]:
        """Option keys in display order (A, B, C, ...)."""

        return sorted(self.options)

    @property
    def correct_option_text(self) -> str:
        return self.options.get(self.answer, "")

    def option_text(self, key: str) -> str:
        return self.options.get(key, "")

    def is_correct(self, key: str) -> bool:
        return key == self.answer

    @property
    def step(self) -> str | None:
        """Normalized step tag (`step1` / `step2`) parsed from `meta_info`.

        `step2&3` is reported as `step2`; anything else maps to None.
        """

        match = _STEP_RE.match(self.meta_info.strip().lower())
        if not match:
            return None
        return f"step{match.group(1)}"

    def summary(self, width: int = 100) -> str:
        """Truncated vignette used in the results review."""

        return f"{self.question[:width]}..."


@dataclass(frozen=True)
class UserAnswer:
    """One submitted answer, keyed by position in the quiz."""

    question_index: int
    selected_answer: str
    is_correct: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_index": self.question_index,
            "selected_answer": self.selected_answer,
            "is_correct": self.is_correct,
        }
