"""Filtering, shuffling and pagination over an in-memory question list.

Pipeline used by the API and the in-process loader:

    filter (step, visual keywords) -> Fisher-Yates shuffle -> offset/limit slice

`total` in the result is the filtered count, independent of the page window.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence, TypeVar

from config import DEFAULT_VISUAL_KEYWORDS
from qbank.models.question import Question

T = TypeVar("T")

VISUAL_CONTENT_KEYWORDS: tuple[str, ...] = DEFAULT_VISUAL_KEYWORDS


class StepFilter(str, Enum):
    STEP1 = "step1"
    STEP2 = "step2"


def matches_step(question: Question, step: StepFilter | str | None) -> bool:
    if step is None:
        return True
    return question.step == StepFilter(step).value


def references_visual_content(question: Question, keywords: Iterable[str] | None = None) -> bool:
    """Heuristic: does the vignette or any option mention an image/figure?"""

    words = [k.lower() for k in (keywords if keywords is not None else VISUAL_CONTENT_KEYWORDS)]
    haystacks = [question.question.lower(), *(text.lower() for text in question.options.values())]
    return any(word in text for text in haystacks for word in words)


def filter_questions(
    questions: Iterable[Question],
    *,
    step: StepFilter | str | None = None,
    exclude_visual: bool = False,
    keywords: Iterable[str] | None = None,
) -> list[Question]:
    keyword_list = list(keywords) if keywords is not None else None
    selected: list[Question] = []
    for question in questions:
        if not matches_step(question, step):
            continue
        if exclude_visual and references_visual_content(question, keyword_list):
            continue
        selected.append(question)
    return selected


def shuffle_questions(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Fisher-Yates shuffle over a copy; the input is left untouched."""

    randint = rng.randint if rng is not None else random.randint
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def paginate(items: Sequence[T], offset: int, limit: int) -> list[T]:
    if offset < 0:
        raise ValueError(f"offset must be >= 0, got {offset}")
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    return list(items[offset : offset + limit])


@dataclass(frozen=True)
class QueryResult:
    """One page of questions plus the size of the filtered bank."""

    questions: list[Question] = field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 50

    def to_dict(self) -> dict[str, Any]:
        return {
            "questions": [q.to_dict() for q in self.questions],
            "total": self.total,
            "offset": self.offset,
            "limit": self.limit,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "QueryResult":
        return cls(
            questions=[Question.from_dict(q) for q in payload.get("questions") or []],
            total=int(payload.get("total", 0)),
            offset=int(payload.get("offset", 0)),
            limit=int(payload.get("limit", 0)),
        )


def query_questions(
    questions: Iterable[Question],
    *,
    limit: int = 50,
    offset: int = 0,
    step: StepFilter | str | None = None,
    exclude_visual: bool = False,
    keywords: Iterable[str] | None = None,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> QueryResult:
    """Filter, shuffle and slice a question list.

    A `seed` gives a stable permutation, so consecutive offsets walk the same
    order instead of reshuffling per page.
    """

    filtered = filter_questions(questions, step=step, exclude_visual=exclude_visual, keywords=keywords)
    if seed is not None:
        rng = random.Random(seed)
    shuffled = shuffle_questions(filtered, rng)
    page = paginate(shuffled, offset, limit)
    return QueryResult(questions=page, total=len(filtered), offset=offset, limit=limit)
