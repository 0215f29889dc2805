"""Question bank loader (JSON Lines, one question per line)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from qbank.models.question import Question

logger = logging.getLogger(__name__)


class QuestionBankError(RuntimeError):
    """The question bank could not be read or parsed."""


def load_questions(path: str | Path | None = None) -> list[Question]:
    """Read the whole bank into memory.

    No caching: the file is re-read on every call so edits show up on the next
    request. Blank lines are skipped; an empty file yields an empty list.
    """

    if path is None:
        from config import CONFIG

        path = CONFIG.question_bank_path
    path = Path(path)

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuestionBankError(f"Cannot read question bank at {path}: {exc}") from exc

    questions: list[Question] = []
    # Only "\n" ends a record; JSON strings may hold raw U+2028 and similar.
    for line_no, line in enumerate(content.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise QuestionBankError(f"{path.name}:{line_no}: invalid JSON ({exc.msg})") from exc
        try:
            questions.append(Question.from_dict(payload))
        except ValueError as exc:
            raise QuestionBankError(f"{path.name}:{line_no}: {exc}") from exc

    logger.debug("Loaded %d questions from %s", len(questions), path)
    return questions
