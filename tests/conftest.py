"""
Shared fixtures: small in-memory question banks written to temp JSONL files.
"""

import json

import pytest

from qbank.models.question import Question


def make_record(idx, *, meta_info="step1", answer="A", text=None, options=None):
    return {
        "question": text or f"A {20 + idx}-year-old patient presents with finding number {idx}. What is the diagnosis?",
        "answer": answer,
        "options": options or {"A": f"Diagnosis {idx}A", "B": f"Diagnosis {idx}B", "C": f"Diagnosis {idx}C"},
        "meta_info": meta_info,
    }


@pytest.fixture
def records():
    """Ten records: 0-5 step1, 6-9 step2&3; #2 and #7 mention images."""
    rows = []
    for idx in range(10):
        meta = "step1" if idx < 6 else "step2&3"
        rows.append(make_record(idx, meta_info=meta, answer="ABC"[idx % 3]))
    rows[2]["question"] = "The image shown below is a chest radiograph of a 60-year-old smoker. What is the diagnosis?"
    rows[7]["options"]["C"] = "Lesion seen in the photograph"
    return rows


@pytest.fixture
def questions(records):
    return [Question.from_dict(r) for r in records]


@pytest.fixture
def write_bank(tmp_path):
    """Return a helper writing lines to a temp .jsonl file."""

    def _write(rows, name="bank.jsonl"):
        path = tmp_path / name
        lines = [r if isinstance(r, str) else json.dumps(r) for r in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def bank_path(write_bank, records):
    return write_bank(records)
