"""
Tests for question records and the JSONL question bank loader.
"""

import json

import pytest

from qbank.models.question import Question
from qbank.store import QuestionBankError, load_questions


class TestQuestion:
    """Tests for Question validation and helpers."""

    def test_from_dict_ignores_extra_keys(self):
        """Public dumps carry answer_idx / metamap_phrases."""
        q = Question.from_dict(
            {
                "question": "Q?",
                "answer": "B",
                "options": {"B": "two", "A": "one"},
                "meta_info": "step1",
                "answer_idx": "B",
                "metamap_phrases": ["x"],
            }
        )

        assert q.answer == "B"
        assert q.option_keys == ["A", "B"]
        assert q.correct_option_text == "two"
        assert set(q.to_dict()) == {"question", "answer", "options", "meta_info"}

    def test_missing_meta_info_defaults_to_empty(self):
        q = Question.from_dict({"question": "Q?", "answer": "A", "options": {"A": "x"}})
        assert q.meta_info == ""
        assert q.step is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"answer": "A", "options": {"A": "x"}},
            {"question": "Q?", "answer": "A", "options": {}},
            {"question": "Q?", "answer": "Z", "options": {"A": "x"}},
            {"question": "Q?", "options": {"A": "x"}},
        ],
    )
    def test_invalid_records_raise(self, payload):
        with pytest.raises(ValueError):
            Question.from_dict(payload)

    @pytest.mark.parametrize(
        "meta, step",
        [("step1", "step1"), ("step2&3", "step2"), ("Step 2", "step2"), ("", None), ("nbme", None)],
    )
    def test_step_normalization(self, meta, step):
        q = Question.from_dict({"question": "Q?", "answer": "A", "options": {"A": "x"}, "meta_info": meta})
        assert q.step == step

    def test_summary_truncates_to_100_chars(self):
        q = Question.from_dict({"question": "x" * 150, "answer": "A", "options": {"A": "y"}})
        assert q.summary() == "x" * 100 + "..."

    def test_option_text_unknown_key(self, questions):
        assert questions[0].option_text("Z") == ""


class TestLoadQuestions:
    """Tests for load_questions."""

    def test_loads_every_line(self, bank_path, records):
        questions = load_questions(bank_path)

        assert len(questions) == len(records)
        assert questions[0].question == records[0]["question"]

    def test_rereads_file_each_call(self, bank_path, records):
        """No caching between calls."""
        assert len(load_questions(bank_path)) == 10

        with bank_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(records[0]) + "\n")

        assert len(load_questions(bank_path)) == 11

    def test_blank_lines_are_skipped(self, write_bank, records):
        path = write_bank([records[0], "", "   ", records[1]])
        assert len(load_questions(path)) == 2

    def test_line_separator_inside_string(self, tmp_path, records):
        record = dict(records[0], question="First paragraph.\u2028Second paragraph.\u0085End.")
        path = tmp_path / "sep.jsonl"
        path.write_text(json.dumps(record, ensure_ascii=False) + "\r\n", encoding="utf-8")

        questions = load_questions(path)

        assert len(questions) == 1
        assert questions[0].question == record["question"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.jsonl"
        path.write_text("", encoding="utf-8")
        assert load_questions(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(QuestionBankError, match="Cannot read question bank"):
            load_questions(tmp_path / "nope.jsonl")

    def test_malformed_json_reports_line(self, write_bank, records):
        path = write_bank([records[0], "{not json", records[1]])

        with pytest.raises(QuestionBankError, match=r":2: invalid JSON") as excinfo:
            load_questions(path)

        assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)

    def test_invalid_record_reports_line(self, write_bank, records):
        path = write_bank([records[0], records[1], {"question": "Q?", "answer": "A"}])

        with pytest.raises(QuestionBankError, match=r":3:"):
            load_questions(path)

    def test_non_object_line(self, write_bank):
        path = write_bank(["[1, 2, 3]"])

        with pytest.raises(QuestionBankError, match="must be an object"):
            load_questions(path)

    def test_default_bank_is_readable(self):
        """The bundled sample bank parses cleanly."""
        questions = load_questions()
        assert questions
        assert all(q.answer in q.options for q in questions)
