"""
Tests for filtering, shuffling and pagination.
"""

import random

import pytest

from qbank.query import (
    QueryResult,
    StepFilter,
    filter_questions,
    matches_step,
    paginate,
    query_questions,
    references_visual_content,
    shuffle_questions,
)


class TestFilters:
    """Tests for the step and visual-content filters."""

    def test_step1(self, questions):
        selected = filter_questions(questions, step="step1")
        assert len(selected) == 6
        assert all(q.meta_info == "step1" for q in selected)

    def test_step2_matches_step2_and_3(self, questions):
        selected = filter_questions(questions, step=StepFilter.STEP2)
        assert len(selected) == 4
        assert all(q.meta_info == "step2&3" for q in selected)

    def test_no_step_keeps_everything(self, questions):
        assert all(matches_step(q, None) for q in questions)

    def test_unknown_step_raises(self, questions):
        with pytest.raises(ValueError):
            filter_questions(questions, step="step3")

    def test_visual_keywords_scan_text_and_options(self, questions):
        assert references_visual_content(questions[2])
        assert references_visual_content(questions[7])
        assert not references_visual_content(questions[0])

    def test_visual_match_is_case_insensitive(self, questions):
        assert references_visual_content(questions[0], keywords=["PATIENT"])

    def test_exclude_visual(self, questions):
        selected = filter_questions(questions, exclude_visual=True)
        assert len(selected) == 8
        assert questions[2] not in selected
        assert questions[7] not in selected

    def test_custom_keywords(self, questions):
        selected = filter_questions(questions, exclude_visual=True, keywords=["finding number 1."])
        assert len(selected) == 9

    def test_filters_combine(self, questions):
        selected = filter_questions(questions, step="step2", exclude_visual=True)
        assert len(selected) == 3


class TestShuffle:
    """Tests for the Fisher-Yates shuffle."""

    def test_is_permutation(self, questions):
        shuffled = shuffle_questions(questions, random.Random(7))

        assert len(shuffled) == len(questions)
        assert sorted(q.question for q in shuffled) == sorted(q.question for q in questions)

    def test_input_not_mutated(self):
        items = list(range(20))
        shuffle_questions(items, random.Random(1))
        assert items == list(range(20))

    def test_same_seed_same_order(self):
        items = list(range(50))
        assert shuffle_questions(items, random.Random(3)) == shuffle_questions(items, random.Random(3))

    def test_changes_order(self):
        items = list(range(50))
        assert shuffle_questions(items, random.Random(3)) != items

    def test_small_inputs(self):
        assert shuffle_questions([]) == []
        assert shuffle_questions([1]) == [1]


class TestPaginate:
    """Tests for offset/limit slicing."""

    def test_window(self):
        assert paginate(list(range(10)), 2, 3) == [2, 3, 4]

    def test_past_the_end(self):
        assert paginate(list(range(10)), 8, 5) == [8, 9]
        assert paginate(list(range(10)), 20, 5) == []

    def test_zero_limit(self):
        assert paginate(list(range(10)), 0, 0) == []

    @pytest.mark.parametrize("offset, limit", [(-1, 5), (0, -1)])
    def test_negative_values_raise(self, offset, limit):
        with pytest.raises(ValueError):
            paginate(list(range(10)), offset, limit)


class TestQueryQuestions:
    """Tests for the full query pipeline."""

    def test_page_and_total(self, questions):
        result = query_questions(questions, limit=4, offset=0, rng=random.Random(0))

        assert isinstance(result, QueryResult)
        assert len(result.questions) == 4
        assert result.total == 10
        assert all(q in questions for q in result.questions)

    def test_total_is_post_filter_count(self, questions):
        result = query_questions(questions, limit=2, step="step1", exclude_visual=True)

        assert result.total == 5
        assert len(result.questions) == 2

    def test_total_independent_of_window(self, questions):
        result = query_questions(questions, limit=5, offset=9)

        assert result.total == 10
        assert len(result.questions) == 1
        assert (result.offset, result.limit) == (9, 5)

    def test_seed_gives_disjoint_pages(self, questions):
        first = query_questions(questions, limit=5, offset=0, seed=42)
        second = query_questions(questions, limit=5, offset=5, seed=42)

        texts = [q.question for q in first.questions + second.questions]
        assert len(set(texts)) == 10

    def test_to_dict_shape(self, questions):
        payload = query_questions(questions, limit=3, seed=1).to_dict()

        assert set(payload) == {"questions", "total", "offset", "limit"}
        assert set(payload["questions"][0]) == {"question", "answer", "options", "meta_info"}

    def test_from_dict_round_trip(self, questions):
        result = query_questions(questions, limit=3, seed=1)
        assert QueryResult.from_dict(result.to_dict()) == result
