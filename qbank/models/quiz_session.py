"""Quiz flow state for one pass over a page of questions.

The Streamlit page keeps a single `QuizSession` in `st.session_state` and calls
the transition methods from button callbacks:

    select_answer -> submit_answer -> next_question -> ... -> (complete) -> restart

`clear_trigger` increases on every question transition; the annotation overlay
watches it to wipe the scratch strokes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from qbank.models.question import Question, UserAnswer


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class QuizSession:
    """A quiz made of multiple questions, answered one at a time."""

    questions: list[Question] = field(default_factory=list)
    current_index: int = 0
    user_answers: list[UserAnswer] = field(default_factory=list)
    selected_answer: str = ""
    show_feedback: bool = False
    is_complete: bool = False
    clear_trigger: int = 0

    @property
    def current_question(self) -> Question | None:
        if 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def is_last_question(self) -> bool:
        return self.current_index >= len(self.questions) - 1

    def select_answer(self, key: str) -> None:
        """Highlight an option; locked once feedback is visible."""

        if self.show_feedback or self.is_complete:
            return
        question = self.current_question
        if question is None:
            return
        if key not in question.options:
            raise ValueError(f"unknown option {key!r}; expected one of {question.option_keys}")
        self.selected_answer = key

    def submit_answer(self) -> UserAnswer | None:
        if not self.selected_answer or self.show_feedback or self.is_complete:
            return None
        question = self.current_question
        if question is None:
            return None

        answer = UserAnswer(
            question_index=self.current_index,
            selected_answer=self.selected_answer,
            is_correct=question.is_correct(self.selected_answer),
        )
        self.user_answers.append(answer)
        self.show_feedback = True
        return answer

    def next_question(self) -> None:
        if not self.show_feedback or self.is_complete:
            return
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
            self.selected_answer = ""
            self.show_feedback = False
            self.clear_trigger += 1
        else:
            self.is_complete = True

    def restart(self) -> None:
        self.current_index = 0
        self.user_answers = []
        self.selected_answer = ""
        self.show_feedback = False
        self.is_complete = False
        self.clear_trigger += 1

    @property
    def answered_count(self) -> int:
        return len(self.user_answers)

    @property
    def score(self) -> int:
        return sum(1 for a in self.user_answers if a.is_correct)

    @property
    def percentage(self) -> int:
        if not self.user_answers:
            return 0
        return round_half_up(self.score / len(self.user_answers) * 100)

    @property
    def progress(self) -> float:
        """Share of the quiz reached, counting the question on screen."""

        if not self.questions:
            return 0.0
        return (self.current_index + 1) / len(self.questions) * 100

    @property
    def is_selected_correct(self) -> bool:
        question = self.current_question
        return question is not None and question.is_correct(self.selected_answer)

    def answer_for(self, index: int) -> UserAnswer | None:
        for answer in self.user_answers:
            if answer.question_index == index:
                return answer
        return None

    def review(self) -> list[dict[str, Any]]:
        """One row per answered question, in quiz order."""

        rows: list[dict[str, Any]] = []
        for index, question in enumerate(self.questions):
            answer = self.answer_for(index)
            if answer is None:
                continue
            rows.append(
                {
                    "index": index,
                    "summary": question.summary(),
                    "selected_answer": answer.selected_answer,
                    "selected_text": question.option_text(answer.selected_answer),
                    "correct_answer": question.answer,
                    "correct_text": question.correct_option_text,
                    "is_correct": answer.is_correct,
                }
            )
        return rows

    def to_dict(self) -> dict[str, Any]:
        return {
            "questions": [q.to_dict() for q in self.questions],
            "current_index": self.current_index,
            "user_answers": [a.to_dict() for a in self.user_answers],
            "selected_answer": self.selected_answer,
            "show_feedback": self.show_feedback,
            "is_complete": self.is_complete,
            "score": self.score,
            "percentage": self.percentage,
        }
