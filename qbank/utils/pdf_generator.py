from __future__ import annotations

from typing import Any, Iterable

from fpdf import FPDF
from fpdf.enums import Align, XPos, YPos

from qbank.models.question import Question
from qbank.utils.helpers import ensure_text

MARGIN = 20


def clean_text(text: Any) -> str:
    text = ensure_text(text)

    replacements = {
        '–': '-', '—': '-', '“': '"', '”': '"', '„': '"', '‘': "'", '’': "'",
        '…': '...', '→': '->', '←': '<-', '≥': '>=', '≤': '<=', '±': '+/-',
        'α': 'alpha', 'β': 'beta', 'γ': 'gamma', 'δ': 'delta', 'κ': 'kappa', 'μ': 'u',
    }
    for char, replacement in replacements.items():
        text = text.replace(char, replacement)

    return text.encode('latin-1', 'replace').decode('latin-1')


class ExamPDF(FPDF):
    def __init__(self, header_title: str | None = None, *args: Any, **kwargs: Any):
        kwargs.setdefault("unit", "mm")
        kwargs.setdefault("format", "A4")
        super().__init__(*args, **kwargs)
        self._header_title = header_title
        self.set_margins(MARGIN, MARGIN, MARGIN)
        self.set_auto_page_break(True, margin=MARGIN)

    def header(self):
        if not self._header_title:
            return
        self.set_font('Helvetica', 'B', 15)
        self.set_text_color(0)
        self.cell(0, 10, clean_text(self._header_title), border=False, align=Align.C,
                  new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(5)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', size=8)
        self.set_text_color(150)
        self.cell(0, 10, f'Page {self.page_no()}', align=Align.C)

    def write_block(self, text: str, line_height: float, gap: float) -> None:
        self.multi_cell(0, line_height, clean_text(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(gap)


def _coerce_question(question: Question | dict[str, Any]) -> Question:
    """Support both `Question` objects and dict payloads."""

    if isinstance(question, Question):
        return question
    return Question.from_dict(question)


def clamp_question_count(requested: int | None, available: int, default: int = 10) -> int:
    if requested is None:
        requested = default
    return min(available, max(1, int(requested)))


def create_quiz_pdf(questions: Iterable[Question | dict[str, Any]], num_questions: int | None = None) -> bytes:
    """Printable quiz: one question per page, then an answer key.

    `num_questions` is clamped to 1..len(questions); the first N questions are
    exported in their current order.
    """

    questions_list = [_coerce_question(q) for q in questions]
    if not questions_list:
        raise ValueError("No questions to export")

    if num_questions is None:
        from config import CONFIG

        num_questions = CONFIG.pdf_default_questions

    count = clamp_question_count(num_questions, len(questions_list))
    to_export = questions_list[:count]

    pdf = ExamPDF()

    for idx, q in enumerate(to_export, start=1):
        pdf.add_page()

        pdf.set_font("Helvetica", size=10)
        pdf.set_text_color(100)
        pdf.cell(0, 6, f"Question {idx} of {count}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(4)

        pdf.set_font("Helvetica", size=12)
        pdf.set_text_color(0)
        pdf.write_block(q.question, 7, 10)

        for key in q.option_keys:
            pdf.write_block(f"{key}. {q.options[key]}", 7, 5)

    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.set_text_color(0)
    pdf.cell(0, 10, "Answer Key", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(5)

    pdf.set_font("Helvetica", size=10)
    for idx, q in enumerate(to_export, start=1):
        if pdf.get_y() > pdf.h - 30:
            pdf.add_page()
        pdf.write_block(f"{idx}. {q.answer} - {q.correct_option_text}", 6, 4)

    return bytes(pdf.output())


def create_results_pdf(session: Any) -> bytes:
    """Results report for a finished quiz (summary + one entry per answer)."""

    rows = session.review()

    pdf = ExamPDF(header_title="USMLE Quiz - Results")
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 8, f"Score: {session.percentage}%", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=11)
    pdf.cell(0, 7, f"{session.score} out of {session.answered_count} correct", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    for row in rows:
        if pdf.get_y() > pdf.h - 50:
            pdf.add_page()

        verdict = "correct" if row["is_correct"] else "incorrect"
        pdf.set_font("Helvetica", "B", 11)
        pdf.set_text_color(0)
        pdf.cell(0, 7, f"Q{row['index'] + 1} ({verdict})", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.set_font("Helvetica", size=10)
        pdf.set_text_color(100)
        pdf.write_block(row["summary"], 5, 1)

        pdf.set_text_color(0)
        pdf.write_block(f"Your answer: {row['selected_answer']} - {row['selected_text']}", 5, 1)
        if not row["is_correct"]:
            pdf.write_block(f"Correct answer: {row['correct_answer']} - {row['correct_text']}", 5, 1)
        pdf.ln(3)

    return bytes(pdf.output())
