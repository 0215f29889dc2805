import logging
import os
import sys

import streamlit as st

sys.path.append(os.getcwd())

from config import CONFIG
from qbank.client import load_quiz_questions
from qbank.gui.components import (
    get_annotation_canvas,
    render_annotation_overlay,
    render_drawing_toolbar,
    render_feedback,
    render_option_buttons,
    render_pdf_export,
    render_progress_header,
    render_results,
)
from qbank.models.quiz_session import QuizSession
from qbank.store import QuestionBankError
from qbank.utils.helpers import set_global_seed
from qbank.utils.pdf_generator import create_results_pdf

logging.basicConfig(level=CONFIG.log_level)
logger = logging.getLogger("qbank.ui")

STEP_CHOICES = {"All steps": None, "Step 1": "step1", "Step 2": "step2"}

st.set_page_config(page_title="USMLE Quiz", page_icon="🩺", layout="wide")


def load_session(limit: int, step, exclude_visual: bool) -> None:
    """Fetch a fresh page of questions and start a new quiz over it."""

    st.session_state.load_error = ""
    st.session_state.results_pdf_bytes = None
    st.session_state.pdf_bytes = None
    try:
        with st.spinner("Loading questions..."):
            result = load_quiz_questions(CONFIG, limit=limit, step=step, exclude_visual=exclude_visual)
    except QuestionBankError as exc:
        logger.exception("Error loading questions")
        st.session_state.load_error = str(exc) or "Failed to load questions"
        st.session_state.quiz = QuizSession()
        return

    st.session_state.bank_total = result.total
    previous = st.session_state.get("quiz")
    st.session_state.quiz = QuizSession(
        questions=result.questions,
        clear_trigger=previous.clear_trigger + 1 if previous else 0,
    )


if "quiz" not in st.session_state:
    set_global_seed(CONFIG.seed)
    load_session(CONFIG.default_limit, None, False)

canvas = get_annotation_canvas(threshold=CONFIG.eraser_threshold)

# --- SIDEBAR ---
with st.sidebar:
    st.header("🩺 USMLE Quiz")

    with st.form("quiz_settings"):
        limit = st.number_input("Questions per quiz", min_value=1, max_value=1000, value=CONFIG.default_limit, step=1)
        step_label = st.selectbox("Step", options=list(STEP_CHOICES))
        exclude_visual = st.checkbox("Skip questions that reference images", value=False)
        if st.form_submit_button("🔄 Load new questions", use_container_width=True):
            load_session(int(limit), STEP_CHOICES[step_label], exclude_visual)
            canvas.clear()
            st.rerun()

    if st.session_state.get("bank_total") is not None:
        st.caption(f"{st.session_state.bank_total} matching questions in the bank")

    st.divider()
    st.subheader("✏️ Annotate")
    render_drawing_toolbar(canvas)

    st.divider()
    st.subheader("📄 Generate PDF")
    render_pdf_export(
        st.session_state.quiz.questions,
        default_count=CONFIG.pdf_default_questions,
        filename=CONFIG.pdf_filename,
    )

session = st.session_state.quiz

if st.session_state.get("load_error"):
    st.error(f"Error: {st.session_state.load_error}")
    st.stop()

if not session.questions:
    st.info("No questions available")
    st.stop()

# --- RESULTS ---
if session.is_complete:
    st.title("Quiz Complete")
    render_results(session)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Restart Quiz", type="primary", use_container_width=True):
            session.restart()
            st.session_state.results_pdf_bytes = None
            st.rerun()
    with col2:
        if st.session_state.get("results_pdf_bytes") is None:
            st.session_state.results_pdf_bytes = create_results_pdf(session)
        st.download_button(
            "⬇️ Download results (PDF)",
            data=st.session_state.results_pdf_bytes,
            file_name="quiz-results.pdf",
            mime="application/pdf",
            use_container_width=True,
        )
    st.stop()

# --- QUESTION ---
question = session.current_question
render_progress_header(session)

main_col, scratch_col = st.columns([3, 2])

with main_col:
    with st.container(border=True):
        if question.meta_info:
            st.caption(f"`{question.meta_info}`")
        st.markdown(f"#### {question.question}")

        render_option_buttons(session)

        if session.show_feedback:
            render_feedback(session)

        if not session.show_feedback:
            if st.button("Submit Answer", type="primary", disabled=not session.selected_answer, use_container_width=True):
                session.submit_answer()
                st.rerun()
        else:
            label = "View Results" if session.is_last_question else "Next Question →"
            if st.button(label, type="primary", use_container_width=True):
                session.next_question()
                st.rerun()

    st.metric("Current Score", f"{session.score} / {session.answered_count}")

with scratch_col:
    st.caption(f"Scratch pad: {canvas.tool.icon} {canvas.tool.label}")
    render_annotation_overlay(canvas, clear_trigger=session.clear_trigger)
