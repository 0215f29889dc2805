from pathlib import Path

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from qbank.models.annotation import AnnotationCanvas, DrawingTool
from qbank.models.quiz_session import round_half_up
from qbank.utils.pdf_generator import clamp_question_count, create_quiz_pdf

_FRONTEND_DIR = Path(__file__).parent / "frontend"
_annotation_overlay = components.declare_component("annotation_overlay", path=str(_FRONTEND_DIR))


def get_annotation_canvas(key_prefix="annotation", threshold=20.0):
    """Return the canvas model stored in session state, creating it on first use."""
    canvas_key = f"{key_prefix}_canvas"
    if canvas_key not in st.session_state:
        st.session_state[canvas_key] = AnnotationCanvas(threshold=threshold)
    return st.session_state[canvas_key]


def render_drawing_toolbar(canvas, key_prefix="annotation"):
    """
    Renders the cursor/pencil/eraser selector plus a "Clear All" button.
    Selecting a tool updates the canvas model in place.
    """
    tools = list(DrawingTool)
    labels = [f"{tool.icon} {tool.label}" for tool in tools]

    choice = st.radio(
        "Drawing tool",
        options=range(len(tools)),
        format_func=lambda i: labels[i],
        index=tools.index(canvas.tool),
        horizontal=True,
        key=f"{key_prefix}_tool",
    )
    if tools[choice] is not canvas.tool:
        canvas.set_tool(tools[choice])

    if st.button("× Clear All", key=f"{key_prefix}_clear", use_container_width=True):
        canvas.clear()
        st.rerun()


def render_annotation_overlay(canvas, clear_trigger=0, height=320, key_prefix="annotation"):
    """
    Renders the freehand scratch area. Pointer events come back from the
    browser in batches and are replayed on the Python canvas model.
    """
    canvas.sync_clear_trigger(clear_trigger)

    value = _annotation_overlay(
        paths=[p.to_dict() for p in canvas.visible_paths()],
        tool=canvas.tool.value,
        cursor=canvas.tool.pointer_cursor,
        height=height,
        key=f"{key_prefix}_overlay",
        default=None,
    )

    if canvas.apply_batch(value):
        st.rerun()


def render_progress_header(session):
    cols = st.columns([3, 1])
    with cols[0]:
        st.caption(f"Question {session.current_index + 1} of {len(session.questions)}")
    with cols[1]:
        st.caption(f"{round_half_up(session.progress)}% Complete")
    st.progress(min(1.0, session.progress / 100))


def render_option_buttons(session, key_prefix="quiz"):
    """
    One button per option (sorted keys). After submission the correct option
    is marked ✅ and a wrong pick ❌; buttons are disabled while feedback shows.
    """
    question = session.current_question
    for key in question.option_keys:
        is_selected = session.selected_answer == key
        marker = ""
        if session.show_feedback and question.is_correct(key):
            marker = "✅ "
        elif session.show_feedback and is_selected:
            marker = "❌ "

        if st.button(
            f"{marker}{key}. {question.options[key]}",
            key=f"{key_prefix}_opt_{session.current_index}_{key}",
            type="primary" if is_selected else "secondary",
            disabled=session.show_feedback,
            use_container_width=True,
        ):
            session.select_answer(key)
            st.rerun()


def render_feedback(session):
    question = session.current_question
    if session.is_selected_correct:
        st.success("✓ Correct")
    else:
        st.error(
            f"✗ Incorrect. The correct answer is **{question.answer}**: {question.correct_option_text}"
        )


def render_results(session):
    """Summary, per-question review and a compact table of the attempt."""
    st.markdown(f"<h1 style='text-align:center'>{session.percentage}%</h1>", unsafe_allow_html=True)
    st.markdown(
        f"<p style='text-align:center'>{session.score} out of {session.answered_count} correct</p>",
        unsafe_allow_html=True,
    )

    rows = session.review()
    for row in rows:
        with st.container(border=True):
            icon = "✅" if row["is_correct"] else "❌"
            st.markdown(f"{icon} **Q{row['index'] + 1}:** {row['summary']}")
            st.markdown(f"**Your answer:** {row['selected_answer']} - {row['selected_text']}")
            if not row["is_correct"]:
                st.markdown(f"**Correct answer:** {row['correct_answer']} - {row['correct_text']}")

    if rows:
        df = pd.DataFrame(
            [
                {
                    "Q": row["index"] + 1,
                    "Your answer": row["selected_answer"],
                    "Correct answer": row["correct_answer"],
                    "Result": "correct" if row["is_correct"] else "incorrect",
                }
                for row in rows
            ]
        )
        st.dataframe(df, use_container_width=True, hide_index=True)


def render_pdf_export(questions, default_count=10, filename="quiz-questions.pdf", key_prefix="pdf"):
    """
    Number picker (1..len) and a download button for the printable quiz.
    Each question lands on its own page, followed by the answer key.
    """
    if not questions:
        return

    total = len(questions)
    count = st.number_input(
        f"Number of questions (1-{total})",
        min_value=1,
        max_value=total,
        value=clamp_question_count(default_count, total),
        step=1,
        key=f"{key_prefix}_count",
    )
    st.caption("Each question will be on a separate page.")

    bytes_key = f"{key_prefix}_bytes"
    if st.button("Generate PDF", key=f"{key_prefix}_generate", use_container_width=True):
        with st.spinner("Generating..."):
            st.session_state[bytes_key] = create_quiz_pdf(questions, int(count))

    if st.session_state.get(bytes_key):
        st.download_button(
            "⬇️ Download PDF",
            data=st.session_state[bytes_key],
            file_name=filename,
            mime="application/pdf",
            key=f"{key_prefix}_download",
            use_container_width=True,
        )
