"""Streamlit Web UI for prompt-tune.

Collects a raw prompt plus style and complexity, shows the staged pipeline
animation while the remote model works, then renders the analysis and three
editable variant cards with replace / append / copy actions.
"""

from __future__ import annotations

import asyncio
import logging
import os

logger = logging.getLogger(__name__)

import nest_asyncio
import streamlit as st
from dotenv import load_dotenv

load_dotenv()
nest_asyncio.apply()

from prompt_tune.config import load_config
from prompt_tune.models.request import ComplexityLevel, PromptStyle
from prompt_tune.models.stage import SEQUENCE, STEP_LABELS, PipelineStage, StepStatus, step_status
from prompt_tune.pipeline.optimizer import PromptOptimizer
from prompt_tune.pipeline.session import OptimizationSession
from prompt_tune.pipeline.stage_sequencer import StageSequencer

config = load_config()

# Streamlit Cloud: sync st.secrets → os.environ so the LLM client can read it
if config.llm.api_key_env not in os.environ:
    try:
        os.environ[config.llm.api_key_env] = st.secrets[config.llm.api_key_env]
    except Exception:
        logger.debug("No %s in st.secrets", config.llm.api_key_env)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="PromptTune",
    page_icon=":zap:",
    layout="wide",
)

STATUS_ICONS = {
    StepStatus.PENDING: ":material/radio_button_unchecked:",
    StepStatus.ACTIVE: ":material/autorenew:",
    StepStatus.COMPLETED: ":material/check_circle:",
    StepStatus.ERROR: ":material/error:",
}
STATUS_COLORS = {
    StepStatus.PENDING: "gray",
    StepStatus.ACTIVE: "violet",
    StepStatus.COMPLETED: "green",
    StepStatus.ERROR: "red",
}

# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

if "session" not in st.session_state:
    st.session_state.session = OptimizationSession(
        PromptOptimizer.from_config(config),
        StageSequencer(config.pipeline.stage_delays),
    )
    st.session_state.prompt_input = ""
    st.session_state.result_generation = 0

session: OptimizationSession = st.session_state.session


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _render_pipeline(container, stage: PipelineStage) -> None:
    """Draw the four scripted steps with their derived status."""
    with container.container():
        cols = st.columns(len(SEQUENCE))
        for col, step in zip(cols, SEQUENCE):
            status = step_status(stage, step)
            label, desc = STEP_LABELS[step]
            color = STATUS_COLORS[status]
            col.markdown(f"{STATUS_ICONS[status]} :{color}[**{label.upper()}**]")
            col.caption(desc)


def _on_replace(content: str) -> None:
    session.replace_input(content)
    st.session_state.prompt_input = session.input_text


def _on_append(content: str) -> None:
    session.input_text = st.session_state.prompt_input
    session.append_input(content)
    st.session_state.prompt_input = session.input_text


# ---------------------------------------------------------------------------
# Sidebar: configuration
# ---------------------------------------------------------------------------

with st.sidebar:
    st.title("PromptTune")
    st.caption("Configuration")

    session.style = st.radio(
        "Target style",
        list(PromptStyle),
        index=list(PromptStyle).index(session.style),
        format_func=lambda s: s.label,
        disabled=session.is_busy,
    )
    session.complexity = st.selectbox(
        "Complexity",
        list(ComplexityLevel),
        index=list(ComplexityLevel).index(session.complexity),
        format_func=lambda c: c.label,
        disabled=session.is_busy,
    )

    st.divider()
    st.markdown("**Pro tip**")
    st.caption(
        'For complex coding tasks pick the "Technical" style and "Chain-of-Thought" '
        "complexity so the model plans before it writes code."
    )

# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

st.header("Perfect your prompt in seconds")
st.markdown(
    "Enter a raw idea and the optimization pipeline structures, refines and "
    "turns it into a production-ready prompt."
)

st.text_area(
    "Prompt",
    key="prompt_input",
    height=250,
    placeholder="e.g. Write a blog post about coffee...",
    disabled=session.is_busy,
)
session.input_text = st.session_state.prompt_input
st.caption(f"{len(session.input_text)} characters")

submit = st.button(
    "Optimize prompt",
    type="primary",
    icon=":material/bolt:",
    disabled=not session.can_submit,
)

pipeline_slot = st.empty()
_render_pipeline(pipeline_slot, session.stage)

if submit:
    st.session_state.result_generation += 1
    # Fresh client per run: each asyncio.run gets its own event loop
    session.optimizer = PromptOptimizer.from_config(config)
    unsubscribe = session.subscribe(lambda s: _render_pipeline(pipeline_slot, s.stage))
    try:
        asyncio.run(session.submit())
    finally:
        unsubscribe()

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

if session.error and session.stage is PipelineStage.ERROR:
    st.error(session.error, icon=":material/error:")

result = session.visible_result
if result is not None:
    analysis = result.original_analysis
    with st.container(border=True):
        col_intent, col_score, col_issues = st.columns(3)
        col_intent.markdown("**Detected intent**")
        col_intent.write(analysis.intent_detected)
        col_score.markdown("**Clarity score**")
        col_score.progress(int(analysis.clarity_score), text=f"{analysis.clarity_score:g}/100")
        issues = analysis.issues[: config.pipeline.max_grammar_issues_shown]
        if issues:
            col_issues.markdown("**Fixed issues**")
            col_issues.markdown("\n".join(f"- :orange[{issue}]" for issue in issues))

    generation = st.session_state.result_generation
    cols = st.columns(max(len(result.variants), 1))
    for idx, (col, variant) in enumerate(zip(cols, result.variants)):
        with col, st.container(border=True):
            st.subheader(variant.title)
            if variant.tags:
                st.caption(" · ".join(tag.upper() for tag in variant.tags))

            # Edits stay local to this card until replaced or appended
            content = st.text_area(
                "Variant text",
                value=variant.content,
                key=f"variant_{generation}_{idx}",
                height=220,
                label_visibility="collapsed",
            )

            b_replace, b_append = st.columns(2)
            b_replace.button(
                "Replace",
                key=f"replace_{generation}_{idx}",
                icon=":material/arrow_upward:",
                on_click=_on_replace,
                args=(content,),
                use_container_width=True,
            )
            b_append.button(
                "Append",
                key=f"append_{generation}_{idx}",
                icon=":material/add:",
                on_click=_on_append,
                args=(content,),
                use_container_width=True,
            )
            with st.expander("Copy", icon=":material/content_copy:"):
                st.code(content, language=None)

            st.info(f"**Why it works:** {variant.reasoning}")

    usage = session.optimizer.last_usage
    if usage:
        st.caption(
            f"Tokens: {usage['input']} in / {usage['output']} out · "
            f"~${usage['cost_usd']:.4f} · {session.elapsed_seconds:.1f}s"
        )
