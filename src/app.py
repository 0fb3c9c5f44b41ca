"""ElasticSense Coach main entry point (``streamlit run src/app.py``)."""

from __future__ import annotations

import asyncio
import enum
import logging
import os
import re
from typing import Any

import streamlit as st

from catalog import ELASTIC_MODULES, INTERVIEW_TRACKS, TUTOR_SUGGESTIONS, get_module
from config import (
    API_KEY_ENV,
    ARCHITECTURE_ERROR_TEXT,
    ELASTIC_DARK,
    ELASTIC_PINK,
    ELASTIC_TEAL,
    ELASTIC_YELLOW,
    NODE_TYPE_COLORS,
    PAGE_ICON,
    PAGE_TITLE,
    QUIZ_ERROR_TEXT,
    SIDEBAR_HEADER,
)
from services.architecture_service import ArchitectureDesign, ArchitectureService, NodeType
from services.conversation import ConversationSession
from services.llm_service import LLMProcessor
from services.quiz_generator import QuizGenerator, QuizSession
from services.text_blocks import (
    Blank,
    Block,
    Bold,
    Callout,
    Code,
    CodeOrDiagramLine,
    Heading,
    Link,
    ListItem,
    Paragraph,
    Plain,
    TextRun,
    render_chat,
    render_module,
)
from services.tutor_service import load_module_guide

LOGGER = logging.getLogger("elasticsense.app")


class ViewMode(enum.Enum):
    MODULES = "Learning Path"
    TUTOR = "AI Tutor"
    ARCH_BUILDER = "Architecture Sandbox"
    MOCK_INTERVIEW = "Mock Interview"
    QUIZ = "Quiz"


# sidebar order; flashcards stay out of navigation until they have a page
NAV_OPTIONS: list[str] = [v.value for v in ViewMode]


NODE_ICONS: dict[NodeType, str] = {
    NodeType.MASTER: "👑",
    NodeType.DATA: "🗄️",
    NodeType.COORDINATING: "🔀",
    NodeType.ML: "🧠",
    NodeType.INGEST: "📥",
}

_MD_SPECIAL = re.compile(r"([\\`*_\[\]<>#$|~])")


def _state(key: str, factory: Any) -> Any:
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def _client() -> LLMProcessor:
    client: LLMProcessor = _state("llm_client", lambda: LLMProcessor(api_key=""))
    client.set_api_key((st.session_state.get("api_key") or "").strip())
    return client


def _inject_css() -> None:
    st.markdown(
        f"""
        <style>
        [data-testid="stSidebar"] {{ background-color: {ELASTIC_DARK}; }}
        [data-testid="stSidebar"] * {{ color: #FFFFFF; }}
        .sidebar-header {{ font-weight: 800; font-size: 1.1rem; color: {ELASTIC_TEAL}; }}
        .node-card {{ border-radius: 12px; padding: 12px; text-align: center; margin-bottom: 8px; }}
        .tip-label {{ color: {ELASTIC_YELLOW}; font-weight: 700; letter-spacing: 0.1em; }}
        code {{ color: {ELASTIC_PINK}; }}
        </style>
        """,
        unsafe_allow_html=True,
    )


# ──────────────────────────────────────────────────────────────
# Block painter
# ──────────────────────────────────────────────────────────────

def _escape_md(text: str) -> str:
    return _MD_SPECIAL.sub(r"\\\1", text)


def _runs_to_markdown(runs: tuple[TextRun, ...]) -> str:
    parts: list[str] = []
    for run in runs:
        if isinstance(run, Plain):
            parts.append(_escape_md(run.text))
        elif isinstance(run, Code):
            parts.append(f"`{run.text}`")
        elif isinstance(run, Bold):
            parts.append(f"**{_escape_md(run.text)}**" if run.text else "")
        elif isinstance(run, Link):
            parts.append(f"[{_escape_md(run.label)} ↗]({run.url})")
        else:
            raise TypeError(f"Unhandled text run: {run!r}")
    return "".join(parts)


def _paint_blocks(blocks: list[Block]) -> None:
    """Paint rendered blocks; consecutive diagram lines share one code panel."""
    diagram: list[str] = []

    def flush() -> None:
        if diagram:
            st.code("\n".join(diagram), language=None)
            diagram.clear()

    for block in blocks:
        if isinstance(block, CodeOrDiagramLine):
            diagram.append(block.text)
            continue
        flush()
        if isinstance(block, Heading):
            st.markdown(f"{'#' * block.level} {_runs_to_markdown(block.runs)}")
        elif isinstance(block, Callout):
            st.info(f"**David's Tip**  \n{_runs_to_markdown(block.runs)}", icon="✨")
        elif isinstance(block, ListItem):
            marker = "-" if block.number is None else f"{block.number}."
            st.markdown(f"{marker} {_runs_to_markdown(block.runs)}")
        elif isinstance(block, Paragraph):
            st.markdown(_runs_to_markdown(block.runs))
        elif isinstance(block, Blank):
            st.write("")
        else:
            raise TypeError(f"Unhandled block: {block!r}")
    flush()


# ──────────────────────────────────────────────────────────────
# Pages
# ──────────────────────────────────────────────────────────────

def _require_api_key() -> bool:
    if _client().has_api_key:
        return True
    st.warning(f"Enter your OpenAI API key in the sidebar (or set {API_KEY_ENV}).")
    return False


def _render_modules_page() -> None:
    module = get_module(st.session_state.get("active_module_id") or "")
    if module is None:
        st.title("Learning Path")
        st.caption("Master the Elastic Stack, one module at a time.")
        columns = st.columns(3)
        for idx, item in enumerate(ELASTIC_MODULES):
            with columns[idx % 3]:
                st.markdown(f"### {item.icon} {item.title}")
                st.caption(item.description)
                st.markdown(" · ".join(f"`{t}`" for t in item.topics[:2]))
                if st.button("Start module", key=f"module_open_{item.id}"):
                    st.session_state["active_module_id"] = item.id
                    st.session_state.pop("module_content", None)
                    st.rerun()
        return

    if st.button("← Back to modules", key="module_back"):
        st.session_state.pop("active_module_id", None)
        st.session_state.pop("module_content", None)
        st.rerun()
    st.title(module.title)
    st.caption(module.description)
    if "module_content" not in st.session_state:
        with st.spinner("Writing your deep dive..."):
            st.session_state["module_content"] = asyncio.run(load_module_guide(_client(), module))
    _paint_blocks(render_module(st.session_state["module_content"]))


def _chat_session(mode: str) -> ConversationSession:
    session: ConversationSession = _state("chat_session", lambda: ConversationSession(_client(), mode=mode))
    if session.mode != mode:
        session.reset(mode)
    return session


def _send_and_rerun(session: ConversationSession, text: str) -> None:
    with st.chat_message("user"):
        _paint_blocks(render_chat(text))
    with st.spinner("Thinking..."):
        asyncio.run(session.send(text))
    st.rerun()


def _render_interview_picker(session: ConversationSession) -> None:
    st.title("Mock Interview")
    st.caption("Pick a track. The interviewer opens with the first question.")
    columns = st.columns(len(INTERVIEW_TRACKS))
    for column, (kind, level, blurb) in zip(columns, INTERVIEW_TRACKS):
        with column:
            st.markdown(f"### {kind}")
            st.caption(f"{level} interviewer")
            st.write(blurb)
            if st.button(f"Start {kind}", key=f"interview_start_{kind}", disabled=not _client().has_api_key):
                with st.spinner("Calling the interviewer..."):
                    started = asyncio.run(session.start(kind, level))
                if started:
                    st.rerun()
                st.error(session.last_error)
    _require_api_key()


def _render_chat_page(mode: str) -> None:
    session = _chat_session(mode)
    if mode == "interview" and session.interview is None:
        _render_interview_picker(session)
        return

    if mode == "tutor":
        st.title("AI Tutor")
    else:
        st.title(f"{session.interview.kind} Interview")
        if st.button("End Session", key="interview_end"):
            session.reset()
            st.rerun()

    if not session.turns and mode == "tutor":
        st.caption("Try one of these:")
        columns = st.columns(2)
        for idx, suggestion in enumerate(TUTOR_SUGGESTIONS):
            with columns[idx % 2]:
                if st.button(f'"{suggestion}"', key=f"tutor_suggestion_{idx}") and _require_api_key():
                    _send_and_rerun(session, suggestion)

    for turn in session.turns:
        with st.chat_message("user" if turn.role == "user" else "assistant"):
            _paint_blocks(render_chat(turn.text))

    placeholder = "Ask about Clusters, Nodes, or Vectors..." if mode == "tutor" else "Type your answer..."
    prompt = st.chat_input(placeholder, key=f"chat_input_{mode}", disabled=session.is_loading)
    if prompt and prompt.strip() and _require_api_key():
        _send_and_rerun(session, prompt)


def _render_node_cards(design: ArchitectureDesign) -> None:
    if not design.nodes:
        st.caption("No node roles were proposed.")
        return
    columns = st.columns(min(len(design.nodes), 5))
    for idx, node in enumerate(design.nodes):
        color = NODE_TYPE_COLORS[node.type.value]
        with columns[idx % len(columns)]:
            st.markdown(
                f"<div class='node-card' style='border: 1px solid {color};'>"
                f"<div style='font-size: 2rem;'>{NODE_ICONS[node.type]}</div>"
                f"<div style='color: {color}; font-weight: 700; text-transform: uppercase;'>{node.type.value}</div>"
                f"<div>× {node.count}</div></div>",
                unsafe_allow_html=True,
            )
            st.caption(node.specs)


def _render_architecture_page() -> None:
    st.title("Architecture Sandbox")
    st.caption(
        "Describe a customer workload. The AI designs a production-ready Elastic cluster topology, "
        "complete with ILM policies and cost analysis."
    )
    scenario = st.text_area(
        "Customer scenario",
        key="arch_scenario",
        placeholder="e.g. 2TB/day of security logs, 90 day retention, SOC team of 40 analysts",
    )
    if st.button("Generate architecture", key="arch_generate", disabled=not scenario.strip()):
        if _require_api_key():
            with st.spinner("Sizing shards and heap..."):
                design = asyncio.run(ArchitectureService(_client()).generate_design(scenario))
            if design is None:
                st.error(ARCHITECTURE_ERROR_TEXT)
            st.session_state["arch_design"] = design

    design = st.session_state.get("arch_design")
    if design is None:
        return
    _render_node_cards(design)
    col_nodes, col_shards, col_replicas = st.columns(3)
    col_nodes.metric("Total nodes", design.total_nodes)
    col_shards.metric("Primary shards / index", design.shards_per_index)
    col_replicas.metric("Replicas", design.replica_count)
    st.markdown("#### ILM policy")
    st.write(design.ilm_policy)
    st.markdown("#### Architect's summary")
    st.write(design.summary)
    st.markdown("#### Cost estimation")
    st.write(design.cost_estimation)


def _render_quiz_page() -> None:
    quiz: QuizSession = _state("quiz_session", QuizSession)
    question = quiz.current
    if question is None:
        st.title("Knowledge Check")
        if quiz.final_score is not None:
            st.success(f"Quiz Finished! Score: {quiz.final_score}/{quiz.final_total}")
        topic = st.selectbox("Topic", options=[m.title for m in ELASTIC_MODULES], key="quiz_topic")
        if st.button("Start Challenge", key="quiz_start") and _require_api_key():
            with st.spinner("Generating Scenarios..."):
                questions = asyncio.run(QuizGenerator(_client()).generate_quiz(topic))
            if not questions:
                st.error(QUIZ_ERROR_TEXT)
                return
            quiz.start(questions)
            st.rerun()
        return

    st.caption(f"Question {quiz.current_index + 1} of {len(quiz.questions)} · Score: {quiz.score}")
    st.markdown(f"### {_escape_md(question.question)}")
    for idx, option in enumerate(question.options):
        label = option
        if quiz.show_result and idx == question.correct_answer_index:
            label = f"✅ {option}"
        elif quiz.show_result and idx == quiz.selected_option:
            label = f"❌ {option}"
        if st.button(label, key=f"quiz_option_{quiz.current_index}_{idx}", disabled=quiz.show_result):
            quiz.answer(idx)
            st.rerun()

    if quiz.show_result:
        if quiz.selected_option == question.correct_answer_index:
            st.success("Correct!")
        else:
            st.error("Not quite.")
        st.info(question.explanation)
        if st.button("Next question →", key="quiz_next"):
            quiz.next_question()
            st.rerun()


def _render_sidebar() -> ViewMode:
    st.sidebar.markdown(f'<p class="sidebar-header">{SIDEBAR_HEADER}</p>', unsafe_allow_html=True)
    if "api_key" not in st.session_state:
        st.session_state["api_key"] = os.environ.get(API_KEY_ENV, "")
    st.sidebar.text_input("OpenAI API Key", type="password", key="api_key")
    label = st.sidebar.radio("Navigate", options=NAV_OPTIONS, key="nav_view")
    return ViewMode(label)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    st.set_page_config(page_title=PAGE_TITLE, page_icon=PAGE_ICON, layout="wide")
    _inject_css()
    view = _render_sidebar()
    if view is ViewMode.MODULES:
        _render_modules_page()
    elif view is ViewMode.TUTOR:
        _render_chat_page("tutor")
    elif view is ViewMode.MOCK_INTERVIEW:
        _render_chat_page("interview")
    elif view is ViewMode.ARCH_BUILDER:
        _render_architecture_page()
    elif view is ViewMode.QUIZ:
        _render_quiz_page()
    else:
        raise TypeError(f"Unhandled view: {view!r}")


if __name__ == "__main__":
    main()
