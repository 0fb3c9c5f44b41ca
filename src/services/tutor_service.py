"""
Tutor prompts: chat formatting hints, interview openers and module deep dives.
"""

from __future__ import annotations

import logging
from typing import Any

from catalog import CORE_KNOWLEDGE_BASE, SYSTEM_INSTRUCTION_BASE, ModuleDefinition
from config import MODULE_EMPTY_TEXT, MODULE_ERROR_TEXT

LOGGER = logging.getLogger("elasticsense.tutor")

FORMATTING_HINTS = """

  (IMPORTANT INSTRUCTIONS:
   1. Use **Bold** for emphasis.
   2. Use `code` for technical terms.
   3. DEFINE all acronyms on first use.
   4. Include a > "David's Tip" blockquote.
   5. Include [Link Title](URL) for Google/YouTube resources.)"""


def build_system_instruction(context: str | None = None) -> str:
    """Base tutor persona, optionally with extra context for one query."""
    if context:
        return f"{SYSTEM_INSTRUCTION_BASE}\n\nAdditional Context for this specific query: {context}"
    return SYSTEM_INSTRUCTION_BASE


def enhance_tutor_message(message: str) -> str:
    """Append the formatting hints the chat renderer relies on. Not shown to the user."""
    return f"{message}{FORMATTING_HINTS}"


def build_interview_opener(kind: str, level: str) -> str:
    return (
        f"Start a mock interview. You are a {level} level interviewer conducting a {kind} interview "
        "for an Elastic Solutions Architect role.\n\n"
        'If "Sales Discovery":\n'
        "- Act like a CTO or Director.\n"
        '- Focus on business value, ROI, and "Why Elastic?".\n'
        '- Challenge the user: "Splunk is already installed, why change?"\n\n'
        'If "Technical Deep Dive":\n'
        "- Act like a Principal Engineer.\n"
        "- Grill them on Sharding, Heap, ILM, and diagnosing latency.\n"
        '- Ask: "I have 500M docs and slow search. What do I check?"\n\n'
        "Start by asking the first question. Do not output anything else but the question."
    )


def build_module_prompt(module: ModuleDefinition) -> str:
    topics = ", ".join(module.topics)
    return (
        f'Write a "Deep Dive" study guide for the module: "{module.title}".\n'
        f"Cover these topics: {topics}.\n\n"
        "CRITICAL INSTRUCTIONS:\n"
        "1. Use the provided CORE KNOWLEDGE BASE for analogies (e.g. Cluster=Airport, Beats=Microwave).\n"
        "2. STRUCTURE: Use clear Headings (#), Subheadings (##), and Bullet points.\n"
        "3. FORMATTING: Use **Bold** for important terms. Use `code` for tech terms.\n"
        "4. DEFINITIONS: Define all acronyms like ILM (Index Lifecycle Management) on first use.\n"
        "5. VISUALS: Create ASCII diagrams or use Box-drawing characters to explain flows "
        "(e.g. Data -> Ingest -> Index).\n"
        '6. RESOURCES: Add a "Resources" section with [Google Search Links](url) and [YouTube Links](url) '
        "for key concepts.\n"
        '7. PERSONA: Teach me like I\'m a smart engineer preparing for a Solution Architect role. '
        'Switch between "Technical Details" and "Business Value".\n'
        '8. DAVID TIP: Include a random > "David\'s Tip" in a blockquote.\n\n'
        f"Context Data:\n{CORE_KNOWLEDGE_BASE}"
    )


async def load_module_guide(client: Any, module: ModuleDefinition) -> str:
    """
    Fetch a deep-dive study guide for one learning-path module.

    Args:
        client: Model client exposing ``converse``.
        module: Catalog module to write about.

    Returns:
        Markdown-subset text for the module renderer. A fixed fallback text on
        empty reply or any failure.
    """
    try:
        content = await client.converse(build_system_instruction(), [], build_module_prompt(module))
    except Exception:  # noqa: BLE001
        LOGGER.warning("module guide failed for %s", module.id, exc_info=True)
        return MODULE_ERROR_TEXT
    return content or MODULE_EMPTY_TEXT
