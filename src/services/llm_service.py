"""
LLM orchestration: multi-turn chat and schema-constrained JSON requests.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from config import API_KEY_ENV, MODEL_NAME, STRUCTURED_TEMPERATURE, TUTOR_TEMPERATURE

LOGGER = logging.getLogger("elasticsense.llm")

# {"role": "user" | "model", "parts": [{"text": "..."}]}
HistoryEntry = dict[str, Any]

STRUCTURED_OUTPUT_PROMPT = (
    "You must output ONLY valid JSON. Do not wrap it in markdown code fences and do not add any text "
    "outside the JSON. The JSON must conform to this JSON schema:\n"
)


def _history_to_messages(
    system_instruction: str,
    history: list[HistoryEntry],
    message: str,
) -> list[BaseMessage]:
    """
    Convert a replay history into LangChain chat messages.

    Args:
        system_instruction: System prompt placed first.
        history: Prior turns; role "user" or "model", text under parts.
        message: New user message appended last.

    Returns:
        Ordered list of messages ready for ``ainvoke``.

    Raises:
        ValueError: If a history entry has an unknown role.
    """
    messages: list[BaseMessage] = [SystemMessage(content=system_instruction)]
    for entry in history:
        text = "".join(str(part.get("text") or "") for part in entry.get("parts") or [])
        role = entry.get("role")
        if role == "user":
            messages.append(HumanMessage(content=text))
        elif role == "model":
            messages.append(AIMessage(content=text))
        else:
            raise ValueError(f"Unknown history role: {role!r}")
    messages.append(HumanMessage(content=message))
    return messages


def _strip_json_fences(raw: str) -> str:
    """Remove markdown code fences and surrounding whitespace from LLM output."""
    text = raw.strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*", "", text)
        text = re.sub(r"\s*```\s*$", "", text)
    return text.strip()


def _load_json(raw: str, embedded: str) -> Any:
    """Try raw, fence-stripped, then the first embedded match of *embedded*. None on failure."""
    for candidate in (raw, _strip_json_fences(raw)):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    match = re.search(embedded, raw)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            pass
    return None


def _extract_json_object(raw: str) -> dict[str, Any]:
    """Best-effort parse of a JSON object from model output. Returns {} on failure."""
    if not raw:
        return {}
    obj = _load_json(raw, r"\{[\s\S]*\}")
    return obj if isinstance(obj, dict) else {}


def _extract_json_array(raw: str) -> list[Any]:
    """Best-effort parse of a JSON array from model output. Returns [] on failure."""
    if not raw:
        return []
    arr = _load_json(raw, r"\[[\s\S]*\]")
    return arr if isinstance(arr, list) else []


async def _call_llm(messages: list[BaseMessage], api_key: str, temperature: float, model: str = MODEL_NAME) -> str:
    """
    Invoke OpenAI Chat asynchronously with the given messages.

    Args:
        messages: Full message list, system message first.
        api_key: OpenAI API key.
        temperature: Model temperature.
        model: OpenAI model name.

    Returns:
        Assistant response content.

    Raises:
        ValueError: If API key is missing, invalid, quota is insufficient or the call fails.
    """
    if not (api_key and api_key.strip()):
        raise ValueError("Please provide a valid OpenAI API key.")
    try:
        llm = ChatOpenAI(
            model=model,
            api_key=api_key.strip(),
            temperature=temperature,
        )
        response = await llm.ainvoke(messages)
        return str(response.content) if response.content else ""
    except Exception as e:
        err_msg = str(e).lower()
        if "invalid" in err_msg or "authentication" in err_msg or "incorrect api key" in err_msg:
            raise ValueError("The API key is invalid. Please check it and try again.") from e
        if "insufficient_quota" in err_msg or "quota" in err_msg or "rate limit" in err_msg:
            raise ValueError("API quota exhausted or rate limited. Please try again later.") from e
        raise ValueError(f"Error while calling the API: {e!s}") from e


class LLMProcessor:
    """Async model client used by the tutor, interview, quiz and architecture views."""

    def __init__(self, api_key: str | None = None, model: str = MODEL_NAME) -> None:
        self._api_key = api_key if api_key is not None else os.environ.get(API_KEY_ENV, "")
        self._model = model

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    def set_api_key(self, api_key: str) -> None:
        """Swap the key used by later calls (sidebar edits keep the open sessions)."""
        self._api_key = api_key

    async def converse(self, system_instruction: str, history: list[HistoryEntry], message: str) -> str:
        """
        Continue a conversation: replay *history* and send *message*.

        Args:
            system_instruction: System prompt for the whole conversation.
            history: Prior turns in replay shape ({"role", "parts": [{"text"}]}).
            message: New user message.

        Returns:
            Model reply text (may be empty).

        Raises:
            ValueError: If the API key is missing or the API call fails.
        """
        messages = _history_to_messages(system_instruction, history, message)
        reply = await _call_llm(messages, self._api_key, TUTOR_TEMPERATURE, self._model)
        LOGGER.info("converse(history=%d, reply_chars=%d)", len(history), len(reply))
        return reply

    async def generate_structured(
        self,
        prompt: str,
        schema: dict[str, Any],
        system_instruction: str | None = None,
    ) -> str:
        """
        Request a JSON payload conforming to *schema*.

        Args:
            prompt: User prompt describing the content to generate.
            schema: JSON-schema descriptor embedded in the system message.
            system_instruction: Optional extra system prompt placed before the schema.

        Returns:
            Raw model text, expected to be JSON; callers parse it best-effort.

        Raises:
            ValueError: If the API key is missing or the API call fails.
        """
        schema_text = json.dumps(schema, ensure_ascii=False, indent=2)
        system = f"{STRUCTURED_OUTPUT_PROMPT}{schema_text}"
        if system_instruction:
            system = f"{system_instruction.strip()}\n\n{system}"
        messages = [SystemMessage(content=system), HumanMessage(content=prompt)]
        raw = await _call_llm(messages, self._api_key, STRUCTURED_TEMPERATURE, self._model)
        LOGGER.info("generate_structured(reply_chars=%d)", len(raw))
        return raw
