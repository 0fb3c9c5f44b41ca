"""
Conversation session: one open-ended exchange with the model (tutor or interview).

The transcript is a single list of immutable turns. Each turn carries an
``in_context`` flag; the replay history sent to the model is derived from the
flagged turns, so a failed exchange stays visible to the user but is never
replayed to the model.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Literal
from uuid import uuid4

from config import CHAT_ERROR_TEXT, INTERVIEW_START_ERROR_TEXT
from services.tutor_service import build_interview_opener, build_system_instruction, enhance_tutor_message

LOGGER = logging.getLogger("elasticsense.conversation")

Role = Literal["user", "model"]
Mode = Literal["tutor", "interview"]


class SessionState(enum.Enum):
    IDLE = "idle"
    AWAITING = "awaiting"


@dataclass(frozen=True)
class ChatTurn:
    """Single transcript entry. ``timestamp`` is only used for display keys."""

    role: Role
    text: str
    timestamp: float
    in_context: bool = True
    turn_id: str = field(default_factory=lambda: uuid4().hex)

    def to_history_entry(self) -> dict[str, Any]:
        return {"role": self.role, "parts": [{"text": self.text}]}


@dataclass(frozen=True)
class InterviewConfig:
    kind: str
    level: str


class ConversationSession:
    """
    Turn-based state machine for the tutor and mock-interview chats.

    At most one request is in flight: ``send`` and ``start`` are rejected
    while the session is awaiting a reply.
    """

    def __init__(self, client: Any, mode: Mode = "tutor", clock: Callable[[], float] = time.time) -> None:
        self._client = client
        self._clock = clock
        self._mode: Mode = mode
        self._turns: list[ChatTurn] = []
        self._pending: ChatTurn | None = None
        self._state = SessionState.IDLE
        self._interview: InterviewConfig | None = None
        self._last_error: str = ""
        # bumped by reset(); replies to requests issued before a reset are dropped
        self._epoch = 0

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state is SessionState.AWAITING

    @property
    def interview(self) -> InterviewConfig | None:
        return self._interview

    @property
    def last_error(self) -> str:
        return self._last_error

    @property
    def turns(self) -> list[ChatTurn]:
        """Display transcript, including the optimistic user turn while awaiting."""
        if self._pending is not None:
            return [*self._turns, self._pending]
        return list(self._turns)

    @property
    def history(self) -> list[dict[str, Any]]:
        """Replay history for the next model call."""
        return [turn.to_history_entry() for turn in self._turns if turn.in_context]

    def _new_turn(self, role: Role, text: str, in_context: bool = True) -> ChatTurn:
        return ChatTurn(role=role, text=text, timestamp=self._clock(), in_context=in_context)

    def reset(self, mode: Mode | None = None) -> None:
        """
        Clear the transcript and interview selection; optionally switch mode.

        A request still in flight is abandoned: its reply is discarded and the
        session is immediately idle again.
        """
        if mode is not None:
            self._mode = mode
        self._epoch += 1
        self._turns = []
        self._pending = None
        self._state = SessionState.IDLE
        self._interview = None
        self._last_error = ""

    async def start(self, kind: str, level: str) -> bool:
        """
        Open a mock interview and seed the transcript with the interviewer's first question.

        Args:
            kind: Interview track, e.g. "Technical Deep Dive".
            level: Interviewer seniority, e.g. "Senior".

        Returns:
            True when the opener arrived. False if rejected, reset while awaiting,
            or the request failed; on failure ``last_error`` is set and the
            interview stays unstarted.

        Raises:
            ValueError: If the session is not in interview mode.
        """
        if self._mode != "interview":
            raise ValueError("start() is only available in interview mode")
        if self.is_loading:
            return False
        self.reset()
        epoch = self._epoch
        self._state = SessionState.AWAITING
        try:
            opener = await self._client.converse(
                build_system_instruction(), [], build_interview_opener(kind, level)
            )
        except Exception:  # noqa: BLE001
            LOGGER.warning("interview start failed (kind=%s, level=%s)", kind, level, exc_info=True)
            if epoch == self._epoch:
                self._last_error = INTERVIEW_START_ERROR_TEXT
            return False
        finally:
            if epoch == self._epoch:
                self._state = SessionState.IDLE
        if epoch != self._epoch:
            LOGGER.info("interview opener discarded after reset (kind=%s)", kind)
            return False
        self._turns = [self._new_turn("model", opener)]
        self._interview = InterviewConfig(kind=kind, level=level)
        LOGGER.info("interview started (kind=%s, level=%s)", kind, level)
        return True

    async def send(self, user_text: str) -> ChatTurn | None:
        """
        Send one user message and append the model's reply.

        The user turn is visible immediately. On success the user and model
        turns enter the replay history together. On failure a fixed error turn
        is shown and neither turn is replayed to the model later.

        Args:
            user_text: Raw input from the chat box.

        Returns:
            The appended model or error turn; None if the input was blank, a
            request is already in flight (nothing is mutated in that case), or
            the session was reset before the reply arrived.
        """
        if not user_text.strip() or self.is_loading:
            return None
        epoch = self._epoch
        history = self.history
        user_turn = self._new_turn("user", user_text)
        self._pending = user_turn
        self._state = SessionState.AWAITING
        try:
            reply_text = await self._client.converse(
                build_system_instruction(), history, enhance_tutor_message(user_text)
            )
        except Exception:  # noqa: BLE001
            LOGGER.warning("chat request failed (mode=%s, history=%d)", self._mode, len(history), exc_info=True)
            if epoch != self._epoch:
                return None
            reply = self._new_turn("model", CHAT_ERROR_TEXT, in_context=False)
            self._turns.extend([replace(user_turn, in_context=False), reply])
        else:
            if epoch != self._epoch:
                LOGGER.info("chat reply discarded after reset (mode=%s)", self._mode)
                return None
            reply = self._new_turn("model", reply_text)
            self._turns.extend([user_turn, reply])
        finally:
            if epoch == self._epoch:
                self._pending = None
                self._state = SessionState.IDLE
        return reply
