"""
Markdown-subset renderer: turns model text into typed presentation blocks.

Two rulesets are supported. ``module`` (deep-dive study guides) knows headings,
bullet lists and numbered lists; ``chat`` (tutor and interview transcripts) only
knows tips, diagram lines, blanks and paragraphs. Every input line yields exactly
one block and inline formatting never crosses a line boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

Ruleset = Literal["chat", "module"]

MAX_HEADING_LEVEL = 3
_DIAGRAM_MARKERS = ("+--", "|", "-->")
_BULLET_MARKERS = ("- ", "• ")


# ──────────────────────────────────────────────────────────────
# Inline runs
# ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Plain:
    text: str


@dataclass(frozen=True)
class Code:
    text: str


@dataclass(frozen=True)
class Bold:
    text: str


@dataclass(frozen=True)
class Link:
    label: str
    url: str


TextRun = Union[Plain, Code, Bold, Link]


# ──────────────────────────────────────────────────────────────
# Blocks
# ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Paragraph:
    runs: tuple[TextRun, ...]


@dataclass(frozen=True)
class Heading:
    level: int
    runs: tuple[TextRun, ...]


@dataclass(frozen=True)
class ListItem:
    """Bullet when ``number`` is None, otherwise a numbered item."""

    number: int | None
    runs: tuple[TextRun, ...]


@dataclass(frozen=True)
class Callout:
    runs: tuple[TextRun, ...]
    kind: str = "tip"


@dataclass(frozen=True)
class CodeOrDiagramLine:
    text: str


@dataclass(frozen=True)
class Blank:
    pass


Block = Union[Paragraph, Heading, ListItem, Callout, CodeOrDiagramLine, Blank]


# ──────────────────────────────────────────────────────────────
# Inline scanner
# ──────────────────────────────────────────────────────────────

def _match_code(text: str, pos: int) -> tuple[TextRun, int] | None:
    if text[pos] != "`":
        return None
    end = text.find("`", pos + 1)
    if end <= pos + 1:
        return None
    return Code(text[pos + 1:end]), end + 1


def _match_bold(text: str, pos: int) -> tuple[TextRun, int] | None:
    if not text.startswith("**", pos):
        return None
    end = text.find("**", pos + 2)
    if end < 0:
        return None
    return Bold(text[pos + 2:end]), end + 2


def _match_link(text: str, pos: int) -> tuple[TextRun, int] | None:
    if text[pos] != "[":
        return None
    mid = text.find("](", pos + 1)
    if mid < 0:
        return None
    end = text.find(")", mid + 2)
    if end < 0:
        return None
    return Link(text[pos + 1:mid], text[mid + 2:end]), end + 1


_SPAN_MATCHERS = (_match_code, _match_bold, _match_link)


def parse_inline(text: str) -> tuple[TextRun, ...]:
    """
    Resolve inline code, bold and links within a single line.

    Spans are matched leftmost-first and never overlap. A delimiter that does
    not open a complete span is kept as a plain character.

    Args:
        text: One line of model output.

    Returns:
        Tuple of runs in reading order; empty plain runs are never produced.
    """
    runs: list[TextRun] = []
    plain: list[str] = []
    pos = 0
    while pos < len(text):
        for matcher in _SPAN_MATCHERS:
            found = matcher(text, pos)
            if found is not None:
                break
        else:
            plain.append(text[pos])
            pos += 1
            continue
        if plain:
            runs.append(Plain("".join(plain)))
            plain = []
        run, pos = found
        runs.append(run)
    if plain:
        runs.append(Plain("".join(plain)))
    return tuple(runs)


# ──────────────────────────────────────────────────────────────
# Line classification
# ──────────────────────────────────────────────────────────────

def _heading(line: str) -> Heading | None:
    hashes = len(line) - len(line.lstrip("#"))
    content = line[hashes:].strip()
    if hashes == 0 or not content:
        return None
    return Heading(min(hashes, MAX_HEADING_LEVEL), parse_inline(content))


def _is_diagram(line: str, ruleset: Ruleset) -> bool:
    if any(marker in line for marker in _DIAGRAM_MARKERS):
        return True
    if ruleset == "module":
        return line.strip().startswith("```")
    return line.startswith("   ")


def _numbered(stripped: str) -> ListItem | None:
    digits = len(stripped) - len(stripped.lstrip("0123456789"))
    if digits == 0 or not stripped.startswith(".", digits):
        return None
    return ListItem(int(stripped[:digits]), parse_inline(stripped[digits + 1:].strip()))


def classify_line(line: str, ruleset: Ruleset = "module") -> Block:
    """Map one line to its presentation block under the given ruleset."""
    stripped = line.strip()

    if ruleset == "module":
        heading = _heading(line)
        if heading is not None:
            return heading

    if stripped.startswith(">"):
        return Callout(parse_inline(stripped[1:].strip()))

    if _is_diagram(line, ruleset):
        text = line.replace("`", "") if ruleset == "module" else line
        return CodeOrDiagramLine(text)

    if ruleset == "module":
        for marker in _BULLET_MARKERS:
            if stripped.startswith(marker):
                return ListItem(None, parse_inline(stripped[len(marker):].strip()))
        numbered = _numbered(stripped)
        if numbered is not None:
            return numbered

    if not stripped:
        return Blank()
    return Paragraph(parse_inline(line))


def render(raw_text: str, ruleset: Ruleset = "module") -> list[Block]:
    """
    Render model text into an ordered list of presentation blocks.

    Args:
        raw_text: Free text returned by the model.
        ruleset: ``"module"`` for study guides, ``"chat"`` for transcripts.

    Returns:
        One block per input line, in input order. Never raises on malformed markup.
    """
    if ruleset not in ("chat", "module"):
        raise ValueError(f"Unknown ruleset: {ruleset!r}")
    return [classify_line(line, ruleset) for line in raw_text.split("\n")]


def render_chat(raw_text: str) -> list[Block]:
    return render(raw_text, "chat")


def render_module(raw_text: str) -> list[Block]:
    return render(raw_text, "module")


def runs_to_text(runs: tuple[TextRun, ...]) -> str:
    """Flatten runs back to their visible text (labels for links)."""
    parts: list[str] = []
    for run in runs:
        if isinstance(run, Link):
            parts.append(run.label)
        else:
            parts.append(run.text)
    return "".join(parts)
