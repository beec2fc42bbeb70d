"""Strip injected control tags and tidy whitespace in message text."""

from __future__ import annotations

import re

CONTROL_TAGS: tuple[str, ...] = (
    "system-reminder",
    "command-name",
    "command-message",
    "command-args",
    "ide_selection",
    "ide_opened_file",
    "local-command-stdout",
    "local-command-caveat",
    "retrieval_status",
    "task_id",
    "task_type",
    "task-id",
    "task-notification",
    "fast_mode_info",
    "persisted-output",
    "tool_use_error",
    "user-prompt-submit-hook",
    "thinking",
    "ask_user",
)

# The backreference keeps open/close names paired so distinct tags never cross-match.
_CONTROL_TAG_RE = re.compile(
    r"<(" + "|".join(re.escape(tag) for tag in CONTROL_TAGS) + r")>.*?</\1>",
    re.DOTALL,
)
_HORIZONTAL_WS_RE = re.compile(r"[^\S\n]+")
_TRAILING_WS_RE = re.compile(r" +\n")
_EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")


def normalize(raw: str) -> str:
    """Return display text with control tags removed and whitespace collapsed."""
    text = raw
    while True:
        stripped = _CONTROL_TAG_RE.sub("", text)
        if stripped == text:
            break
        text = stripped
    text = _HORIZONTAL_WS_RE.sub(" ", text)
    text = _TRAILING_WS_RE.sub("\n", text)
    text = _EXTRA_NEWLINES_RE.sub("\n\n", text)
    return text.strip()
