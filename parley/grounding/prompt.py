"""Prompt assembly.

Pure functions: no I/O, no clock, no randomness. Persona instructions are
inserted verbatim (stripped) and never rewritten.
"""

from collections.abc import Iterable

from parley.providers.chat.base import ChatMessage
from parley.providers.llm.base import LLMMessage

NO_SUMMARY_PLACEHOLDER = "[No summary available]"
NO_INSTRUCTIONS_PLACEHOLDER = "[No agent instructions set]"

GROUNDED_RULES = """Rules:
- Base answers on the meeting summary + conversation context.
- If insufficient info, say so and ask 1-2 clarifying questions.
- Be concise and specific; use short bullets when helpful."""


def build_live_instructions(policy_wrapper: str, persona_instructions: str | None) -> str:
    """Wrapper and persona instructions joined by a blank line, empties omitted."""
    parts = [policy_wrapper.strip(), (persona_instructions or "").strip()]
    return "\n\n".join(part for part in parts if part)


def build_grounded_instructions(
    policy_wrapper: str,
    summary: str | None,
    persona_instructions: str | None,
) -> str:
    """System instructions for a post-session reply.

    Sections, in order: policy wrapper (omitted if empty), task framing,
    the summary as ground truth, the persona instructions, answer rules.
    Missing summary or instructions render as fixed placeholders.
    """
    sections = [
        policy_wrapper.strip(),
        "You are helping the user revisit a recently completed meeting.",
        "MEETING SUMMARY (ground truth):\n"
        + ((summary or "").strip() or NO_SUMMARY_PLACEHOLDER),
        "AGENT INSTRUCTIONS (must follow):\n"
        + ((persona_instructions or "").strip() or NO_INSTRUCTIONS_PLACEHOLDER),
        GROUNDED_RULES,
    ]
    return "\n\n".join(section for section in sections if section)


def build_conversation_window(
    history: Iterable[ChatMessage],
    persona_id: str,
    limit: int = 12,
    exclude_message_id: str | None = None,
) -> list[LLMMessage]:
    """Last `limit` messages as LLM turns, oldest first, blanks dropped.

    The triggering message is excluded by id (it is sent separately as the
    final user turn). Blank messages are dropped after trimming, so they
    still take a slot. The persona's own messages become assistant turns.
    """
    if limit <= 0:
        return []

    recent = [
        message
        for message in history
        if not (exclude_message_id and message.id == exclude_message_id)
    ][-limit:]

    return [
        LLMMessage(
            role="assistant" if message.user_id == persona_id else "user",
            content=message.text,
        )
        for message in recent
        if message.text and message.text.strip()
    ]
