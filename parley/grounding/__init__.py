"""Grounded post-session chat replies."""

from parley.grounding.completion import CompletionInvoker
from parley.grounding.prompt import (
    NO_INSTRUCTIONS_PLACEHOLDER,
    NO_SUMMARY_PLACEHOLDER,
    build_conversation_window,
    build_grounded_instructions,
    build_live_instructions,
)
from parley.grounding.publisher import ResponsePublisher
from parley.grounding.responder import GroundedResponder

__all__ = [
    "CompletionInvoker",
    "NO_INSTRUCTIONS_PLACEHOLDER",
    "NO_SUMMARY_PLACEHOLDER",
    "build_conversation_window",
    "build_grounded_instructions",
    "build_live_instructions",
    "ResponsePublisher",
    "GroundedResponder",
]
