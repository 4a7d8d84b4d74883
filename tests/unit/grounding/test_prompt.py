"""Unit tests for prompt assembly."""

from parley.grounding.prompt import (
    NO_INSTRUCTIONS_PLACEHOLDER,
    NO_SUMMARY_PLACEHOLDER,
    build_conversation_window,
    build_grounded_instructions,
    build_live_instructions,
)
from parley.providers.chat.base import ChatMessage


class TestBuildLiveInstructions:
    """Tests for build_live_instructions."""

    def test_joins_wrapper_and_instructions(self) -> None:
        assert build_live_instructions("W", "  Be kind.  ") == "W\n\nBe kind."

    def test_empty_instructions_omitted(self) -> None:
        assert build_live_instructions("W", "   ") == "W"
        assert build_live_instructions("W", None) == "W"

    def test_empty_wrapper_omitted(self) -> None:
        assert build_live_instructions("", "Be kind.") == "Be kind."


class TestBuildGroundedInstructions:
    """Tests for build_grounded_instructions."""

    def test_sections_in_order(self) -> None:
        text = build_grounded_instructions("WRAPPER", "S1", "Be kind.")

        positions = [
            text.index("WRAPPER"),
            text.index("You are helping the user revisit a recently completed meeting."),
            text.index("MEETING SUMMARY (ground truth):\nS1"),
            text.index("AGENT INSTRUCTIONS (must follow):\nBe kind."),
            text.index("Rules:"),
        ]
        assert positions == sorted(positions)

    def test_placeholders(self) -> None:
        text = build_grounded_instructions("W", None, "   ")

        assert f"MEETING SUMMARY (ground truth):\n{NO_SUMMARY_PLACEHOLDER}" in text
        assert f"AGENT INSTRUCTIONS (must follow):\n{NO_INSTRUCTIONS_PLACEHOLDER}" in text
        assert NO_SUMMARY_PLACEHOLDER == "[No summary available]"
        assert NO_INSTRUCTIONS_PLACEHOLDER == "[No agent instructions set]"

    def test_empty_wrapper_omitted(self) -> None:
        text = build_grounded_instructions("", "S1", "I1")
        assert text.startswith("You are helping the user revisit")

    def test_rules_present(self) -> None:
        text = build_grounded_instructions("W", "S1", "I1")
        assert "Base answers on the meeting summary + conversation context." in text
        assert "ask 1-2 clarifying questions" in text
        assert "short bullets" in text

    def test_is_deterministic(self) -> None:
        assert build_grounded_instructions("W", "S", "I") == build_grounded_instructions(
            "W", "S", "I"
        )


class TestBuildConversationWindow:
    """Tests for build_conversation_window."""

    def test_keeps_last_twelve_in_order(self) -> None:
        history = [
            ChatMessage(id=f"m{i}", user_id="u1", text=f"message {i}") for i in range(20)
        ]

        window = build_conversation_window(history, persona_id="p1", limit=12)

        assert [m.content for m in window] == [f"message {i}" for i in range(8, 20)]

    def test_maps_roles(self) -> None:
        history = [
            ChatMessage(id="a", user_id="u1", text="question"),
            ChatMessage(id="b", user_id="p1", text="answer"),
        ]

        window = build_conversation_window(history, persona_id="p1")

        assert [(m.role, m.content) for m in window] == [
            ("user", "question"),
            ("assistant", "answer"),
        ]

    def test_trims_before_dropping_empty(self) -> None:
        history = [
            ChatMessage(
                id=f"t{i}", user_id="u1", text="  " if i in (15, 17) else f"t{i}"
            )
            for i in range(20)
        ]

        window = build_conversation_window(history, persona_id="p1", limit=12)

        assert [m.content for m in window] == [
            f"t{i}" for i in range(8, 20) if i not in (15, 17)
        ]

    def test_drops_empty_and_missing_text(self) -> None:
        history = [ChatMessage(id="keep", user_id="u1", text="keep me")]
        history += [ChatMessage(id="blank", user_id="u1", text="  ")]
        history += [ChatMessage(id="none", user_id="u1", text=None)]

        window = build_conversation_window(history, persona_id="p1", limit=3)

        assert [m.content for m in window] == ["keep me"]

    def test_excluded_trigger_does_not_take_a_slot(self) -> None:
        history = [ChatMessage(id=f"m{i}", user_id="u1", text=f"m{i}") for i in range(4)]

        window = build_conversation_window(
            history, persona_id="p1", limit=2, exclude_message_id="m3"
        )

        assert [m.content for m in window] == ["m1", "m2"]

    def test_excludes_triggering_message(self) -> None:
        history = [
            ChatMessage(id="a", user_id="u1", text="earlier"),
            ChatMessage(id="trigger", user_id="u1", text="new question"),
        ]

        window = build_conversation_window(
            history, persona_id="p1", exclude_message_id="trigger"
        )

        assert [m.content for m in window] == ["earlier"]

    def test_zero_limit(self) -> None:
        history = [ChatMessage(id="a", user_id="u1", text="x")]
        assert build_conversation_window(history, persona_id="p1", limit=0) == []
