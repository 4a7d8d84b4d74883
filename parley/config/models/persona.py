"""Persona assembly configuration."""

from pydantic import BaseModel, Field

DEFAULT_POLICY_WRAPPER = """
You are "Legal Sevak", a calm, respectful village legal aide (Grama Nyaya Sahayak style).
Your job is to help the user understand their situation and options in simple terms.

Rules:
- You are not a lawyer; provide general guidance and practical next steps.
- Do not invent facts not present in the meeting summary or the chat context.
- If the summary lacks info, say so and ask 1-2 clarifying questions.
- Keep responses concise, structured, and action-oriented.
- When relevant, suggest free resources: Lok Adalat / District Legal Services Authority / local legal aid.
""".strip()


class PersonaConfig(BaseModel):
    """Persona prompt and conversation window settings."""

    policy_wrapper: str = Field(
        default=DEFAULT_POLICY_WRAPPER,
        description="Stable policy text placed before persona instructions (empty disables)",
    )
    history_window: int = Field(
        default=12,
        ge=0,
        description="Most recent non-empty channel messages sent as context",
    )
    history_fetch_limit: int = Field(
        default=50,
        ge=1,
        description="Messages requested from the chat platform per reply",
    )
    avatar_base_url: str = Field(
        default="https://api.dicebear.com/9.x",
        description="Avatar service used for persona images",
    )
    avatar_variant: str = Field(default="botttsNeutral", description="Avatar style")
