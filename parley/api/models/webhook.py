"""Webhook response model."""

from typing import Literal

from pydantic import BaseModel


class DispatchResult(BaseModel):
    """Successful webhook outcome.

    Serialized without unset fields, so a normal delivery renders as
    {"status": "ok"} and a suppressed duplicate as
    {"status": "ok", "deduped": true}.
    """

    status: Literal["ok"] = "ok"
    deduped: bool | None = None

    def to_body(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)
