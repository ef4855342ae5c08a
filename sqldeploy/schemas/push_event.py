from typing import Optional

from pydantic import BaseModel, ConfigDict

NULL_SHA = "0" * 40


class PushEvent(BaseModel):
    """Subset of the GitHub push webhook payload used to pick the diff range."""

    model_config = ConfigDict(extra="ignore")

    ref: str = ""
    before: Optional[str] = None
    after: Optional[str] = None

    @property
    def base(self) -> Optional[str]:
        # GitHub sends the all-zero SHA as `before` when a branch is created
        if not self.before or self.before == NULL_SHA:
            return None
        return self.before
