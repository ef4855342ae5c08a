from pathlib import Path

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..schemas import PushEvent


def load_push_event(event_path: str) -> PushEvent:
    """Read the webhook payload GitHub Actions stores at GITHUB_EVENT_PATH."""
    try:
        raw = Path(event_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read event payload {event_path}: {e}") from e

    try:
        return PushEvent.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid event payload {event_path}: {e}") from e
