"""
Shared schema base and field normalizers.

All API payloads use camelCase on the wire; request bodies also accept the
snake_case field names.
"""
import base64
import re
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from pulseboard.utils.assignees import normalize_assignee_ids

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_AVATAR_BYTES = 2 * 1024 * 1024


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrmCamelModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip().lower()
    if not EMAIL_RE.match(cleaned):
        raise ValueError("Invalid email address")
    return cleaned


def require_text(value: Optional[str], field: str, max_length: int = 255) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{field} is required")
    if len(cleaned) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return cleaned


def require_choice(value: Optional[str], field: str, choices) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip().lower()
    if cleaned not in choices:
        raise ValueError(f"{field} must be one of: {', '.join(choices)}")
    return cleaned


def normalize_color(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if not HEX_COLOR_RE.match(cleaned):
        raise ValueError("color must be a hex value like #E6E6FA")
    return cleaned.upper()


def check_avatar(value: Optional[str]) -> Optional[str]:
    """Accept URLs as-is; inline data URLs must be images of at most 2 MiB."""
    if not value:
        return None
    if not value.startswith("data:"):
        return value
    header, _, payload = value.partition(",")
    if not header.startswith("data:image/"):
        raise ValueError("avatar must be an image")
    try:
        raw = base64.b64decode(payload, validate=False) if ";base64" in header else payload.encode()
    except (ValueError, TypeError):
        raise ValueError("avatar is not valid base64 image data")
    if len(raw) > MAX_AVATAR_BYTES:
        raise ValueError("Image size must be less than 2MB")
    return value


def coerce_assignee_ids(value):
    """Accept a delimited string or a list of ids and return the normalized string."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    return normalize_assignee_ids(str(value))


def text_field(field: str, max_length: int = 255):
    return Annotated[str, AfterValidator(lambda v: require_text(v, field, max_length))]


def choice_field(field: str, choices):
    return Annotated[str, AfterValidator(lambda v: require_choice(v, field, choices))]


Email = Annotated[str, AfterValidator(normalize_email)]
HexColor = Annotated[str, AfterValidator(normalize_color)]
Avatar = Annotated[str, AfterValidator(check_avatar)]
AssigneeIds = Annotated[Optional[str], BeforeValidator(coerce_assignee_ids)]
