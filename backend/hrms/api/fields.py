from typing import Annotated

from pydantic import AfterValidator


def normalize_email(value: str) -> str:
    email = value.strip().lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValueError("Invalid email format")
    return email


def strip_required(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Field cannot be blank")
    return cleaned


Email = Annotated[str, AfterValidator(normalize_email)]
RequiredStr = Annotated[str, AfterValidator(strip_required)]
