"""Input sanitization utilities."""
import re
from typing import List, Optional


# Maximum length constraints
MAX_REG_CODE_LENGTH = 64
MAX_NAME_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 5000
MAX_MEMBER_NAME_LENGTH = 120


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize text input.

    Strips HTML tags and normalizes whitespace. Entities are not escaped
    because the frontend escapes output when rendering.

    Args:
        text: The input text to sanitize
        max_length: Optional maximum length to enforce
        strip_html: Whether to strip HTML tags (default True)

    Returns:
        Sanitized text with HTML tags removed and whitespace normalized

    Raises:
        ValueError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    # Malformed tags or encoded attacks survive the strip above
    if '<' in sanitized or '>' in sanitized:
        raise ValueError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def sanitize_reg_code(reg_code: str) -> str:
    """
    Sanitize a registration code.

    Codes are lowercase alphanumeric; input is trimmed and lowercased.

    Raises:
        ValueError: If the code is empty, too long or has other characters
    """
    if not isinstance(reg_code, str):
        raise ValueError("Registration code must be a string")

    sanitized = reg_code.strip().lower()

    if not sanitized:
        raise ValueError("Registration code cannot be empty")

    if len(sanitized) > MAX_REG_CODE_LENGTH:
        raise ValueError(f"Registration code exceeds maximum length of {MAX_REG_CODE_LENGTH} characters")

    if not re.match(r'^[a-z0-9]+$', sanitized):
        raise ValueError("Registration code can only contain letters and numbers")

    return sanitized


def sanitize_name(value: str, field: str = "Name") -> str:
    """Sanitize a required single-line name (event, team, problem title)."""
    sanitized = sanitize_text(value, max_length=MAX_NAME_LENGTH)

    if not sanitized:
        raise ValueError(f"{field} cannot be empty")

    return sanitized


def sanitize_members(members: List[str]) -> List[str]:
    """Sanitize team member names, dropping blank entries and keeping order."""
    cleaned = []
    for member in members:
        name = sanitize_text(member, max_length=MAX_MEMBER_NAME_LENGTH)
        if name:
            cleaned.append(name)

    if len(set(cleaned)) != len(cleaned):
        raise ValueError("Team member names must be unique")

    return cleaned
