import bleach

from .constants import MAX_TEXT_LENGTH


def sanitize_text(text: str, allow_basic_formatting: bool = False, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Sanitize text input to prevent XSS attacks.

    Args:
        text: The text to sanitize
        allow_basic_formatting: If True, allows basic HTML tags like <b>, <i>, <br>
        max_length: Truncate the cleaned text to this many characters

    Returns:
        Sanitized text string
    """
    if not text:
        return ""

    if allow_basic_formatting:
        # Allow only safe HTML tags
        allowed_tags = ['b', 'i', 'u', 'br', 'p', 'strong', 'em']
    else:
        # Strip all HTML
        allowed_tags = []

    cleaned = bleach.clean(
        text,
        tags=allowed_tags,
        attributes={},
        strip=True
    )

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    return cleaned.strip()
