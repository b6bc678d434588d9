"""
Input sanitizing for text that ends up inside model prompts.

Removes characters that are invisible to a human reviewer but can smuggle
instructions or break prompt layout:
- Zero-width characters
- Bidirectional override characters
- Control characters other than newline, carriage return and tab
"""
import re


# Zero-width characters
ZERO_WIDTH_CHARS = [
    '\u200b',  # Zero-width space
    '\u200c',  # Zero-width non-joiner
    '\u200d',  # Zero-width joiner
    '\ufeff',  # Zero-width no-break space
]

# Direction override characters
DIRECTION_CHARS = [
    '\u202a',  # Left-to-right embedding
    '\u202b',  # Right-to-left embedding
    '\u202c',  # Pop directional formatting
    '\u202d',  # Left-to-right override
    '\u202e',  # Right-to-left override
]

_INVISIBLE_PATTERN = re.compile("[" + "".join(ZERO_WIDTH_CHARS + DIRECTION_CHARS) + "]")
_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_text(text: str) -> str:
    """
    Strip suspicious characters from user-provided text.

    Args:
        text: Raw user input (answer, profile field or résumé text)

    Returns:
        Text with invisible and control characters removed
    """
    if not text:
        return ""
    cleaned = _INVISIBLE_PATTERN.sub("", text)
    return _CONTROL_PATTERN.sub("", cleaned)
