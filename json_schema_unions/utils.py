"""
Utility functions for JSON schema union rewriting.
"""

import re

# Splits text into words, keeping acronym runs ("HTTPServer" -> "HTTP", "Server")
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def to_lower_camel_case(text: str) -> str:
    """Convert snake_case, PascalCase, kebab-case or space-separated text to lowerCamelCase.

    This is the name under which a declared field appears as a JSON property.

    Examples:
        "ComponentType" -> "componentType"
        "component_type" -> "componentType"
        "Container" -> "container"
        "ID" -> "id"
        "HTTPServer" -> "httpServer"
        "kubernetes" -> "kubernetes"

    Args:
        text: The text to convert

    Returns:
        lowerCamelCase string
    """
    if not text:
        return ""
    words = _split_into_words(_normalize_separators(text))
    if not words:
        return ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


def unquote_literal(raw: str) -> str:
    """Strip the double quotes surrounding a raw JSON string literal."""
    return raw.strip('"')
