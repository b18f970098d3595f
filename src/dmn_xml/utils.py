"""Utility functions for XML tag handling and parser error messages."""

import re
from typing import Optional, Tuple

_POSITION_RE = re.compile(r'line (\d+), column (\d+)')


class XmlUtils:
    """XML processing utilities."""

    @staticmethod
    def get_local_name(tag: str) -> str:
        """Extract local name from a Clark-notation tag (``{uri}name``).

        Args:
            tag: Tag name (possibly namespaced)

        Returns:
            Local tag name without namespace
        """
        if not isinstance(tag, str):
            return ''
        return tag.split('}', 1)[1] if tag.startswith('{') else tag

    @staticmethod
    def get_namespace_uri(tag: str) -> str:
        """Extract the namespace URI from a Clark-notation tag.

        Returns:
            Namespace URI, or empty string when the tag is not namespaced
        """
        if isinstance(tag, str) and tag.startswith('{') and '}' in tag:
            return tag[1:tag.index('}')]
        return ''

    @staticmethod
    def qualify(namespace_uri: str, local_name: str) -> str:
        """Build a Clark-notation name."""
        return f'{{{namespace_uri}}}{local_name}' if namespace_uri else local_name


class ErrorUtils:
    """Helpers for turning parser exceptions into report fields."""

    @staticmethod
    def first_line(message: str) -> str:
        """First non-empty line of an error message."""
        for line in str(message).splitlines():
            if line.strip():
                return line.strip()
        return str(message).strip()

    @staticmethod
    def extract_position(message: str,
                         fallback: Optional[Tuple[int, int]] = None) -> Tuple[Optional[int], Optional[int]]:
        """Pull ``line N, column M`` out of a parser message.

        Args:
            message: Parser error text
            fallback: (line, column) tuple reported by the exception, if any

        Returns:
            (line, column), either element None when unknown
        """
        match = _POSITION_RE.search(str(message))
        if match:
            return int(match.group(1)), int(match.group(2))
        if fallback and len(fallback) == 2:
            return fallback[0], fallback[1]
        return None, None
