"""XML helpers for string-built documents."""
from typing import Any, Mapping


def xml_escape(text: Any) -> str:
    """Escape special XML characters.

    Examples:
        >>> xml_escape("Tom & Jerry")
        'Tom &amp; Jerry'
    """
    return (str(text)
            .replace('&', '&amp;')
            .replace('<', '&lt;')
            .replace('>', '&gt;')
            .replace('"', '&quot;')
            .replace("'", '&#39;'))


def format_attributes(attributes: Mapping[str, Any]) -> str:
    """Render an attribute mapping as ``name="value"`` pairs, in order.

    Examples:
        >>> format_attributes({'stroke': '#001F3F', 'fill': 'none'})
        'stroke="#001F3F" fill="none"'
    """
    return ' '.join(f'{name}="{xml_escape(value)}"' for name, value in attributes.items())
