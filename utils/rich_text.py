"""
Rich text helpers.

Contentful RichText fields expect a document node tree. Imported values are
plain strings, so each one becomes a document with a single paragraph
holding a single text node.
"""

import json
from typing import Any


def stringify_value(value: Any) -> Any:
    """
    Convert a raw source value to the string written into an entry field.

    - None stays None (forwarded as null)
    - Booleans use JSON spelling: True → "true"
    - Lists and dicts are JSON encoded
    - Everything else goes through str()
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def build_rich_text_document(text: Any) -> dict:
    """
    Wrap text in a minimal rich text document.

    Args:
        text: Paragraph text

    Returns:
        document → paragraph → text node tree
    """
    return {
        "nodeType": "document",
        "data": {},
        "content": [
            {
                "nodeType": "paragraph",
                "data": {},
                "content": [
                    {
                        "nodeType": "text",
                        "value": text,
                        "marks": [],
                        "data": {},
                    }
                ],
            }
        ],
    }
