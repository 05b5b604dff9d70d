"""
Whole-field match highlighting.
"""

from typing import Any, List, Mapping, Optional, Tuple

from ...core.entities import Highlights


def tokenize(search_text: Optional[str]) -> Tuple[str, ...]:
    """Split search text on whitespace into lower-cased tokens."""
    if not search_text:
        return ()
    return tuple(token for token in search_text.lower().split() if token)


def _item_text(item: Any, key: str) -> Optional[str]:
    if isinstance(item, Mapping):
        item = item.get(key)
    return item if isinstance(item, str) else None


class HighlightService:
    """
    Coarse highlighter.

    A field is highlighted in full when any search token is a substring of
    it (case-insensitive). List fields contribute each matching item.
    Fields without a match are left out of the result.
    """

    # field name -> key holding the text of each list item
    LIST_FIELDS = {"ingredients": "name", "instructions": "text"}

    def highlight(self, document: Mapping[str, Any], search_text: Optional[str]) -> Highlights:
        """
        Compute highlights for one document.

        Args:
            document: Stored recipe document
            search_text: Raw search text

        Returns:
            Highlights: Matching fields only
        """
        tokens = tokenize(search_text)
        if not tokens:
            return Highlights()

        def matches(text: str) -> bool:
            lowered = text.lower()
            return any(token in lowered for token in tokens)

        found = {}
        for name in ("title", "description"):
            value = document.get(name)
            if isinstance(value, str) and matches(value):
                found[name] = (value,)

        for name, key in self.LIST_FIELDS.items():
            items: List[str] = []
            for item in document.get(name) or ():
                text = _item_text(item, key)
                if text is not None and matches(text):
                    items.append(text)
            if items:
                found[name] = tuple(items)

        return Highlights(**found)
