"""
Order name extraction.

Order names look like C#1234 or C#12345. Matching is case-insensitive and
results are normalized to uppercase.
"""

import re
from typing import Iterable

ORDER_NAME_PATTERN = re.compile(r"C#\d{4,5}", re.IGNORECASE)


def find_order_names(text: str | None) -> list[str]:
    """Return every order name occurrence in text, as written."""
    return ORDER_NAME_PATTERN.findall(text or "")


def dedupe_order_names(names: Iterable[str]) -> list[str]:
    """
    Uppercase and deduplicate order names, keeping first-seen order.

    Examples:
        >>> dedupe_order_names(["C#12345", "c#12346", "c#12345"])
        ['C#12345', 'C#12346']
    """
    seen: set[str] = set()
    deduped: list[str] = []
    for name in names:
        upper = name.upper()
        if upper not in seen:
            seen.add(upper)
            deduped.append(upper)
    return deduped
