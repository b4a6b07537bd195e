"""
Tag normalization and aggregation.

Tags are stored lowercase, trimmed and deduplicated. The same rules apply at the
HTTP boundary, in the store and in the query engine so that storage, filtering
and the tag aggregate always agree.
"""

from collections import Counter
from typing import Iterable, List, Optional, Tuple, Union

TagInput = Union[str, List[str], None]


def normalize_tag(tag) -> str:
    return str(tag).strip().lower()


def normalize_tags(value: TagInput) -> List[str]:
    """
    Normalize a comma-delimited string or a list of strings into a tag list.

    Empty entries are dropped and duplicates collapse onto their first
    occurrence, so normalizing an already normalized list returns it unchanged.
    """
    if not value:
        return []
    if isinstance(value, str):
        candidates = value.split(",")
    elif isinstance(value, (list, tuple)):
        candidates = value
    else:
        return []

    tags = []
    seen = set()
    for candidate in candidates:
        tag = normalize_tag(candidate)
        if tag and tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags


def count_tags(tag_lists: Iterable[Optional[List[str]]]) -> List[Tuple[str, int]]:
    """Count prompts per tag, most used first and ties by name."""
    counts = Counter()
    for tags in tag_lists:
        # One increment per prompt even if stored data carries duplicates
        counts.update(set(normalize_tags(tags or [])))
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))
