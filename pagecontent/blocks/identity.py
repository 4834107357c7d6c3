"""Derived identity keys used to line up old and new blocks during reconciliation."""
from typing import Any, Mapping, Union

from pydantic import BaseModel

KEY_SEPARATOR = "::"
TITLE_PREFIX_LENGTH = 40

# Fields that name a specific instance of a block, checked in this order.
IDENTIFIER_FIELDS = ("serviceId", "groupKey")

# Variants that may appear several times per page but carry no identifier;
# they fall back to a prefix of their title.
TITLE_KEYED_TYPES = frozenset({"team"})


def identity_of(block: Union[Mapping[str, Any], BaseModel]) -> str:
    """
    Build the identity key of ``block``.

    ``{"type": "serviceDetails", "serviceId": "pharma"}`` -> ``"serviceDetails::pharma"``
    ``{"type": "hero", "tagline": "..."}``                 -> ``"hero"``

    Two blocks that differ only in content fields share a key. A variant with
    neither an identifier nor a title collapses to its discriminant; repeated blocks of
    that type are told apart by position among themselves. Editing a team
    title changes its key.
    """
    if isinstance(block, BaseModel):
        block = block.model_dump(by_alias=True)

    block_type = str(block.get("type") or "unknown")
    parts = [block_type]
    for field in IDENTIFIER_FIELDS:
        value = block.get(field)
        if value:
            parts.append(str(value))
    if block_type in TITLE_KEYED_TYPES:
        title = block.get("title")
        if isinstance(title, str) and title:
            parts.append(title[:TITLE_PREFIX_LENGTH])
    return KEY_SEPARATOR.join(parts)
