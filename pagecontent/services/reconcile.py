"""
Block reconciliation.

Seeding scripts and administrative updates hand over a list of blocks that
should end up on a page translation. ``reconcile`` lines those up with the
blocks already stored (by ``identity_of``) and returns the new list:

* ``merge``   keeps every stored block in place, deep-merges matches and
  appends blocks that are new.
* ``replace`` returns exactly the incoming blocks in incoming order; a match
  only contributes the fields the incoming block leaves out (uploaded images
  and the like).

Both are pure: inputs are never modified and the output shares no objects
with them. Running either mode a second time with the same incoming blocks
against its own output gives the same list back. Blocks sharing a key are
paired by occurrence: the second incoming ``cta`` lines up with the second
stored ``cta``.
"""
import copy
import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pagecontent.blocks.identity import identity_of

logger = logging.getLogger(__name__)

Block = Dict[str, Any]


class ReconcileMode(str, Enum):
    MERGE = "merge"
    REPLACE = "replace"


def deep_merge(existing: Any, incoming: Any) -> Any:
    """
    Merge ``incoming`` over ``existing``.

    Objects recurse, lists and scalars from ``incoming`` win, and an incoming
    ``None`` keeps whatever ``existing`` holds.
    """
    if incoming is None:
        return copy.deepcopy(existing)
    if existing is None:
        return copy.deepcopy(incoming)
    if isinstance(incoming, Mapping) and isinstance(existing, Mapping):
        result = {key: copy.deepcopy(value) for key, value in existing.items()}
        for key, value in incoming.items():
            result[key] = deep_merge(existing.get(key), value)
        return result
    return copy.deepcopy(incoming)


def _positions_by_identity(blocks: Sequence[Any]) -> Dict[str, List[int]]:
    positions: Dict[str, List[int]] = {}
    for position, block in enumerate(blocks):
        if isinstance(block, Mapping):
            positions.setdefault(identity_of(block), []).append(position)
    return positions


def _pair_with_stored(existing: Sequence[Any], incoming: Sequence[Block]) -> List[Optional[int]]:
    # the k-th incoming block with a key pairs with the k-th stored block with that key
    positions = _positions_by_identity(existing)
    seen: Dict[str, int] = {}
    pairs: List[Optional[int]] = []
    for block in incoming:
        key = identity_of(block)
        occurrence = seen.get(key, 0)
        seen[key] = occurrence + 1
        stored = positions.get(key, [])
        pairs.append(stored[occurrence] if occurrence < len(stored) else None)
    return pairs


def _check_incoming(incoming: Sequence[Any]) -> None:
    for position, block in enumerate(incoming):
        if not isinstance(block, Mapping):
            raise TypeError(f"incoming block {position} is not an object")


def merge_blocks(existing: Sequence[Block], incoming: Sequence[Block]) -> List[Block]:
    _check_incoming(incoming)
    result = [copy.deepcopy(block) for block in existing]
    appended: List[Block] = []
    for block, position in zip(incoming, _pair_with_stored(existing, incoming)):
        if position is None:
            appended.append(copy.deepcopy(block))
        else:
            result[position] = deep_merge(result[position], block)
    return result + appended


def replace_blocks(existing: Sequence[Block], incoming: Sequence[Block]) -> List[Block]:
    _check_incoming(incoming)
    result: List[Block] = []
    for block, position in zip(incoming, _pair_with_stored(existing, incoming)):
        if position is None:
            result.append(copy.deepcopy(block))
        else:
            result.append(deep_merge(existing[position], block))
    return result


def reconcile(
    existing: Optional[Sequence[Block]],
    incoming: Sequence[Block],
    mode: ReconcileMode | str = ReconcileMode.MERGE,
) -> List[Block]:
    mode = ReconcileMode(mode)
    existing = existing or []
    if mode is ReconcileMode.REPLACE:
        result = replace_blocks(existing, incoming)
    else:
        result = merge_blocks(existing, incoming)
    logger.debug(
        "Reconciled %d stored + %d incoming blocks (%s) -> %d",
        len(existing),
        len(incoming),
        mode.value,
        len(result),
    )
    return result
