"""Post-fetch enrichment of resolved blocks. Reads only; nothing is written back."""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


def _is_image_entry(entry: Any) -> bool:
    if not isinstance(entry, Mapping):
        return False
    url = entry.get("url")
    return isinstance(url, str) and bool(url.strip())


def _hydrate_gallery(
    block: Mapping[str, Any], galleries: Mapping[str, Sequence[Any]]
) -> Mapping[str, Any]:
    images = block.get("images")
    if images is None:
        group_images = galleries.get(block.get("groupKey") or "")
        if group_images is None:
            return block
        images = group_images
        block = {**block, "images": list(images)}
    elif not isinstance(images, list):
        logger.warning("Gallery %s has non-list images; dropping them", block.get("groupKey"))
        return {**block, "images": []}

    kept = [entry for entry in images if _is_image_entry(entry)]
    if len(kept) == len(images):
        return block
    logger.warning(
        "Dropped %d gallery image(s) without url from %s",
        len(images) - len(kept),
        block.get("groupKey"),
    )
    return {**block, "images": kept}


def hydrate(
    blocks: Optional[Sequence[Any]],
    galleries: Optional[Mapping[str, Sequence[Any]]] = None,
) -> List[Any]:
    """
    Resolve the external references inside ``blocks``.

    Gallery blocks without inline ``images`` take the images of the gallery
    group named by their ``groupKey``; image entries lacking a ``url`` are
    dropped. Every other block is returned as the same object.
    """
    galleries = galleries or {}
    hydrated: List[Any] = []
    for block in blocks or []:
        if isinstance(block, Mapping) and block.get("type") == "gallery":
            hydrated.append(_hydrate_gallery(block, galleries))
        else:
            hydrated.append(block)
    return hydrated


def gallery_map(groups: Sequence[Any]) -> Dict[str, List[Any]]:
    """``{key: images}`` for a sequence of gallery group rows."""
    return {group.key: list(group.images or []) for group in groups}
