from .identity import identity_of
from .schema import (
    BLOCK_TYPES,
    BaseBlock,
    GalleryBlock,
    GalleryImage,
    GenericBlock,
    parse_block,
    validate_blocks,
    validation_messages,
)

__all__ = [
    "BLOCK_TYPES",
    "BaseBlock",
    "GalleryBlock",
    "GalleryImage",
    "GenericBlock",
    "identity_of",
    "parse_block",
    "validate_blocks",
    "validation_messages",
]
