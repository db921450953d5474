"""NBT encoding and decoding, formatted text components and geometry helpers for block-game servers."""

__version__ = "0.1.0"

__all__ = ["nbt_errors", "nbt_tag", "nbt_value", "nbt_encode", "nbt_decode", "util", "text"]