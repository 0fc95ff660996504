"""Persistence for the node store."""

from activagraph.storage.json_store import (
    decode_store,
    encode_store,
    load_store,
    read_store,
    save_store
)

__all__ = ["encode_store", "decode_store", "save_store", "load_store", "read_store"]
