"""msgspec conventions for harness records and diagnostics payloads."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import msgspec


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Base for immutable harness records; decoding rejects unknown fields."""


_ORDER: Literal["deterministic"] = "deterministic"


def _json_enc_hook(obj: object) -> object:
    if isinstance(obj, Path):
        return obj.as_posix()
    msg = f"Cannot encode {type(obj).__name__} as JSON."
    raise TypeError(msg)


JSON_ENCODER = msgspec.json.Encoder(enc_hook=_json_enc_hook, order=_ORDER)


def dumps_json(obj: object, *, pretty: bool = False) -> bytes:
    """Encode records, enums and paths as deterministic JSON.

    Returns
    -------
    bytes
        JSON payload, indented when ``pretty`` is set.
    """
    raw = JSON_ENCODER.encode(obj)
    return msgspec.json.format(raw, indent=2) if pretty else raw


def loads_json[T](payload: bytes | str, *, target_type: type[T]) -> T:
    """Decode JSON into ``target_type`` without lax type coercion.

    Records run their ``__post_init__`` checks during decoding.

    Returns
    -------
    T
        Decoded value.
    """
    return msgspec.json.decode(payload, type=target_type, strict=True)


__all__ = ["JSON_ENCODER", "StructBaseStrict", "dumps_json", "loads_json"]
