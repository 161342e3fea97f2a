"""JSON encoding and decoding backed by msgspec."""

from typing import Any, Literal, Union, overload

import msgspec

__all__ = ("decode_json", "encode_json")


def _fallback_encoder(value: Any) -> Any:
    """Render types msgspec does not know natively as their string form."""
    return str(value)


_encoder = msgspec.json.Encoder(enc_hook=_fallback_encoder)
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> "Union[str, bytes]":
    """Encode data to JSON.

    Args:
        data: Data to encode.
        as_bytes: Return bytes instead of a string.

    Returns:
        The JSON document.
    """
    encoded = _encoder.encode(data)
    return encoded if as_bytes else encoded.decode("utf-8")


def decode_json(data: "Union[str, bytes]") -> Any:
    """Decode a JSON document."""
    return _decoder.decode(data)
