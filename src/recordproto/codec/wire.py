"""Generic value codec and compressor.

Values are serialized with MessagePack and the result is wrapped in a zlib
stream. msgpack runs with strict_types so that tuples keep their identity:
a tuple and a list with the same items decode to different values, which the
nesting marker relies on.

Extension types:

    1  tuple
    2  NEST_TAG sentinel
    3  datetime (ISO 8601)
    4  date (ISO 8601)
    5  pydantic model without a registered schema (import path + fields)
       resolved among already loaded modules only
    6  enum member (import path + value)

Payload layout, before compression: a two element array
[schema_key, [slot, slot, ...]].
"""

from __future__ import annotations

import datetime
import enum
import sys
import zlib
from typing import Any

import msgpack
from pydantic import BaseModel

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import DecodeError, EncodeError

EXT_TUPLE = 1
EXT_NEST_TAG = 2
EXT_DATETIME = 3
EXT_DATE = 4
EXT_MODEL = 5
EXT_ENUM = 6


class _NestTag:
    """Singleton sentinel opening a nesting marker tuple."""

    _instance: _NestTag | None = None

    def __new__(cls) -> _NestTag:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NEST_TAG"

    def __reduce__(self) -> str:
        return "NEST_TAG"


#: First element of a nesting marker: (NEST_TAG, schema_key, value_tuple)
NEST_TAG = _NestTag()


def is_nest_marker(value: Any) -> bool:
    """Return True if value has the nesting marker shape."""
    return (
        type(value) is tuple
        and len(value) == 3
        and value[0] is NEST_TAG
        and type(value[2]) is tuple
    )


def _import_path(cls: type) -> str:
    return f"{cls.__module__}:{cls.__qualname__}"


def _resolve_path(path: Any) -> Any:
    """Look up a type by import path among the modules already loaded.

    Payloads never trigger imports: a type is only resolvable if the
    process has imported its module.
    """
    if not isinstance(path, str):
        raise DecodeError(f"Invalid type path {path!r}")
    module_name, _, qualname = path.partition(":")
    target: Any = sys.modules.get(module_name)
    if target is None:
        raise DecodeError(f"Cannot resolve type {path!r}: module {module_name!r} is not loaded")
    try:
        for part in qualname.split("."):
            target = getattr(target, part)
    except AttributeError as err:
        raise DecodeError(f"Cannot resolve type {path!r}: {err}") from err
    return target


def _default(obj: Any) -> Any:
    if isinstance(obj, _NestTag):
        return msgpack.ExtType(EXT_NEST_TAG, b"")
    if isinstance(obj, enum.Enum):
        return msgpack.ExtType(EXT_ENUM, _pack([_import_path(type(obj)), obj.value]))
    if isinstance(obj, tuple):
        return msgpack.ExtType(EXT_TUPLE, _pack(list(obj)))
    if isinstance(obj, datetime.datetime):
        return msgpack.ExtType(EXT_DATETIME, obj.isoformat().encode("utf-8"))
    if isinstance(obj, datetime.date):
        return msgpack.ExtType(EXT_DATE, obj.isoformat().encode("utf-8"))
    if isinstance(obj, BaseModel):
        state = {name: getattr(obj, name, None) for name in type(obj).model_fields}
        return msgpack.ExtType(EXT_MODEL, _pack([_import_path(type(obj)), state]))
    # strict_types sends subclasses of builtins here too
    for base in (int, float, str, bytes, list, dict):
        if isinstance(obj, base):
            return base(obj)
    raise TypeError(f"Cannot serialize value of type {type(obj).__name__}")


def _ext_hook(code: int, data: bytes) -> Any:
    if code == EXT_TUPLE:
        return tuple(_unpack(data))
    if code == EXT_NEST_TAG:
        return NEST_TAG
    if code == EXT_DATETIME:
        return datetime.datetime.fromisoformat(data.decode("utf-8"))
    if code == EXT_DATE:
        return datetime.date.fromisoformat(data.decode("utf-8"))
    if code == EXT_MODEL:
        path, state = _unpack(data)
        model_class = _resolve_path(path)
        if not (isinstance(model_class, type) and issubclass(model_class, BaseModel)):
            raise DecodeError(f"{path!r} is not a pydantic model")
        return model_class.model_construct(**state)
    if code == EXT_ENUM:
        path, value = _unpack(data)
        enum_class = _resolve_path(path)
        if not (isinstance(enum_class, type) and issubclass(enum_class, enum.Enum)):
            raise DecodeError(f"{path!r} is not an enum")
        return enum_class(value)
    return msgpack.ExtType(code, data)


def _pack(obj: Any) -> bytes:
    return msgpack.packb(obj, use_bin_type=True, strict_types=True, default=_default)


def _unpack(data: bytes) -> Any:
    return msgpack.unpackb(
        data, raw=False, use_list=True, strict_map_key=False, ext_hook=_ext_hook
    )


def pack_value(value: Any) -> bytes:
    """Serialize a value with the generic codec (no compression).

    Raises:
        EncodeError: If the value contains an unsupported type
    """
    try:
        return _pack(value)
    except (TypeError, ValueError, OverflowError) as err:
        raise EncodeError(f"Cannot serialize value: {err}") from err


def unpack_value(data: bytes) -> Any:
    """Deserialize a value produced by pack_value().

    Raises:
        DecodeError: If the data is not a valid serialized value
    """
    try:
        return _unpack(data)
    except DecodeError:
        raise
    except (ValueError, TypeError, msgpack.exceptions.UnpackException) as err:
        raise DecodeError(f"Corrupted payload: {err}") from err


def compress(data: bytes, config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Compress bytes with zlib."""
    return zlib.compress(data, config.compression_level)


def decompress(data: bytes) -> bytes:
    """Decompress zlib bytes.

    Raises:
        DecodeError: If the data is not a valid zlib stream
    """
    try:
        return zlib.decompress(data)
    except zlib.error as err:
        raise DecodeError(f"Cannot decompress payload: {err}") from err


def pack_payload(key: Any, values: tuple[Any, ...], config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Serialize and compress a (schema_key, value_tuple) payload."""
    return compress(pack_value([key, list(values)]), config)


def unpack_payload(data: bytes) -> tuple[Any, tuple[Any, ...]]:
    """Decompress and deserialize a payload into (schema_key, value_tuple).

    Raises:
        DecodeError: If the data is corrupt or not a payload
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeError(f"Expected bytes, got {type(data).__name__}")
    if not data:
        raise DecodeError("Cannot decode empty data")

    payload = unpack_value(decompress(bytes(data)))
    if not isinstance(payload, list) or len(payload) != 2 or not isinstance(payload[1], list):
        raise DecodeError(
            f"Malformed payload: expected [schema_key, values], got {type(payload).__name__}"
        )
    return payload[0], tuple(payload[1])
