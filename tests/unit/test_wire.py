"""Unit tests for the generic value codec."""

from __future__ import annotations

import datetime
import enum
import sys
import zlib

import msgpack
import pytest
from pydantic import BaseModel

from recordproto import NEST_TAG, CodecConfig, DecodeError, EncodeError
from recordproto.codec.wire import (
    compress,
    decompress,
    is_nest_marker,
    pack_payload,
    pack_value,
    unpack_payload,
    unpack_value,
)


class Color(enum.Enum):
    RED = "red"
    BLUE = "blue"


class Level(enum.IntEnum):
    LOW = 1
    HIGH = 2


class Point(BaseModel):
    """Plain pydantic model."""

    x: int
    y: int


class TestValues:
    """Test pack_value()/unpack_value()."""

    @pytest.mark.parametrize(
        "value",
        [
            None,
            True,
            0,
            -1,
            2**63 - 1,
            1.5,
            "text",
            "",
            b"\x00\x01",
            [1, [2, 3]],
            {"a": {"b": None}},
            {1: "int keys"},
        ],
    )
    def test_builtin_values(self, value: object) -> None:
        """Test msgpack native values."""
        assert unpack_value(pack_value(value)) == value

    def test_tuple_and_list_stay_distinct(self) -> None:
        """Test tuples are not flattened to lists."""
        decoded = unpack_value(pack_value([(1, 2), [1, 2], ((3,),)]))

        assert decoded == [(1, 2), [1, 2], ((3,),)]
        assert type(decoded[0]) is tuple
        assert type(decoded[1]) is list
        assert type(decoded[2][0]) is tuple

    def test_empty_tuple(self) -> None:
        """Test the empty tuple."""
        assert unpack_value(pack_value(())) == ()

    def test_nest_tag_is_singleton(self) -> None:
        """Test NEST_TAG decodes to the same object."""
        assert unpack_value(pack_value(NEST_TAG)) is NEST_TAG

    def test_datetime_and_date(self) -> None:
        """Test naive and aware datetimes and dates."""
        naive = datetime.datetime(2024, 1, 2, 3, 4, 5, 678901)
        aware = datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)
        day = datetime.date(2024, 1, 2)

        assert unpack_value(pack_value([naive, aware, day])) == [naive, aware, day]
        assert type(unpack_value(pack_value(day))) is datetime.date

    def test_enum(self) -> None:
        """Test enum members decode to the same member."""
        assert unpack_value(pack_value(Color.BLUE)) is Color.BLUE
        assert unpack_value(pack_value(Level.HIGH)) is Level.HIGH

    def test_foreign_model(self) -> None:
        """Test pydantic models without a schema."""
        decoded = unpack_value(pack_value(Point(x=1, y=-2)))

        assert isinstance(decoded, Point)
        assert decoded == Point(x=1, y=-2)

    def test_builtin_subclass(self) -> None:
        """Test subclasses of builtin types degrade to the base type."""

        class Name(str):
            pass

        decoded = unpack_value(pack_value(Name("alice")))

        assert decoded == "alice"
        assert type(decoded) is str

    def test_unsupported_type(self) -> None:
        """Test values with no representation."""
        with pytest.raises(EncodeError, match="set"):
            pack_value({1, 2})

    def test_unknown_ext_code_kept(self) -> None:
        """Test unknown extension types are returned untouched."""
        data = msgpack.packb(msgpack.ExtType(42, b"raw"))

        assert unpack_value(data) == msgpack.ExtType(42, b"raw")

    def test_unresolvable_type(self) -> None:
        """Test a model path that cannot be imported."""
        inner = msgpack.packb(["no_such_module_xyz:Thing", {}])
        data = msgpack.packb(msgpack.ExtType(5, inner))

        with pytest.raises(DecodeError, match="no_such_module_xyz"):
            unpack_value(data)

    def test_path_not_a_model(self) -> None:
        """Test a model path that resolves to something else."""
        inner = msgpack.packb(["datetime:date", {}])
        data = msgpack.packb(msgpack.ExtType(5, inner))

        with pytest.raises(DecodeError, match="not a pydantic model"):
            unpack_value(data)

    def test_path_not_an_enum(self) -> None:
        """Test an enum path that resolves to a function is never called."""
        inner = msgpack.packb(["os:getenv", "HOME"])
        data = msgpack.packb(msgpack.ExtType(6, inner))

        with pytest.raises(DecodeError, match="not an enum"):
            unpack_value(data)

    def test_unloaded_module_not_imported(self) -> None:
        """Test type paths only resolve among modules already loaded."""
        if "this" in sys.modules:
            pytest.skip("module already loaded")
        inner = msgpack.packb(["this:s", 1])
        data = msgpack.packb(msgpack.ExtType(6, inner))

        with pytest.raises(DecodeError, match="not loaded"):
            unpack_value(data)
        assert "this" not in sys.modules

    def test_invalid_enum_value(self) -> None:
        """Test a value that is not a member of the enum."""
        inner = msgpack.packb([f"{Color.__module__}:Color", "green"])
        data = msgpack.packb(msgpack.ExtType(6, inner))

        with pytest.raises(DecodeError):
            unpack_value(data)

    def test_corrupt_data(self) -> None:
        """Test bytes that are not msgpack."""
        with pytest.raises(DecodeError, match="Corrupted payload"):
            unpack_value(b"\xc1")


class TestNestMarker:
    """Test is_nest_marker()."""

    def test_marker(self) -> None:
        assert is_nest_marker((NEST_TAG, 1, ()))
        assert is_nest_marker((NEST_TAG, "some.schema", (1, 2)))

    @pytest.mark.parametrize(
        "value",
        [
            [NEST_TAG, 1, ()],
            (NEST_TAG, 1, [1]),
            (NEST_TAG, 1),
            (NEST_TAG, 1, (), ()),
            ("NEST_TAG", 1, ()),
            None,
            "NEST_TAG",
        ],
    )
    def test_not_marker(self, value: object) -> None:
        assert not is_nest_marker(value)


class TestCompression:
    """Test compress()/decompress()."""

    def test_round_trip(self) -> None:
        data = b"abc" * 100

        assert decompress(compress(data)) == data
        assert len(compress(data)) < len(data)

    def test_zlib_stream(self) -> None:
        """Test output is a standard zlib stream."""
        assert zlib.decompress(compress(b"payload", CodecConfig(compression_level=1))) == b"payload"

    def test_invalid_stream(self) -> None:
        with pytest.raises(DecodeError, match="Cannot decompress"):
            decompress(b"\x00\x01\x02")


class TestPayload:
    """Test pack_payload()/unpack_payload()."""

    def test_round_trip(self) -> None:
        assert unpack_payload(pack_payload(3, (1, None, "x"))) == (3, (1, None, "x"))

    def test_bytearray_accepted(self) -> None:
        assert unpack_payload(bytearray(pack_payload(1, ()))) == (1, ())

    @pytest.mark.parametrize("payload", [[1], [1, 2], [1, [2], 3], "x", 5])
    def test_malformed(self, payload: object) -> None:
        data = zlib.compress(msgpack.packb(payload))

        with pytest.raises(DecodeError, match="Malformed payload"):
            unpack_payload(data)
