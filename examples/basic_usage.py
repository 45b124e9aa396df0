#!/usr/bin/env python3
"""Basic usage example for recordproto.

This example demonstrates:
1. Declaring records and a context converter
2. Encoding to the compact index-based format
3. Decoding back to a Pydantic model
4. Comparing against JSON and the self-describing mode
"""

from __future__ import annotations

from typing import ClassVar

from recordproto import (
    PayloadConverter,
    Record,
    decode,
    encode,
    encode_named,
    payload_of,
)


class Address(Record):
    """Postal address, nested inside User."""

    proto_schema: ClassVar[str] = "myapp.users.address"

    street: str | None = None
    city: str | None = None


class User(Record):
    """Application user."""

    proto_schema: ClassVar[str] = "myapp.users.user"

    id: int | None = None
    name: str | None = None
    email: str | None = None
    address: Address | None = None


# One converter per bounded context; indices are local to it
USERS = PayloadConverter(
    "myapp.users",
    [
        (1, "myapp.users.user"),
        (2, "myapp.users.address"),
    ],
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("recordproto Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Creating a user record...")
    user = User(
        id=42,
        name="Alice",
        email="alice@example.com",
        address=Address(street="1 Harbour Rd", city="Bergen"),
    )
    print(f"   {user!r}")
    print()

    print("2. Encoding with the myapp.users converter...")
    data = encode(user, USERS)
    index, values = payload_of(data)

    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Schema index: {index}")
    print(f"   Value tuple: {values}")
    print()

    print("3. Decoding from binary...")
    decoded = decode(data, USERS)

    print(f"   {decoded!r}")
    print(f"   City: {decoded.address.city}")
    print()

    print("4. Verifying round-trip...")
    if decoded == user:
        print("   ✓ Round-trip successful! Records match.")
    else:
        print("   ✗ Round-trip failed! Records don't match.")
    print()

    print("5. Comparing sizes...")
    json_bytes = user.model_dump_json().encode("utf-8")
    named = encode_named(user)

    print(f"   recordproto size: {len(data)} bytes")
    print(f"   Self-describing size: {len(named)} bytes")
    print(f"   JSON size: {len(json_bytes)} bytes")
    print(f"   Ratio vs JSON: {len(json_bytes) / len(data):.1f}x")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
