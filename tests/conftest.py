"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest

from msgpack_lens.converter import MsgpackConverter


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def hello_bytes():
    """A one-entry map: {"hello": 123}."""
    return bytes([0x81, 0xA5, 0x68, 0x65, 0x6C, 0x6C, 0x6F, 0x7B])


@pytest.fixture
def hello_text():
    """Reference rendering of the one-entry map."""
    return '{\n  "hello": 123\n}'


@pytest.fixture
def sample_document_text():
    """A nested document already in the reference 2-space layout."""
    return (
        '{\n'
        '  "id": 57602261053,\n'
        '  "name": "Widget",\n'
        '  "price": 10.0,\n'
        '  "ratio": 0.25,\n'
        '  "tags": [\n'
        '    "a",\n'
        '    "b"\n'
        '  ],\n'
        '  "owner": {\n'
        '    "active": true,\n'
        '    "manager": null,\n'
        '    "balance": -1234\n'
        '  },\n'
        '  "empty": [],\n'
        '  "nothing": {},\n'
        '  "max": 18446744073709551615\n'
        '}'
    )


@pytest.fixture
def converter():
    """Converter with default settings."""
    return MsgpackConverter()
