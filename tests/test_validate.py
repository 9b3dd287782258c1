from __future__ import annotations

import pytest

from rrdclient.errors import EncodeError, InvalidIdentifier
from rrdclient.validate import identifier_problem, validate_directory, validate_identifier


@pytest.mark.parametrize("name", ["a", "ds1", "test_path", "with-dash", "A" * 64])
def test_valid_identifiers(name):
    assert identifier_problem(name) is None
    validate_identifier(name)


@pytest.mark.parametrize("name", ["", "A" * 65, "with space", "dot.rrd", "slash/path", "new\nline", "é"])
def test_invalid_identifiers(name):
    assert identifier_problem(name) is not None
    with pytest.raises(InvalidIdentifier):
        validate_identifier(name)


def test_invalid_identifier_is_an_encode_error():
    with pytest.raises(EncodeError, match="data source name"):
        validate_identifier("bad name", kind="data source name")


def test_trailing_newline_is_rejected():
    # a permissive "$" anchor would let this through and onto the wire
    assert identifier_problem("path\n") is not None


def test_directories():
    validate_directory("/")
    validate_directory("sub")
    validate_directory("/sub/dir/")
    for bad in ("", "//", "a//b", "../up", "a b"):
        with pytest.raises(InvalidIdentifier):
            validate_directory(bad)
