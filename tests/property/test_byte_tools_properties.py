"""
Property-based tests for the byte-oriented tools.

Chunked processing must agree with whole-buffer processing, and the
dump and diff outputs must be consistent with their input sizes.
"""

import io
import zlib

from hypothesis import given, settings
from hypothesis import strategies as st

from devutils.checksum import ChecksumAlgorithm, checksum_bytes, checksum_stream
from devutils.countfile import count_bytes, count_stream
from devutils.diff import DiffOptions, diff_lines
from devutils.hexdump import HexdumpFormat, HexdumpOptions, dump_bytes, iter_lines

algorithms = st.sampled_from(list(ChecksumAlgorithm))
chunk_sizes = st.integers(min_value=1, max_value=64)

text_bytes = st.binary(max_size=300) | st.lists(
    st.sampled_from([b"a", b"bc", b" ", b"\t", b"\n", b"\r\n", b"\x00", b"\xff"]), max_size=80
).map(b"".join)

lines_strategy = st.lists(
    st.binary(max_size=12).map(lambda b: b.replace(b"\n", b"") + b"\n"), max_size=15
)


@given(data=st.binary(max_size=1024), algorithm=algorithms, chunk_size=chunk_sizes)
@settings(max_examples=100, deadline=None)
def test_checksum_independent_of_chunk_size(data, algorithm, chunk_size):
    """Streaming in any chunk size yields the whole-buffer checksum."""
    result = checksum_stream(io.BytesIO(data), algorithm, chunk_size=chunk_size)

    assert result.value == checksum_bytes(data, algorithm)
    assert result.bytes_processed == len(data)


@given(data=st.binary(max_size=1024))
@settings(max_examples=100, deadline=None)
def test_crc32_matches_reference(data):
    """CRC32 agrees with the reference implementation."""
    assert checksum_bytes(data, ChecksumAlgorithm.CRC32) == zlib.crc32(data) & 0xFFFFFFFF


@given(data=text_bytes, chunk_size=chunk_sizes)
@settings(max_examples=100, deadline=None)
def test_counts_independent_of_chunk_size(data, chunk_size):
    """Word state carried across chunks gives the whole-buffer counts."""
    assert count_stream(io.BytesIO(data), chunk_size) == count_bytes(data)


@given(data=text_bytes)
@settings(max_examples=100, deadline=None)
def test_count_invariants(data):
    """Lines count newlines, chars equal bytes, words never exceed non-space bytes."""
    stats = count_bytes(data)

    assert stats.lines == data.count(b"\n")
    assert stats.chars == stats.bytes == len(data)
    assert stats.words <= len(data.translate(None, b" \t\n\v\f\r"))


@given(data=st.binary(max_size=600), skip=st.integers(min_value=0, max_value=700))
@settings(max_examples=100, deadline=None)
def test_hexdump_lines_cover_input(data, skip):
    """Regrouped lines reassemble the input after the skipped prefix."""
    options = HexdumpOptions(skip=skip)
    pieces = list(iter_lines(io.BytesIO(data), options))

    assert b"".join(chunk for _, chunk in pieces) == data[skip:]
    assert all(offset % 16 == skip % 16 for offset, _ in pieces)


@given(data=st.binary(max_size=400), fmt=st.sampled_from(list(HexdumpFormat)))
@settings(max_examples=100, deadline=None)
def test_hexdump_without_suppression_has_one_line_per_row(data, fmt):
    """With suppression off there is exactly one line per 16 input bytes."""
    lines = dump_bytes(data, HexdumpOptions(format=fmt, suppress_duplicates=False))

    assert len(lines) == (len(data) + 15) // 16


@given(old=lines_strategy, new=lines_strategy)
@settings(max_examples=100, deadline=None)
def test_diff_of_identical_inputs_is_empty(old, new):
    """A sequence never differs from itself; hunk count is bounded by the longer input."""
    assert list(diff_lines(old, old)) == []

    hunks = list(diff_lines(old, new, DiffOptions()))
    assert len(hunks) <= max(len(old), len(new))
    assert all(1 <= hunk.line_no <= max(len(old), len(new)) for hunk in hunks)
