"""
Property-based tests for the OSC codec using hypothesis.

Purpose:
    Check round-trip, alignment and no-crash invariants across random
    addresses, values and byte strings.
"""

from hypothesis import given, settings, strategies as st

from osc_sdk_python.codec import OscValue, ValueKind, decode_packet, encode_message
from osc_sdk_python.codec.osc_types import INT32_MAX, INT32_MIN
from osc_sdk_python.errors import DecodeError

# Printable BMP text without NUL or surrogates
printable = st.text(alphabet=st.characters(min_codepoint=0x20, max_codepoint=0xD7FF), max_size=40)
addresses = printable.map(lambda s: "/" + s)
int32s = st.integers(min_value=INT32_MIN, max_value=INT32_MAX)
float32s = st.floats(width=32, allow_nan=False)


class TestRoundTrip:

    @given(address=addresses, value=int32s)
    def test_int(self, address, value):
        message = decode_packet(encode_message(address, value)).message
        assert (message.address, message.value) == (address, OscValue(ValueKind.INT, value))

    @given(address=addresses, value=float32s)
    def test_float(self, address, value):
        message = decode_packet(encode_message(address, value)).message
        assert (message.address, message.value) == (address, OscValue(ValueKind.FLOAT, value))

    @given(address=addresses, value=printable)
    def test_string(self, address, value):
        message = decode_packet(encode_message(address, value)).message
        assert (message.address, message.value) == (address, OscValue(ValueKind.STRING, value))


class TestAlignment:

    @given(address=addresses, value=st.one_of(int32s, float32s, printable, st.booleans()))
    def test_tag_and_payload_offsets_are_aligned(self, address, value):
        data = encode_message(address, value)
        assert len(data) % 4 == 0

        tag_offset = len(address.encode("utf-8")) + 1
        tag_offset += (4 - tag_offset % 4) % 4
        assert tag_offset % 4 == 0
        assert data[tag_offset:tag_offset + 1] == b","

        payload_offset = tag_offset + 4
        assert payload_offset % 4 == 0
        assert payload_offset <= len(data)

    @given(address=addresses)
    def test_address_only_is_aligned(self, address):
        assert len(encode_message(address)) % 4 == 0


class TestMalformed:

    @given(data=st.binary(max_size=96))
    @settings(max_examples=300)
    def test_decode_never_raises(self, data):
        result = decode_packet(data)
        if result.ok:
            assert result.message.address
            assert isinstance(result.message.value.kind, ValueKind)
        else:
            assert isinstance(result.error, DecodeError)

    @given(address=addresses, value=st.one_of(int32s, float32s, printable), data=st.data())
    def test_truncated_packets_never_raise(self, address, value, data):
        packet = encode_message(address, value)
        cut = data.draw(st.integers(min_value=0, max_value=len(packet)))
        result = decode_packet(packet[:cut])
        assert result.ok or isinstance(result.error, DecodeError)
