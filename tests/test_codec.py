from binascii import unhexlify
from pyln.features import Features, FeatureSupport, UnknownFeature, codec, is_supported_by
from pyln.features.catalog import (
    BASIC_MPP,
    HOSTED_CHANNELS,
    OPTION_DATA_LOSS_PROTECT,
    PAYMENT_SECRET,
    VAR_ONION_OPTIN,
)
import pytest

M = FeatureSupport.MANDATORY
O = FeatureSupport.OPTIONAL  # noqa: E741


def test_empty():
    assert(codec.encode(Features.empty()) == b'')
    assert(codec.decode(b'') == Features.empty())
    assert(codec.decode_bits(b'') == [])
    assert(codec.encode_bits([]) == b'')


def test_single_mandatory():
    f = Features.of((VAR_ONION_OPTIN, M))
    assert(codec.encode(f) == b'\x01\x00')
    assert(codec.decode(b'\x01\x00') == f)
    assert(codec.decode(b'\x01\x00').unknown == frozenset())


def test_bit_placement():
    # Bit 0 is the least significant bit of the last byte.
    assert(codec.encode_bits([0]) == b'\x01')
    assert(codec.encode_bits([7]) == b'\x80')
    assert(codec.encode_bits([8]) == b'\x01\x00')
    assert(codec.encode_bits([0, 15]) == b'\x80\x01')
    assert(codec.encode_bits([23]) == b'\x80\x00\x00')

    assert(codec.decode_bits(b'\x01') == [0])
    assert(codec.decode_bits(b'\x80\x01') == [0, 15])
    assert(codec.decode_bits(b'\x00\x00\x80') == [7])


def test_encode_bad_bits():
    with pytest.raises(ValueError, match='non-negative'):
        codec.encode_bits([3, -1])


def test_decode_bad_type():
    with pytest.raises(TypeError, match='data must be bytes'):
        codec.decode('0100')


def test_invoice_featurebits():
    """The featurebits of the invoice in pyln-proto's test_invoice"""
    f = codec.from_hex('0x28200')
    assert(f == Features({VAR_ONION_OPTIN: O,
                          PAYMENT_SECRET: O,
                          BASIC_MPP: O}))
    assert(codec.to_hex(f) == '028200')
    assert(f.invoice_features() == dict(f.activated))


def test_unknown_bits():
    # bit 4 and bit 33 are not known
    data = unhexlify('0200000011')
    f = codec.decode(data)
    assert(f.activated == {OPTION_DATA_LOSS_PROTECT: M})
    assert(f.unknown == frozenset([UnknownFeature(4), UnknownFeature(33)]))
    assert(codec.encode(f) == data)


def test_leading_zeroes():
    f = codec.decode(b'\x00\x00\x01\x00')
    assert(f == Features.of((VAR_ONION_OPTIN, M)))
    assert(codec.encode(f) == b'\x01\x00')


def test_high_bits():
    f = Features({HOSTED_CHANNELS: O, PAYMENT_SECRET: M}, [40001])
    data = codec.encode(f)
    assert(len(data) == 40001 // 8 + 1)
    assert(data[-1] == 0)
    assert(data[-2] == 0x40)
    assert(codec.decode(data) == f)


def test_roundtrip():
    for h in ['', '00', '01', '0100', '80', 'ffff', '0a8a59a1', '2000000000000000000100',
              '000000000f']:
        b = unhexlify(h)
        f = codec.decode(b)
        again = codec.decode(codec.encode(f))
        assert(again == f)
        assert(codec.encode(again) == codec.encode(f))


def test_both_bits_reencode():
    # 0x0300 sets both bits of var_onion_optin, the optional one wins.
    f = codec.decode(b'\x03\x00')
    assert(f == Features.of((VAR_ONION_OPTIN, O)))
    assert(codec.encode(f) == b'\x02\x00')
    assert(is_supported_by(Features.empty(), f))


def test_decode_any_bytes():
    for data in [b'\x00', b'\x03\x00', bytes(range(256)), b'\xff' * 64]:
        f = codec.decode(data)
        assert(codec.decode(codec.encode(f)) == f)


def test_int_conversion():
    assert(codec.from_int(0) == Features.empty())
    assert(codec.from_int(1 << 8) == Features.of((VAR_ONION_OPTIN, M)))
    assert(codec.to_int(Features.of((VAR_ONION_OPTIN, O))) == 1 << 9)
    assert(codec.to_int(Features.empty()) == 0)
    with pytest.raises(ValueError):
        codec.from_int(-1)


def test_from_featurebits():
    expected = Features.of((VAR_ONION_OPTIN, M))
    assert(codec.from_featurebits(256) == expected)
    assert(codec.from_featurebits('0100') == expected)
    assert(codec.from_featurebits(b'\x01\x00') == expected)
    assert(codec.from_featurebits(bytearray(b'\x01\x00')) == expected)

    with pytest.raises(TypeError, match='Could not convert featurebits'):
        codec.from_featurebits(1.0)
    with pytest.raises(TypeError, match='Could not convert featurebits'):
        codec.from_featurebits(True)
    with pytest.raises(ValueError):
        codec.from_featurebits('zz')
