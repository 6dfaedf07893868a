"""Feature bitmap (de)serialization.

BOLT #9: the `features` fields are big-endian bitfields, bit 0 being the
least-significant bit of the last byte. Writers use the minimal number of
bytes, readers accept leading zero bytes.
"""
from .catalog import FeatureCatalog, known_features
from .features import Features
from typing import Iterable, List, Union
import bitstring  # type: ignore


def encode_bits(indexes: Iterable[int]) -> bytes:
    """Encode a set of bit indices into the shortest covering bytestring"""
    indexes = set(indexes)
    if not indexes:
        return b''

    if min(indexes) < 0:
        raise ValueError("Feature bits must be non-negative, got {}"
                         .format(min(indexes)))

    # Build with bit 0 first, pad to full bytes, then flip it around so bit
    # 0 ends up as the last bit on the wire.
    buf = bitstring.BitArray(bytes(max(indexes) // 8 + 1))
    buf.set(True, sorted(indexes))
    buf.reverse()
    return buf.tobytes()


def decode_bits(data: bytes) -> List[int]:
    """Return the indices of all set bits in `data`, lowest first"""
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("data must be bytes, {} received".format(type(data)))
    if len(data) == 0:
        return []

    buf = bitstring.BitArray(bytes(data))
    buf.reverse()
    return list(buf.findall('0b1'))


def encode(features: Features) -> bytes:
    return encode_bits(features.bits())


def decode(data: bytes, catalog: FeatureCatalog = known_features) -> Features:
    """Decode a feature bitmap as received from a peer.

This never fails on the content: bits we don't know about are kept as
`UnknownFeature`s so they can be checked and passed on.
    """
    return Features.from_bits(decode_bits(data), catalog)


def to_hex(features: Features) -> str:
    return encode(features).hex()


def from_hex(s: str, catalog: FeatureCatalog = known_features) -> Features:
    if s.startswith('0x'):
        s = s[2:]
    # Allow nibble-aligned bitmaps such as '0x28200'.
    if len(s) % 2 == 1:
        s = '0' + s
    return decode(bytes.fromhex(s), catalog)


def to_int(features: Features) -> int:
    return int.from_bytes(encode(features), 'big')


def from_int(i: int, catalog: FeatureCatalog = known_features) -> Features:
    if i < 0:
        raise ValueError("Feature bitmap must be non-negative, got {}".format(i))
    return decode(i.to_bytes((i.bit_length() + 7) // 8, 'big'), catalog)


def from_featurebits(bits: Union[int, str, bytes],
                     catalog: FeatureCatalog = known_features) -> Features:
    """Accept featurebits in any of the forms plugins use to declare them.

Integers are the bitmap itself, strings are hex encoded and bytes are the
raw wire encoding.
    """
    # bool is an int, but certainly not a bitmap.
    if isinstance(bits, bool):
        raise TypeError("Could not convert featurebits from bool")
    elif isinstance(bits, int):
        return from_int(bits, catalog)
    elif isinstance(bits, str):
        return from_hex(bits, catalog)
    elif isinstance(bits, (bytes, bytearray)):
        return decode(bits, catalog)
    else:
        raise TypeError("Could not convert featurebits from {}".format(type(bits)))
