from pyhydra.proto.bech32 import (
    CHARSET, bech32_decode, bech32_encode, convertbits, decode_bytes, encode_bytes,
)
import pytest  # type: ignore


def test_bip173_vectors():
    # Valid strings from BIP-173.
    for s in ["A12UEL5L",
              "a12uel5l",
              "abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqxw",
              "split1checkupstagehandshakeupstreamerranterredcaperred2y9e3w"]:
        hrp, data = bech32_decode(s)
        assert bech32_encode(hrp, data) == s.lower()


def test_invalid_strings():
    for s in ["A1G7SGD8",        # checksum calculated with uppercase hrp
              "x1b4n0q5v",       # invalid data character
              "pzry9x0s0muk",    # no separator
              "1pzry9x0s0muk",   # empty hrp
              "li1dgmt3",        # too short checksum
              "A12uEL5L"]:       # mixed case
        with pytest.raises(ValueError):
            bech32_decode(s)


def test_long_payload_is_not_capped():
    payload = bytes(range(57))
    s = encode_bytes('addr_test', payload)
    assert len(s) > 90
    assert decode_bytes(s) == ('addr_test', payload)


def test_corrupted_checksum():
    s = encode_bytes('addr', b'\x61' + b'\x11' * 28)
    last = s[-1]
    corrupt = s[:-1] + (CHARSET[(CHARSET.index(last) + 1) % 32])
    with pytest.raises(ValueError, match='Checksum'):
        decode_bytes(corrupt)


def test_convertbits():
    assert convertbits([0xff], 8, 5) == [31, 28]
    assert convertbits([31, 28], 5, 8, False) == [0xff]
    # Non-zero padding bits are rejected when decoding.
    assert convertbits([31, 29], 5, 8, False) is None
    assert convertbits([256], 8, 5) is None
