# Copyright (c) 2017 Pieter Wuille
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.

"""Bech32 as used by Shelley-era ledger addresses.

Unlike segwit addresses these strings carry a plain byte payload with no
witness version, and are routinely longer than the 90 characters BIP-173
allows, so no length cap is enforced here.
"""
from typing import List, Optional, Tuple


CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"


GENERATOR = (0x3b6a57b2, 0x26508e6d, 0x1ea119fa, 0x3d4233dd, 0x2a1462b3)


def _polymod(hrp: str, data: bytes) -> int:
    """BCH checksum over the expanded HRP followed by `data`."""
    values = bytes([ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]) + data
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1ffffff) << 5 ^ value
        for i, g in enumerate(GENERATOR):
            chk ^= g if ((top >> i) & 1) else 0
    return chk


def bech32_encode(hrp: str, data: bytes) -> str:
    """Compute a Bech32 string given HRP and 5-bit data values."""
    data = bytes(data)
    polymod = _polymod(hrp, data + bytes(6)) ^ 1
    checksum = bytes([(polymod >> 5 * (5 - i)) & 31 for i in range(6)])
    return hrp + '1' + ''.join([CHARSET[d] for d in data + checksum])


def bech32_decode(bech: str) -> Tuple[str, bytes]:
    """Validate a Bech32 string, and return the HRP and 5-bit data values."""
    if not isinstance(bech, str):
        raise ValueError("Not a bech32-encoded string: {!r}".format(bech))
    if ((any(ord(x) < 33 or ord(x) > 126 for x in bech)) or (bech.lower() != bech and bech.upper() != bech)):
        raise ValueError("Not a bech32-encoded string: {}".format(bech))

    bech = bech.lower()
    pos = bech.rfind('1')
    if pos < 1 or pos + 7 > len(bech):
        raise ValueError("Could not locate hrp separator '1' in {}".format(bech))

    if not all(x in CHARSET for x in bech[pos + 1:]):
        raise ValueError("Non-bech32 character found in {}".format(bech))

    hrp = bech[:pos]
    data = bytes([CHARSET.find(x) for x in bech[pos + 1:]])
    if _polymod(hrp, data) != 1:
        raise ValueError("Checksum verification failed for {}".format(bech))

    return (hrp, data[:-6])


def convertbits(data, frombits: int, tobits: int, pad: bool = True) -> Optional[List[int]]:
    """General power-of-2 base conversion."""
    acc = 0
    bits = 0
    ret = []
    maxv = (1 << tobits) - 1
    max_acc = (1 << (frombits + tobits - 1)) - 1
    for value in data:
        if value < 0 or (value >> frombits):
            return None
        acc = ((acc << frombits) | value) & max_acc
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            ret.append((acc >> bits) & maxv)
    if pad:
        if bits:
            ret.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or ((acc << (tobits - bits)) & maxv):
        return None
    return ret


def encode_bytes(hrp: str, payload: bytes) -> str:
    """Encode a raw byte payload under `hrp`."""
    return bech32_encode(hrp, bytes(convertbits(payload, 8, 5)))


def decode_bytes(bech: str) -> Tuple[str, bytes]:
    """Decode a bech32 string into its HRP and raw byte payload."""
    hrp, data = bech32_decode(bech)
    decoded = convertbits(data, 5, 8, False)
    if decoded is None:
        raise ValueError("Invalid padding in {}".format(bech))
    return hrp, bytes(decoded)
