"""Shelley address parsing and encoding.

An address is a header byte followed by one or two 28-byte credentials
(pointer addresses carry a variable-length pointer instead of the second
one). The header's high nibble selects the address type, the low nibble the
network id.
"""
from enum import IntEnum
from typing import Union

from .bech32 import decode_bytes, encode_bytes

KEY_HASH_LEN = 28


class InvalidAddress(ValueError):
    def __init__(self, address, reason: str):
        super(ValueError, self).__init__(
            "Invalid address {!r}: {}".format(address, reason)
        )
        self.address = address
        self.reason = reason


class Network(IntEnum):
    TEST = 0
    MAIN = 1


class AddressType(IntEnum):
    BASE_KEY_KEY = 0
    BASE_SCRIPT_KEY = 1
    BASE_KEY_SCRIPT = 2
    BASE_SCRIPT_SCRIPT = 3
    POINTER_KEY = 4
    POINTER_SCRIPT = 5
    ENTERPRISE_KEY = 6
    ENTERPRISE_SCRIPT = 7
    REWARD_KEY = 14
    REWARD_SCRIPT = 15


# Types whose first credential is a verification key hash.
KEY_CREDENTIAL_TYPES = {
    AddressType.BASE_KEY_KEY,
    AddressType.BASE_KEY_SCRIPT,
    AddressType.POINTER_KEY,
    AddressType.ENTERPRISE_KEY,
    AddressType.REWARD_KEY,
}

REWARD_TYPES = {AddressType.REWARD_KEY, AddressType.REWARD_SCRIPT}


def _hrp(addr_type: AddressType, network: int) -> str:
    prefix = 'stake' if addr_type in REWARD_TYPES else 'addr'
    return prefix if network == Network.MAIN else prefix + '_test'


class Address(object):
    def __init__(self, header: int, payload: bytes):
        self.header = header
        self.payload = payload

    @property
    def addr_type(self) -> AddressType:
        return AddressType(self.header >> 4)

    @property
    def network(self) -> int:
        return self.header & 0x0F

    @classmethod
    def from_bytes(cls, b: bytes, source=None) -> 'Address':
        source = b if source is None else source
        if len(b) < 1 + KEY_HASH_LEN:
            raise InvalidAddress(source, "too short ({} bytes)".format(len(b)))

        header = b[0]
        try:
            addr_type = AddressType(header >> 4)
        except ValueError:
            raise InvalidAddress(source, "unsupported address type {}".format(header >> 4))

        if addr_type <= AddressType.BASE_SCRIPT_SCRIPT:
            expected = 1 + 2 * KEY_HASH_LEN
        elif addr_type in (AddressType.POINTER_KEY, AddressType.POINTER_SCRIPT):
            expected = None
        else:
            expected = 1 + KEY_HASH_LEN

        if expected is not None and len(b) != expected:
            raise InvalidAddress(
                source,
                "{} address must be {} bytes, got {}".format(addr_type.name.lower(), expected, len(b))
            )
        if expected is None and len(b) <= 1 + KEY_HASH_LEN:
            raise InvalidAddress(source, "pointer address is missing its pointer")
        return cls(header=header, payload=bytes(b[1:]))

    @classmethod
    def from_str(cls, s: str) -> 'Address':
        try:
            hrp, raw = decode_bytes(s)
        except ValueError as e:
            raise InvalidAddress(s, str(e))

        addr = cls.from_bytes(raw, source=s)
        if hrp != _hrp(addr.addr_type, addr.network):
            raise InvalidAddress(
                s, "prefix {} does not match a {} address on network {}".format(
                    hrp, addr.addr_type.name.lower(), addr.network)
            )
        return addr

    def key_hash(self) -> bytes:
        """The first credential, which must be a key (not a script) hash."""
        if self.addr_type not in KEY_CREDENTIAL_TYPES:
            raise InvalidAddress(str(self), "credential is a script hash, not a key hash")
        return self.payload[:KEY_HASH_LEN]

    def to_bytes(self) -> bytes:
        return bytes([self.header]) + self.payload

    def __str__(self) -> str:
        return encode_bytes(_hrp(self.addr_type, self.network), self.to_bytes())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return False
        return self.to_bytes() == other.to_bytes()

    def __repr__(self) -> str:
        return "Address[{}]".format(str(self))


def key_hash_from(value: Union[str, bytes]) -> bytes:
    """Resolve an address, a hex key hash or raw key hash bytes to 28 bytes."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != KEY_HASH_LEN:
            raise InvalidAddress(value, "key hash must be {} bytes, got {}".format(KEY_HASH_LEN, len(value)))
        return bytes(value)

    if not isinstance(value, str):
        raise InvalidAddress(value, "expected an address or key hash, got {}".format(type(value).__name__))

    if len(value) == 2 * KEY_HASH_LEN:
        try:
            return bytes.fromhex(value)
        except ValueError:
            # Not hex, maybe a (very short) bech32 string.
            pass
    return Address.from_str(value).key_hash()


def script_address(script_hash: bytes, network: int) -> Address:
    """Enterprise address locked by the script with `script_hash`."""
    if len(script_hash) != KEY_HASH_LEN:
        raise ValueError("script hash must be {} bytes".format(KEY_HASH_LEN))
    if network not in (Network.TEST, Network.MAIN):
        raise ValueError("unknown network id {}".format(network))
    header = (AddressType.ENTERPRISE_SCRIPT << 4) | int(network)
    return Address(header=header, payload=script_hash)
