"""Two-party multisig native scripts.

A native script is serialized as a tagged CBOR array. The variants we need
are:

    sig(keyhash)        = [0, keyhash]
    all(scripts...)     = [1, [scripts...]]
    any(scripts...)     = [2, [scripts...]]

The script hash is blake2b-224 over the serialized script prefixed with the
native-script language tag (0x00), and the address it locks funds to is an
enterprise script address over that hash.
"""
import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Union

from . import cbor
from .address import Network, key_hash_from, script_address

logger = logging.getLogger(__name__)

NATIVE_SCRIPT_TAG = b'\x00'
SCRIPT_HASH_LEN = 28

SIG = 0


class ScriptPolicy(Enum):
    ALL = 1
    ANY = 2

    @classmethod
    def from_str(cls, s: str) -> 'ScriptPolicy':
        try:
            return cls[s.upper()]
        except KeyError:
            raise ValueError("Unknown script policy {!r}, expected 'any' or 'all'".format(s))


@dataclass(frozen=True)
class MultisigScript:
    key_hash1: bytes
    key_hash2: bytes
    policy: ScriptPolicy
    network: Network
    script_bytes: bytes
    script_hash: bytes
    address: str

    @property
    def script_cbor(self) -> str:
        return self.script_bytes.hex()

    def to_json(self) -> dict:
        return {
            'address': self.address,
            'scriptCbor': self.script_bytes.hex(),
            'scriptHash': self.script_hash.hex(),
            'policy': self.policy.name.lower(),
            'network': int(self.network),
        }


def script_hash(script_bytes: bytes) -> bytes:
    return hashlib.blake2b(NATIVE_SCRIPT_TAG + script_bytes, digest_size=SCRIPT_HASH_LEN).digest()


@lru_cache(maxsize=256)
def _derive(key_hash1: bytes, key_hash2: bytes, network: Network, policy: ScriptPolicy) -> MultisigScript:
    script = [policy.value, [[SIG, key_hash1], [SIG, key_hash2]]]
    script_bytes = cbor.dumps(script)
    shash = script_hash(script_bytes)
    return MultisigScript(
        key_hash1=key_hash1,
        key_hash2=key_hash2,
        policy=policy,
        network=network,
        script_bytes=script_bytes,
        script_hash=shash,
        address=str(script_address(shash, network)),
    )


def derive_multisig(key1: Union[str, bytes], key2: Union[str, bytes],
                    network: Union[Network, int] = Network.TEST,
                    policy: ScriptPolicy = ScriptPolicy.ANY) -> MultisigScript:
    """Derive the 1-of-2 (ANY) or 2-of-2 (ALL) script over two keys.

    `key1` and `key2` can be bech32 addresses (the payment key hash, or the
    stake key hash for reward addresses, is used), 56-character hex key
    hashes or raw 28-byte key hashes. Raises `InvalidAddress` if either does
    not resolve to a key hash.
    """
    return _derive(key_hash_from(key1), key_hash_from(key2), Network(network), policy)


def create_multisig_address(address1: str, address2: str, network_id: int = 0,
                            script_type: str = 'any') -> MultisigScript:
    ms = derive_multisig(address1, address2, network_id, ScriptPolicy.from_str(script_type))
    logger.debug("Generated script: address=%s scriptCbor=%s scriptHash=%s",
                 ms.address, ms.script_cbor, ms.script_hash.hex())
    return ms
