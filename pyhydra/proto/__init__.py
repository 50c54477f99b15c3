from .address import Address, AddressType, InvalidAddress, Network, key_hash_from
from .native_script import MultisigScript, ScriptPolicy, create_multisig_address, derive_multisig

__version__ = "0.3.0"

__all__ = [
    "Address",
    "AddressType",
    "InvalidAddress",
    "MultisigScript",
    "Network",
    "ScriptPolicy",
    "create_multisig_address",
    "derive_multisig",
    "key_hash_from",
    "__version__",
]
