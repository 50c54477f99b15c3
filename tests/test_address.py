from pyhydra.proto.address import (
    Address, AddressType, InvalidAddress, Network, key_hash_from, script_address,
)
from pyhydra.proto.bech32 import encode_bytes
import pytest  # type: ignore

H1 = bytes(range(28))
H2 = b'\x11' * 28


def test_base_address_roundtrip():
    addr = Address(header=0x01, payload=H1 + H2)
    s = str(addr)
    assert s.startswith('addr1')
    parsed = Address.from_str(s)
    assert parsed == addr
    assert parsed.addr_type == AddressType.BASE_KEY_KEY
    assert parsed.network == Network.MAIN
    assert parsed.key_hash() == H1


def test_enterprise_testnet_address():
    s = str(Address(header=0x60, payload=H1))
    assert s.startswith('addr_test1v')
    assert Address.from_str(s).key_hash() == H1


def test_reward_address_uses_stake_key():
    s = str(Address(header=0xe1, payload=H2))
    assert s.startswith('stake1')
    assert key_hash_from(s) == H2


def test_script_credential_is_not_a_key_hash():
    s = str(Address(header=0x70, payload=H1))
    with pytest.raises(InvalidAddress, match='script'):
        key_hash_from(s)


def test_rejects_malformed_addresses():
    # Reward header under the payment prefix.
    with pytest.raises(InvalidAddress, match='prefix'):
        Address.from_str(encode_bytes('addr', bytes([0xe1]) + H1))
    # Byron-era header.
    with pytest.raises(InvalidAddress, match='unsupported'):
        Address.from_str(encode_bytes('addr', bytes([0x82]) + H1))
    # Base address missing its stake credential.
    with pytest.raises(InvalidAddress, match='57 bytes'):
        Address.from_str(encode_bytes('addr', bytes([0x01]) + H1))
    # Not bech32 at all.
    with pytest.raises(InvalidAddress):
        Address.from_str('DdzFFzCqrhsw3prhfMFDNFowbzUku3QmrMwarfjUbWXRisodn97R436SHc1rimp4MhPNmbdYb1aTdqtGSJixMVMi5MkArDQJ6Sc1n3Ez')


def test_key_hash_forms():
    assert key_hash_from(H1) == H1
    assert key_hash_from(H1.hex()) == H1
    with pytest.raises(InvalidAddress):
        key_hash_from(H1[:20])
    with pytest.raises(InvalidAddress):
        key_hash_from(1234)
    with pytest.raises(InvalidAddress):
        key_hash_from('')


def test_script_address():
    assert str(script_address(H1, Network.TEST)).startswith('addr_test1w')
    assert str(script_address(H1, Network.MAIN)).startswith('addr1w')
    with pytest.raises(ValueError):
        script_address(H1, 3)
