from pyhydra.client.config import HydraConfig, clamp_network_id, parse_timeout, redact
from pyhydra.client.errors import ConfigError
import pytest  # type: ignore

ENV = {
    'HYDRA_API_URL': 'http://node:4001',
    'HYDRA_WS_URL': 'ws://node:4001',
    'TRP_URL': 'http://trp:8164',
    'BLOCKFROST_API_KEY': 'preprodABCDEFGHIJKLMNOP',
    'ADMIN_SIGNING_KEY': '5820deadbeef',
}


def test_from_env():
    config = HydraConfig.from_env(ENV)
    assert config.api_url == 'http://node:4001'
    assert config.submit_url == 'http://trp:8164'
    assert config.network_id == 0
    assert config.timeout == 30
    assert config.history is False
    # Secrets stay out of the repr.
    assert 'preprod' not in repr(config)
    assert '5820' not in repr(config)


def test_network_id_is_clamped():
    assert clamp_network_id('-3') == 0
    assert clamp_network_id('0') == 0
    assert clamp_network_id('1') == 1
    assert clamp_network_id('42') == 1
    assert HydraConfig.from_env(dict(ENV, HYDRA_NETWORK_ID='7')).network_id == 1
    with pytest.raises(ConfigError, match='HYDRA_NETWORK_ID'):
        clamp_network_id('mainnet')


def test_require_names_every_missing_value():
    config = HydraConfig.from_env({'HYDRA_WS_URL': 'ws://node:4001', 'TRP_URL': ''})
    assert config.require('ws_url') is config
    with pytest.raises(ConfigError) as e:
        config.require('ws_url', 'api_url', 'submit_url')
    assert e.value.missing == ['HYDRA_API_URL', 'TRP_URL']


def test_subscription_url():
    config = HydraConfig.from_env(ENV)
    assert config.subscription_url() == 'ws://node:4001?history=no'

    config = HydraConfig.from_env(dict(ENV, HYDRA_HISTORY='1'))
    assert config.subscription_url() == 'ws://node:4001?history=yes'

    config = HydraConfig(ws_url='ws://node:4001/?snapshot-utxo=no')
    assert config.subscription_url() == 'ws://node:4001/?snapshot-utxo=no&history=no'

    config = HydraConfig(ws_url='ws://node:4001/?history=yes')
    assert config.subscription_url() == 'ws://node:4001/?history=yes'

    with pytest.raises(ConfigError):
        HydraConfig().subscription_url()


def test_redact():
    assert redact(None) == '<unset>'
    assert redact('preprodABCDEFGHIJ') == 'preprodABC...'


def test_timeout():
    assert HydraConfig.from_env(dict(ENV, HYDRA_TIMEOUT='2.5')).timeout == 2.5
    assert parse_timeout(30) == 30.0
    for bad in ['soon', '0', '-1', 'nan']:
        with pytest.raises(ConfigError, match='HYDRA_TIMEOUT'):
            HydraConfig.from_env(dict(ENV, HYDRA_TIMEOUT=bad))
