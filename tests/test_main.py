from conftest import FakeHttp, FakeResponse
from pyhydra.client.__main__ import main
from pyhydra.client.config import ENV_VARS
import json
import pytest  # type: ignore
import requests

H1 = bytes(range(28)).hex()
H2 = '11' * 28


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in list(ENV_VARS.values()) + ['HYDRA_NETWORK_ID', 'HYDRA_TIMEOUT', 'HYDRA_HISTORY']:
        monkeypatch.delenv(var, raising=False)


def test_address(capsys):
    assert main(['address', H1, H2, '--all']) == 0
    out = json.loads(capsys.readouterr().out)
    assert out['policy'] == 'all'
    assert out['network'] == 0
    assert out['address'].startswith('addr_test1w')


def test_address_network_from_env(monkeypatch, capsys):
    monkeypatch.setenv('HYDRA_NETWORK_ID', '1')
    assert main(['address', H1, H2]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out['policy'] == 'any'
    assert out['address'].startswith('addr1w')


def test_address_invalid():
    assert main(['address', H1, 'not-an-address']) == 1


def test_utxos(monkeypatch, capsys):
    snapshot = {
        'ab' * 32 + '#0': {'address': 'addr_test1a', 'value': {'lovelace': 7}},
        'cd' * 32 + '#1': {'address': 'addr_test1b', 'value': {'lovelace': 9}},
    }
    http = FakeHttp(FakeResponse(snapshot))
    monkeypatch.setattr(requests, 'Session', lambda: http)
    monkeypatch.setenv('HYDRA_API_URL', 'http://node:4001')

    assert main(['utxos', 'addr_test1b']) == 0
    out = json.loads(capsys.readouterr().out)
    assert [u['address'] for u in out['utxos']] == ['addr_test1b']
    assert http.calls[0][1] == 'http://node:4001/snapshot/utxo'


def test_utxos_needs_api_url():
    assert main(['utxos', 'addr_test1b']) == 1


def test_bad_timeout(monkeypatch):
    monkeypatch.setenv('HYDRA_TIMEOUT', 'soon')
    assert main(['address', H1, H2]) == 1
