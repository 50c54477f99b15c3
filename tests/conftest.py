import asyncio
import json
import threading

import pytest  # type: ignore
import requests

from pyhydra.client.commit import CommitTxBuilder, TxSigner
from pyhydra.client.errors import ConnectionLost
from pyhydra.client.submit import SubmissionResult

NOT_JSON = object()


class FakeResponse(object):
    def __init__(self, body=None, status_code=200):
        self.body = body
        self.status_code = status_code

    def json(self):
        if self.body is NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.body

    def raise_for_status(self):
        if not 200 <= self.status_code < 300:
            raise requests.exceptions.HTTPError("HTTP {}".format(self.status_code))


class FakeHttp(object):
    """Stands in for a requests.Session; replies (or raises) in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def _reply(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def get(self, url, **kwargs):
        return self._reply('GET', url, **kwargs)

    def post(self, url, **kwargs):
        return self._reply('POST', url, **kwargs)


def greetings(status):
    return json.dumps({'tag': 'Greetings', 'headStatus': status, 'me': {'vkey': 'aa'}})


def tagged(tag, **fields):
    return json.dumps(dict(tag=tag, **fields))


class FakeConnection(object):
    """Replays a fixed list of node messages.

    Once the script runs out it either reports the connection as lost or,
    with `hang=True`, blocks like a quiet but healthy node.
    """

    def __init__(self, messages, hang=False, fail_open=False, log=None):
        self.url = 'ws://fake-node:4001'
        self.messages = list(messages)
        self.hang = hang
        self.fail_open = fail_open
        self.sent = []
        self.log = log if log is not None else []
        self.opened = False
        self.closed = False

    async def open(self):
        if self.fail_open:
            raise ConnectionLost(self.url, "refused")
        self.opened = True

    async def recv(self):
        if self.messages:
            return self.messages.pop(0)
        if self.hang:
            await asyncio.Event().wait()
        raise ConnectionLost(self.url)

    async def send_command(self, tag, **params):
        self.sent.append(tag)
        self.log.append(tag)

    async def close(self):
        self.closed = True


class FakeBuilder(CommitTxBuilder):
    def __init__(self, fail=None):
        self.calls = []
        self.fail = fail

    def build_commit(self, tx_hash, output_index):
        self.calls.append((tx_hash, output_index))
        if self.fail:
            raise self.fail
        return 'unsigned-{}-{}'.format(tx_hash, output_index)


class FakeSigner(TxSigner):
    def sign_tx(self, cbor_hex):
        return 'signed-' + cbor_hex


class FakeSubmitter(object):
    def __init__(self, fail=None, log=None):
        self.calls = []
        self.fail = fail
        self.log = log if log is not None else []

    def submit(self, endpoint, payload, correlation_id):
        self.calls.append((endpoint, payload, correlation_id))
        self.log.append('commit')
        if self.fail:
            raise self.fail
        return SubmissionResult(tx_hash='f00d', correlation_id=correlation_id, raw={})


class StuckSubmitter(FakeSubmitter):
    """Blocks inside `submit` until `release` is set."""

    def __init__(self):
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()

    def submit(self, endpoint, payload, correlation_id):
        self.started.set()
        self.release.wait(10)
        return super().submit(endpoint, payload, correlation_id)


@pytest.fixture
def builder():
    return FakeBuilder()


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def submitter():
    return FakeSubmitter()
