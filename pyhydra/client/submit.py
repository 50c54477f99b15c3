import logging
from dataclasses import dataclass

import requests

from .config import DEFAULT_TIMEOUT
from .errors import SubmissionError, SubmissionRejected

SUBMIT_METHOD = 'trp.submit'
PROTOCOL_VERSION = 'v1alpha6'


@dataclass(frozen=True)
class SubmissionResult:
    tx_hash: str
    correlation_id: str
    raw: dict


class TxSubmitter(object):
    """Posts signed transactions to a TRP JSON-RPC endpoint.

    The correlation id is passed through as the JSON-RPC `id`, for the
    remote side's tracing; nothing is deduplicated here.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session=None,
                 logger=logging.getLogger(__name__)):
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.logger = logger

    @staticmethod
    def envelope(payload: str, correlation_id: str) -> dict:
        return {
            'jsonrpc': '2.0',
            'method': SUBMIT_METHOD,
            'params': {
                'tx': {
                    'payload': payload,
                    'encoding': 'hex',
                    'version': PROTOCOL_VERSION,
                },
            },
            'id': correlation_id,
        }

    def submit(self, endpoint: str, payload: str, correlation_id: str) -> SubmissionResult:
        request = self.envelope(payload, correlation_id)
        self.logger.debug("Submitting %s to %s", correlation_id, endpoint)
        try:
            response = self.session.post(endpoint, json=request, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SubmissionError(endpoint, correlation_id, str(e))

        # An error body takes precedence over the HTTP status.
        try:
            resp = response.json()
        except ValueError:
            raise SubmissionError(
                endpoint, correlation_id,
                "HTTP {}, body is not JSON".format(response.status_code)
            )
        self.logger.debug("Received response for %s: %r", correlation_id, resp)

        if not isinstance(resp, dict):
            raise SubmissionError(endpoint, correlation_id, "response is not an object: {!r}".format(resp))
        if resp.get('error'):
            error = resp['error']
            reason = error.get('message', str(error)) if isinstance(error, dict) else str(error)
            raise SubmissionRejected(endpoint, correlation_id, reason, error=error)
        if not 200 <= response.status_code < 300:
            raise SubmissionError(endpoint, correlation_id, "HTTP {}".format(response.status_code))

        result = resp.get('result')
        tx_hash = result.get('hash') if isinstance(result, dict) else None
        if not tx_hash:
            raise SubmissionRejected(endpoint, correlation_id, "no transaction hash in result", error=resp)

        self.logger.info("Submitted %s as %s", correlation_id, tx_hash)
        return SubmissionResult(tx_hash=tx_hash, correlation_id=correlation_id, raw=resp)
