import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import requests

from .config import DEFAULT_TIMEOUT
from .errors import SnapshotParseError, SnapshotUnavailable


@dataclass(frozen=True)
class UtxoRecord:
    tx_hash: str
    output_index: int
    address: str
    value: Dict[str, str] = field(default_factory=dict)
    datum: Optional[str] = None
    datum_hash: Optional[str] = None
    inline_datum: Optional[object] = None
    reference_script: Optional[object] = None

    @property
    def reference(self) -> Tuple[str, int]:
        return (self.tx_hash, self.output_index)

    @property
    def amount(self) -> List[Dict[str, str]]:
        return [{'unit': unit, 'quantity': quantity} for unit, quantity in self.value.items()]

    def to_json(self) -> dict:
        return {
            'tx_hash': self.tx_hash,
            'output_index': self.output_index,
            'address': self.address,
            'amount': self.amount,
        }


def parse_reference(key: str) -> Tuple[str, int]:
    """Split a `<txhash>#<index>` snapshot key."""
    tx_hash, sep, index = key.partition('#')
    if not sep or not tx_hash or '#' in index:
        raise ValueError("expected <txhash>#<index>, got {!r}".format(key))
    if not index.isdigit():
        raise ValueError("output index {!r} is not a non-negative integer".format(index))
    return tx_hash, int(index)


def flatten_value(value: dict) -> Dict[str, str]:
    """Normalize a snapshot value to unit -> decimal string.

    Nodes either send units flat (`{"lovelace": "5", "<policy><name>": "1"}`)
    or nest native assets by policy id (`{"<policy>": {"<name>": 1}}`).
    """
    flat = {}
    for unit, quantity in value.items():
        if isinstance(quantity, dict):
            for name, q in quantity.items():
                flat[unit + name] = str(q)
        else:
            flat[unit] = str(quantity)
    return flat


class UtxoSnapshotIndexer(object):
    """Reads the head's UTxO snapshot and filters it.

    Every query does exactly one GET; nothing is cached and nothing is
    retried. Results keep the order of the snapshot object as the node sent
    it, which is stable across calls for an unchanged snapshot.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 session=None, logger=logging.getLogger(__name__)):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.logger = logger

    @property
    def url(self) -> str:
        return "{}/snapshot/utxo".format(self.base_url)

    def fetch_snapshot(self) -> List[UtxoRecord]:
        url = self.url
        self.logger.debug("Fetching UTxO snapshot from %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SnapshotUnavailable(url, str(e))

        if not 200 <= response.status_code < 300:
            raise SnapshotUnavailable(
                url, "HTTP {}".format(response.status_code), status=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SnapshotParseError(url, "body is not JSON: {}".format(e))

        if not isinstance(data, dict):
            raise SnapshotParseError(url, "expected an object, got {}".format(type(data).__name__))

        records = []
        for key, utxo in data.items():
            try:
                tx_hash, output_index = parse_reference(key)
            except ValueError as e:
                raise SnapshotParseError(url, str(e), key=key)
            if not isinstance(utxo, dict) or 'address' not in utxo or not isinstance(utxo.get('value'), dict):
                raise SnapshotParseError(url, "entry is missing address or value", key=key)

            records.append(UtxoRecord(
                tx_hash=tx_hash,
                output_index=output_index,
                address=utxo['address'],
                value=flatten_value(utxo['value']),
                datum=utxo.get('datum'),
                datum_hash=utxo.get('datumHash'),
                inline_datum=utxo.get('inlineDatum'),
                reference_script=utxo.get('referenceScript'),
            ))
        self.logger.debug("Snapshot holds %d UTxOs", len(records))
        return records

    def query_by_address(self, address: str) -> List[UtxoRecord]:
        return [r for r in self.fetch_snapshot() if r.address == address]

    def query_by_reference(self, tx_hash: str, output_index: int) -> Optional[UtxoRecord]:
        for r in self.fetch_snapshot():
            if r.reference == (tx_hash, output_index):
                return r
        return None

    def balance(self, address: str) -> Dict[str, str]:
        """Total quantity per unit held by `address`, as decimal strings."""
        totals: Dict[str, int] = {}
        for r in self.query_by_address(address):
            for unit, quantity in r.value.items():
                totals[unit] = totals.get(unit, 0) + int(quantity)
        return {unit: str(total) for unit, total in totals.items()}
