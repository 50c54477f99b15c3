import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

import requests

from .config import DEFAULT_TIMEOUT
from .errors import CommitError, MissingCommitArgs
from .session import CommitArgs, StartSession
from .submit import SubmissionResult, TxSubmitter


class CommitTxBuilder(ABC):
    """Builds the unsigned transaction committing one output to the head."""

    @abstractmethod
    def build_commit(self, tx_hash: str, output_index: int) -> str:
        """Return the unsigned transaction as CBOR hex."""


class TxSigner(ABC):
    """Holder of the signing key(s); key storage is not our business."""

    @abstractmethod
    def sign_tx(self, cbor_hex: str) -> str:
        """Return the signed transaction as CBOR hex."""


class HydraCommitBuilder(CommitTxBuilder):
    """Asks the head node to draft the commit transaction.

    The node needs the full output being committed, not just its reference,
    so `utxo_resolver(tx_hash, output_index)` must look it up on the base
    ledger and return it in the node's UTxO JSON form (`address`, `value`,
    ...).
    """

    def __init__(self, api_url: str, utxo_resolver: Callable[[str, int], dict],
                 timeout: float = DEFAULT_TIMEOUT, session=None,
                 logger=logging.getLogger(__name__)):
        self.api_url = api_url.rstrip('/')
        self.utxo_resolver = utxo_resolver
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.logger = logger

    def build_commit(self, tx_hash: str, output_index: int) -> str:
        utxo = self.utxo_resolver(tx_hash, output_index)
        url = "{}/commit".format(self.api_url)
        body = {"{}#{}".format(tx_hash, output_index): utxo}
        self.logger.debug("Requesting commit draft from %s: %r", url, body)

        response = self.session.post(url, json=body, timeout=self.timeout)
        response.raise_for_status()
        draft = response.json()
        if not isinstance(draft, dict) or 'cborHex' not in draft:
            raise ValueError("Commit draft has no cborHex: {!r}".format(draft))
        return draft['cborHex']


class CommitCoordinator(object):
    """Builds, signs and submits exactly one commit per session.

    The blocking collaborators run on `executor` (the loop's default one if
    None) so the event loop stays responsive, and every step is bounded by
    `timeout` seconds.
    """

    def __init__(self, builder: CommitTxBuilder, signer: TxSigner,
                 submitter: TxSubmitter, submit_url: str,
                 timeout: float = DEFAULT_TIMEOUT, executor=None,
                 logger=logging.getLogger(__name__)):
        self.builder = builder
        self.signer = signer
        self.submitter = submitter
        self.submit_url = submit_url
        self.timeout = timeout
        self.executor = executor
        self.logger = logger

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(loop.run_in_executor(self.executor, func, *args), self.timeout)

    async def commit(self, session: StartSession,
                     commit_args: Optional[CommitArgs]) -> SubmissionResult:
        if commit_args is None:
            raise MissingCommitArgs()
        if session.commit_issued:
            raise CommitError(commit_args, "a commit was already issued for this session")

        correlation_id = "commit:{}".format(commit_args)
        self.logger.info("Committing %s to head", commit_args)
        try:
            unsigned = await self._run(self.builder.build_commit,
                                       commit_args.tx_hash, commit_args.output_index)
            self.logger.debug("Unsigned commit tx: %s", unsigned)
            signed = await self._run(self.signer.sign_tx, unsigned)

            loop = asyncio.get_running_loop()
            pending = loop.run_in_executor(self.executor, self.submitter.submit,
                                           self.submit_url, signed, correlation_id)
            # From here on the transaction may reach the ledger whatever
            # happens to us, so it counts as issued.
            session.commit_issued = True
            result = await asyncio.wait_for(pending, self.timeout)
        except Exception as e:
            self.logger.error("Commit of %s failed: %s", commit_args, e)
            raise CommitError(commit_args, str(e)) from e

        self.logger.info("Commit of %s submitted as %s", commit_args, result.tx_hash)
        return result
