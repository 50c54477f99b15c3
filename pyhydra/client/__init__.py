from .commit import CommitCoordinator, CommitTxBuilder, HydraCommitBuilder, TxSigner
from .config import HydraConfig
from .connection import HydraConnection
from .errors import (
    CommitError, ConfigError, ConnectionLost, HydraError, InvalidAddress, MissingCommitArgs,
    ProtocolFault, SnapshotParseError, SnapshotUnavailable, SubmissionError, SubmissionRejected,
)
from .events import HeadStatus, ProtocolEvent, Transition
from .session import CommitArgs, SessionState, ShutdownSession, StartSession
from .snapshot import UtxoRecord, UtxoSnapshotIndexer
from .submit import SubmissionResult, TxSubmitter
from .wrangler import HeadCloser, HeadController, HeadStarter, head_status, shutdown_head, start_head

__version__ = "0.3.0"

__all__ = [
    "CommitArgs",
    "CommitCoordinator",
    "CommitError",
    "CommitTxBuilder",
    "ConfigError",
    "ConnectionLost",
    "HeadCloser",
    "HeadController",
    "HeadStarter",
    "HeadStatus",
    "HydraCommitBuilder",
    "HydraConfig",
    "HydraConnection",
    "HydraError",
    "InvalidAddress",
    "MissingCommitArgs",
    "ProtocolEvent",
    "ProtocolFault",
    "SessionState",
    "ShutdownSession",
    "SnapshotParseError",
    "SnapshotUnavailable",
    "StartSession",
    "SubmissionError",
    "SubmissionRejected",
    "SubmissionResult",
    "Transition",
    "TxSigner",
    "TxSubmitter",
    "UtxoRecord",
    "UtxoSnapshotIndexer",
    "head_status",
    "shutdown_head",
    "start_head",
    "__version__",
]
