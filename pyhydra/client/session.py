from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .events import HeadStatus


@dataclass(frozen=True)
class CommitArgs:
    """The base-ledger output to lock into the head."""
    tx_hash: str
    output_index: int

    def __post_init__(self):
        if not isinstance(self.tx_hash, str) or not self.tx_hash:
            raise ValueError("tx_hash must be a non-empty string, got {!r}".format(self.tx_hash))
        if isinstance(self.output_index, bool) or not isinstance(self.output_index, int) \
                or self.output_index < 0:
            raise ValueError("output_index must be a non-negative integer, got {!r}".format(self.output_index))

    def __str__(self) -> str:
        return "{}#{}".format(self.tx_hash, self.output_index)


class SessionState(Enum):
    DISCONNECTED = 'disconnected'
    CONNECTED = 'connected'
    COMPLETED = 'completed'
    ERROR = 'error'
    CANCELLED = 'cancelled'

    @property
    def terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.ERROR, SessionState.CANCELLED)


@dataclass
class HeadSession:
    """State of one controller run against one node connection.

    Only the controller task owning the session writes to it.
    """
    state: SessionState = field(default=SessionState.DISCONNECTED, init=False)
    status: Optional[HeadStatus] = field(default=None, init=False)
    error: Optional[Exception] = field(default=None, init=False)
    commands: List[str] = field(default_factory=list, init=False)

    mode = 'unknown'


@dataclass
class StartSession(HeadSession):
    commit_args: Optional[CommitArgs] = None
    init_issued: bool = field(default=False, init=False)
    commit_issued: bool = field(default=False, init=False)

    mode = 'start'

    def __setattr__(self, name, value):
        if name == 'commit_args' and getattr(self, 'commit_args', None) is not None:
            raise AttributeError("commit_args is already set")
        super().__setattr__(name, value)


@dataclass
class ShutdownSession(HeadSession):
    close_issued: bool = field(default=False, init=False)
    fanout_issued: bool = field(default=False, init=False)

    mode = 'shutdown'
