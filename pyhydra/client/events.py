"""Inbound head-node messages and the transitions they announce.

The node sends two shapes of message describing the same progression:
`Greetings`, a snapshot of the current status sent on every (re)connect,
and tagged incremental notifications such as `HeadIsOpen`. Both are folded
into a single `Transition` so the state machine never looks at raw tags.
"""
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class HeadStatus(Enum):
    IDLE = 'Idle'
    INITIALIZING = 'Initializing'
    OPEN = 'Open'
    CLOSED = 'Closed'
    FANOUT_POSSIBLE = 'FanoutPossible'
    FINAL = 'Final'

    @classmethod
    def parse(cls, s) -> Optional['HeadStatus']:
        try:
            return cls(s)
        except ValueError:
            return None


GREETINGS = 'Greetings'

INCREMENTAL = {
    'HeadIsInitializing': HeadStatus.INITIALIZING,
    'HeadIsOpen': HeadStatus.OPEN,
    'HeadIsClosed': HeadStatus.CLOSED,
    'ReadyToFanout': HeadStatus.FANOUT_POSSIBLE,
    'HeadIsFinalized': HeadStatus.FINAL,
    # An aborted head goes back to idle.
    'HeadIsAborted': HeadStatus.IDLE,
}


@dataclass(frozen=True)
class ProtocolEvent:
    tag: str
    head_status: Optional[str] = None
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_json(cls, obj: dict) -> 'ProtocolEvent':
        if not isinstance(obj, dict) or not isinstance(obj.get('tag'), str):
            raise ValueError("Not a protocol event: {!r}".format(obj))
        return cls(tag=obj['tag'], head_status=obj.get('headStatus'), raw=obj)

    @classmethod
    def from_str(cls, s) -> 'ProtocolEvent':
        return cls.from_json(json.loads(s))

    def __str__(self) -> str:
        if self.tag == GREETINGS:
            return "{}({})".format(self.tag, self.head_status)
        return self.tag


@dataclass(frozen=True)
class Transition:
    status: HeadStatus
    resync: bool
    event: ProtocolEvent = field(compare=False)

    def __str__(self) -> str:
        return "{}{}".format(self.status.value, " (resync)" if self.resync else "")


def to_transition(event: ProtocolEvent) -> Optional[Transition]:
    """The transition `event` announces, or None if it announces none."""
    if event.tag == GREETINGS:
        status = HeadStatus.parse(event.head_status)
        if status is None:
            return None
        return Transition(status=status, resync=True, event=event)

    status = INCREMENTAL.get(event.tag)
    if status is None:
        return None
    return Transition(status=status, resync=False, event=event)
