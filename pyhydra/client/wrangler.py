"""Drives a head through its lifecycle from the node's event stream.

One controller owns one session and one connection, and consumes events
strictly one at a time: the command triggered by an event is sent (and a
commit submitted) before the next event is read. That ordering, together
with the session's `*_issued` flags, is what keeps init, commit, close and
fanout at most once even when the node repeats itself, e.g. a `Greetings`
after a reconnect followed by the incremental event it summarizes.
"""
import asyncio
import logging
from typing import Optional, Tuple, Union

from .commit import CommitCoordinator
from .config import DEFAULT_TIMEOUT, HydraConfig
from .connection import HydraConnection
from .errors import ConnectionLost, HydraError, MissingCommitArgs, ProtocolFault
from .events import GREETINGS, HeadStatus, ProtocolEvent, Transition, to_transition
from .session import CommitArgs, HeadSession, SessionState, ShutdownSession, StartSession
from .submit import SubmissionResult

# Tags reporting that something we asked for went wrong on the node side.
FAILURE_TAGS = {'CommandFailed', 'PostTxOnChainFailed'}


class HeadController(object):
    """Consumer loop shared by both modes; subclasses supply `on_transition`."""

    def __init__(self, session: HeadSession, connection, timeout: float = DEFAULT_TIMEOUT,
                 logger=logging.getLogger(__name__)):
        self.session = session
        self.connection = connection
        self.timeout = timeout
        self.logger = logger
        self.done = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    async def on_transition(self, transition: Transition) -> None:
        raise NotImplementedError()

    async def run(self) -> SessionState:
        """Run until the session reaches a terminal state or the node goes away.

        Protocol and commit failures end the run in `SessionState.ERROR`
        with the cause in `session.error`; they are not raised. Cancelling
        the task marks the session `CANCELLED` and re-raises.
        """
        if self._task is not None:
            raise RuntimeError("A controller can only run once")
        self._task = asyncio.current_task()
        session = self.session

        try:
            try:
                await asyncio.wait_for(self.connection.open(), self.timeout)
            except (ConnectionLost, asyncio.TimeoutError) as e:
                self.logger.error("%s session could not connect: %s", session.mode, e)
                session.error = e
                return session.state

            session.state = SessionState.CONNECTED
            self.logger.info("%s session connected", session.mode)

            while session.state is SessionState.CONNECTED:
                try:
                    raw = await self.connection.recv()
                except ConnectionLost as e:
                    self.logger.warning("%s session lost its connection: %s", session.mode, e)
                    session.state = SessionState.DISCONNECTED
                    session.error = e
                    break
                await self._dispatch(raw)
        except asyncio.CancelledError:
            session.state = SessionState.CANCELLED
            self.logger.info("%s session cancelled (status %s)", session.mode, session.status)
            raise
        finally:
            await self._release()
            self.done.set()
        return session.state

    def cancel(self) -> bool:
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    async def wait_completed(self) -> bool:
        """Wait for the run to end; True if the head reached the goal state."""
        await self.done.wait()
        return self.session.state is SessionState.COMPLETED

    async def _release(self) -> None:
        try:
            await self.connection.close()
        except Exception as e:
            self.logger.warning("Error closing connection: %s", e)

    async def _dispatch(self, raw) -> None:
        try:
            event = ProtocolEvent.from_str(raw)
        except ValueError:
            self.logger.warning("Ignoring malformed message: %r", raw)
            return
        self.logger.debug("Received %s", event)

        transition = to_transition(event)
        if transition is None:
            if event.tag in FAILURE_TAGS:
                self.logger.warning("Node reported %s: %r", event.tag, event.raw)
            elif event.tag == GREETINGS:
                self.logger.warning("Ignoring unknown head status %r", event.head_status)
            else:
                self.logger.debug("Ignoring %s in %s mode", event, self.session.mode)
            return

        try:
            await self.on_transition(transition)
        except ConnectionLost as e:
            self.logger.warning("Connection lost while handling %s: %s", event, e)
            self.session.state = SessionState.DISCONNECTED
            self.session.error = e
        except HydraError as e:
            self._fail(e)

    async def send(self, tag: str) -> None:
        try:
            await asyncio.wait_for(self.connection.send_command(tag), self.timeout)
        except asyncio.TimeoutError:
            raise ConnectionLost(getattr(self.connection, 'url', '?'), "timed out sending {}".format(tag))
        self.session.commands.append(tag)
        self.logger.info("%s session sent %s", self.session.mode, tag)

    def complete(self) -> None:
        self.session.state = SessionState.COMPLETED
        self.logger.info("%s session completed, head is %s", self.session.mode, self.session.status.value)

    def _fail(self, e: Exception) -> None:
        self.session.state = SessionState.ERROR
        self.session.error = e
        self.logger.error("%s session failed: %s", self.session.mode, e)

    def ignore(self, transition: Transition) -> None:
        self.logger.info("Ignoring %s in %s mode", transition, self.session.mode)


class HeadStarter(HeadController):
    """Idle -> Init -> commit -> Open."""

    session: StartSession

    def __init__(self, session: StartSession, connection, coordinator: CommitCoordinator,
                 timeout: float = DEFAULT_TIMEOUT, logger=logging.getLogger(__name__)):
        super().__init__(session, connection, timeout=timeout, logger=logger)
        self.coordinator = coordinator
        self.commit_result: Optional[SubmissionResult] = None

    async def on_transition(self, transition: Transition) -> None:
        session = self.session
        status = transition.status

        if status is HeadStatus.IDLE:
            if not transition.resync:
                raise ProtocolFault(session.mode, transition.event, "head was aborted before it opened")
            if session.init_issued:
                return
            session.status = HeadStatus.IDLE
            await self.send('Init')
            session.init_issued = True
            session.status = HeadStatus.INITIALIZING

        elif status is HeadStatus.INITIALIZING:
            session.status = HeadStatus.INITIALIZING
            if session.commit_issued:
                self.logger.debug("Commit already issued, ignoring %s", transition)
                return
            if session.commit_args is None:
                raise MissingCommitArgs()
            self.commit_result = await self.coordinator.commit(session, session.commit_args)

        elif status is HeadStatus.OPEN:
            session.status = HeadStatus.OPEN
            self.complete()

        else:
            self.ignore(transition)


class HeadCloser(HeadController):
    """Open -> Close -> (contestation) -> Fanout -> Final."""

    session: ShutdownSession

    async def on_transition(self, transition: Transition) -> None:
        session = self.session
        status = transition.status

        if status is HeadStatus.OPEN and transition.resync:
            if session.close_issued:
                return
            await self.send('Close')
            session.close_issued = True
            session.status = HeadStatus.CLOSED

        elif status is HeadStatus.CLOSED:
            session.status = HeadStatus.CLOSED
            self.logger.info("Head closed, waiting for the contestation period to end")

        elif status is HeadStatus.FANOUT_POSSIBLE:
            if session.fanout_issued:
                return
            await self.send('Fanout')
            session.fanout_issued = True
            # Final once the node confirms with HeadIsFinalized.
            session.status = HeadStatus.FINAL

        elif status is HeadStatus.FINAL:
            session.status = HeadStatus.FINAL
            self.complete()

        else:
            self.ignore(transition)


def start_head(config: HydraConfig,
               commit_args: Optional[Union[CommitArgs, Tuple[str, int]]],
               coordinator: CommitCoordinator,
               logger=logging.getLogger(__name__)) -> HeadStarter:
    config.require('ws_url', 'api_url', 'submit_url')
    if commit_args is not None and not isinstance(commit_args, CommitArgs):
        commit_args = CommitArgs(*commit_args)
    connection = HydraConnection(config.subscription_url(), open_timeout=config.timeout, logger=logger)
    return HeadStarter(StartSession(commit_args=commit_args), connection, coordinator,
                       timeout=config.timeout, logger=logger)


def shutdown_head(config: HydraConfig, logger=logging.getLogger(__name__)) -> HeadCloser:
    config.require('ws_url')
    connection = HydraConnection(config.subscription_url(), open_timeout=config.timeout, logger=logger)
    return HeadCloser(ShutdownSession(), connection, timeout=config.timeout, logger=logger)


async def head_status(config: HydraConfig, connection=None) -> Optional[str]:
    """Connect, wait for the node's Greetings and return the head status."""
    if connection is None:
        config.require('ws_url')
        connection = HydraConnection(config.subscription_url(), open_timeout=config.timeout)

    async def greeted():
        while True:
            raw = await connection.recv()
            try:
                event = ProtocolEvent.from_str(raw)
            except ValueError:
                continue
            if event.tag == GREETINGS:
                return event.head_status

    await asyncio.wait_for(connection.open(), config.timeout)
    try:
        return await asyncio.wait_for(greeted(), config.timeout)
    finally:
        await connection.close()
