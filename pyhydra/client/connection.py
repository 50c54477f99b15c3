import json
import logging

import websockets

from .config import DEFAULT_TIMEOUT
from .errors import ConnectionLost


class HydraConnection(object):
    """The websocket to a head node.

    The node pushes events on it, and accepts control commands (`Init`,
    `Close`, `Fanout`, ...) on the same socket. A connection belongs to
    exactly one session and is not reusable once closed.
    """

    def __init__(self, url: str, open_timeout: float = DEFAULT_TIMEOUT,
                 logger=logging.getLogger(__name__)):
        self.url = url
        self.open_timeout = open_timeout
        self.logger = logger
        self.ws = None

    async def open(self) -> None:
        self.logger.debug("Connecting to %s", self.url)
        try:
            self.ws = await websockets.connect(self.url, open_timeout=self.open_timeout)
        except (OSError, websockets.exceptions.WebSocketException) as e:
            raise ConnectionLost(self.url, "could not connect: {}".format(e))

    async def recv(self) -> str:
        if self.ws is None:
            raise ConnectionLost(self.url, "not connected")
        try:
            return await self.ws.recv()
        except websockets.exceptions.ConnectionClosed as e:
            raise ConnectionLost(self.url, str(e))

    async def send_command(self, tag: str, **params) -> None:
        if self.ws is None:
            raise ConnectionLost(self.url, "not connected")
        command = dict(tag=tag, **params)
        self.logger.debug("Sending %r", command)
        try:
            await self.ws.send(json.dumps(command))
        except websockets.exceptions.ConnectionClosed as e:
            raise ConnectionLost(self.url, str(e))

    async def close(self) -> None:
        if self.ws is not None:
            ws, self.ws = self.ws, None
            await ws.close()

    async def __aenter__(self) -> 'HydraConnection':
        await self.open()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
