"""
WebSocket broadcast of subtitle cue changes.

Browser or overlay renderers connect and receive the cue list once, then a
message on every cue change:

    {"type": "cue_list", "cues": [...]}
    {"type": "cue_change", "index": 3, "cue": {"start": .., "end": .., "text": ..}}
"""

import asyncio
import json
import logging
from typing import List, Optional, Set

import websockets
from websockets.exceptions import ConnectionClosed

from .timeline.models import Cue, cue_index

logger = logging.getLogger('broadcast')


class CueBroadcaster:
    """
    Fans cue changes out to connected WebSocket clients.

    set_cues() and on_cue_change() plug into SrtPlayer as its cue sink and
    change callback. They must be called from the event loop thread.
    """

    def __init__(self, host: str = "0.0.0.0", port: int = 8766):
        self.host = host
        self.port = port
        self._clients: Set = set()
        self._cues: List[Cue] = []
        self._current: Optional[Cue] = None
        self._server = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    # === Sinks ===

    def set_cues(self, cues: List[Cue]):
        """Receive the parsed cue list."""
        self._cues = list(cues)
        self._current = None

    def on_cue_change(self, text: str, cue: Cue):
        """Queue a cue_change broadcast."""
        self._current = cue
        if not self._clients:
            return
        task = asyncio.get_running_loop().create_task(
            self.broadcast(self.cue_change_message(cue))
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # === Messages ===

    def cue_list_message(self) -> str:
        return json.dumps({
            "type": "cue_list",
            "cues": [cue.to_dict() for cue in self._cues],
        })

    def cue_change_message(self, cue: Cue) -> str:
        return json.dumps({
            "type": "cue_change",
            "index": cue_index(self._cues, cue),
            "cue": cue.to_dict(),
        })

    # === Server ===

    async def start(self):
        """Start the WebSocket server."""
        self._server = await websockets.serve(
            self._handle_client,
            self.host,
            self.port,
            max_size=65_536,
        )
        logger.info(f"Cue broadcast WebSocket: ws://localhost:{self.port}")

    async def stop(self):
        """Close the server and all client connections."""
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        for task in list(self._tasks):
            task.cancel()
        self._clients.clear()
        logger.info("Cue broadcast stopped")

    async def _handle_client(self, websocket):
        """Send initial state, then hold the connection until it closes."""
        self._clients.add(websocket)
        logger.info(f"Client connected. Total: {len(self._clients)}")
        try:
            await websocket.send(self.cue_list_message())
            if self._current is not None:
                await websocket.send(self.cue_change_message(self._current))
            async for _ in websocket:
                # Clients are receive-only
                pass
        except ConnectionClosed:
            pass
        finally:
            self._clients.discard(websocket)
            logger.info(f"Client disconnected. Total: {len(self._clients)}")

    async def broadcast(self, message: str):
        """Broadcast a pre-serialized JSON message to all clients."""
        dead_clients = set()
        for client in list(self._clients):
            try:
                await client.send(message)
            except Exception as e:
                logger.debug(f"Dropping client after send failure: {e}")
                dead_clients.add(client)
        self._clients -= dead_clients
