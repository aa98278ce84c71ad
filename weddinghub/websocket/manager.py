from typing import Dict, List
from fastapi import WebSocket
import asyncio
import json
from weddinghub.core.logging import logger

class ConnectionManager:
    """Open dashboard websockets, keyed by admin id."""

    def __init__(self):
        self.active: Dict[str, List[WebSocket]] = {}
        self.lock = asyncio.Lock()

    async def connect(self, admin_id: str, websocket: WebSocket):
        await websocket.accept()
        async with self.lock:
            self.active.setdefault(admin_id, []).append(websocket)

    async def disconnect(self, admin_id: str, websocket: WebSocket):
        async with self.lock:
            conns = self.active.get(admin_id, [])
            if websocket in conns:
                conns.remove(websocket)
            if not conns:
                self.active.pop(admin_id, None)

    async def send_personal_message(self, admin_id, message: dict):
        data = json.dumps(message)
        for ws in list(self.active.get(str(admin_id), [])):
            try:
                await ws.send_text(data)
            except Exception as e:
                logger.debug(f"Dropping broken websocket for admin {admin_id}: {e}")
                await self.disconnect(str(admin_id), ws)

    async def broadcast(self, message: dict):
        for admin_id in list(self.active):
            await self.send_personal_message(admin_id, message)

manager = ConnectionManager()
