"""FastAPI server with WebSocket for the tic-tac-toe game."""

import asyncio
from contextlib import asynccontextmanager
import json
import logging
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from tictactoe.config import GameConfig, ServerConfig
from tictactoe.engine import GameEngine

logger = logging.getLogger(__name__)

INDEX_HTML = """<!doctype html>
<html>
<head><title>Tic-Tac-Toe</title></head>
<body>
<strong>Tic-Tac-Toe</strong>
<div id="status"></div>
<div id="board"></div>
<button id="sort">Toggle order</button>
<ol id="moves"></ol>
<div id="result" hidden><h2 id="result-text"></h2><button id="restart">Restart</button></div>
<script>
const post = (url, body) => fetch(url, {
  method: "POST",
  headers: {"Content-Type": "application/json"},
  body: JSON.stringify(body || {}),
});
function render(state) {
  document.getElementById("status").textContent = state.status;
  const board = document.getElementById("board");
  board.innerHTML = "";
  state.board.forEach((value, i) => {
    if (i % 3 === 0) board.appendChild(document.createElement("br"));
    const square = document.createElement("button");
    square.textContent = value || "\\u00a0";
    if (state.highlight[i]) square.style.background = "yellow";
    square.onclick = () => post("/api/move", {index: i});
    board.appendChild(square);
  });
  const moves = document.getElementById("moves");
  moves.innerHTML = "";
  state.moves.forEach((m) => {
    const li = document.createElement("li");
    const el = document.createElement(m.is_current ? "span" : "button");
    el.textContent = m.description;
    if (!m.is_current) el.onclick = () => post("/api/jump", {move: m.move});
    li.appendChild(el);
    moves.appendChild(li);
  });
  document.getElementById("result").hidden = !state.reveal;
  document.getElementById("result-text").textContent = state.status;
}
document.getElementById("sort").onclick = () => post("/api/sort");
document.getElementById("restart").onclick = () => post("/api/reset");
const ws = new WebSocket(`ws://${location.host}/ws`);
ws.onmessage = (event) => {
  const msg = JSON.parse(event.data);
  if (msg.type === "state") render(msg.state);
};
</script>
</body>
</html>
"""


class StateBroadcaster:
    """Pushes the engine state to every open WebSocket."""

    def __init__(self):
        self.engine: Optional[GameEngine] = None
        self.sockets: list[WebSocket] = []

    def message(self, event: Optional[str] = None) -> dict:
        msg = {"type": "state", "state": self.engine.to_dict()}
        if event:
            msg["event"] = event
        return msg

    async def join(self, websocket: WebSocket):
        await websocket.accept()
        self.sockets.append(websocket)
        await websocket.send_json(self.message())

    def leave(self, websocket: WebSocket):
        if websocket in self.sockets:
            self.sockets.remove(websocket)

    async def push(self, event: str):
        msg = self.message(event)
        for websocket in list(self.sockets):
            try:
                await websocket.send_json(msg)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug("Dropping socket: %s", e)
                self.leave(websocket)


class MoveRequest(BaseModel):
    """Request body for playing a cell."""
    index: int


class JumpRequest(BaseModel):
    """Request body for time-travel."""
    move: int


def create_app(config: Optional[GameConfig] = None) -> FastAPI:
    config = config or GameConfig()
    broadcaster = StateBroadcaster()
    # Keep references so scheduled pushes are not garbage collected
    pending_pushes: set[asyncio.Task] = set()

    def on_engine_event(event: str):
        # Commands push from their endpoints; only the timer needs this path.
        if event != "reveal":
            return
        task = asyncio.get_running_loop().create_task(broadcaster.push(event))
        pending_pushes.add(task)
        task.add_done_callback(pending_pushes.discard)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The reveal timer binds to the loop serving requests
        engine = GameEngine(config)
        engine.subscribe(on_engine_event)
        broadcaster.engine = engine
        app.state.engine = engine
        yield
        engine.reset()

    app = FastAPI(title="Tic-Tac-Toe", lifespan=lifespan)

    def current() -> GameEngine:
        return broadcaster.engine

    @app.get("/")
    async def get_index():
        """Serve the main page."""
        return HTMLResponse(INDEX_HTML)

    # ==================== State ====================

    @app.get("/api/state")
    async def get_state():
        """Get current game state."""
        return {"status": "ok", "state": current().to_dict()}

    @app.get("/api/moves")
    async def get_moves(ascending: Optional[bool] = None):
        """Get the jump-to list, in the current sort order unless overridden."""
        return {
            "status": "ok",
            "moves": [m.to_dict() for m in current().get_move_list(ascending)],
        }

    # ==================== Commands ====================

    @app.post("/api/move")
    async def submit_move(request: MoveRequest):
        """Play the next symbol on a cell; occupied cells and finished games are ignored."""
        engine = current()
        accepted = engine.submit_move(request.index)
        if accepted:
            await broadcaster.push("move")
        return {"status": "ok", "accepted": accepted, "state": engine.to_dict()}

    @app.post("/api/jump")
    async def jump_to(request: JumpRequest):
        """Move to an earlier or later position in history."""
        engine = current()
        try:
            engine.jump_to(request.move)
        except IndexError as e:
            logger.warning("Rejected jump: %s", e)
            return {"status": "error", "message": str(e)}

        await broadcaster.push("jump")
        return {"status": "ok", "state": engine.to_dict()}

    @app.post("/api/reset")
    async def reset_game():
        """Start a new game."""
        engine = current()
        engine.reset()
        await broadcaster.push("reset")
        return {"status": "ok", "state": engine.to_dict()}

    @app.post("/api/sort")
    async def toggle_sort():
        """Flip the move-list order."""
        ascending = current().toggle_sort_order()
        await broadcaster.push("sort")
        return {"status": "ok", "ascending": ascending}

    # ==================== WebSocket ====================

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await broadcaster.join(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                try:
                    cmd = json.loads(data)
                except json.JSONDecodeError:
                    logger.debug("Ignoring malformed message: %r", data)
                    continue
                if isinstance(cmd, dict) and cmd.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
        except WebSocketDisconnect:
            broadcaster.leave(websocket)

    return app


def main(config: Optional[ServerConfig] = None):
    import uvicorn

    config = config or ServerConfig()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(config.game), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
