import asyncio

import pytest

from tictactoe.config import GameConfig
from tictactoe.engine import GameEngine


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def engine(loop):
    return GameEngine(GameConfig(reveal_delay=0.01), loop=loop)


def run_for(loop, seconds: float):
    """Let the loop process scheduled callbacks for a while."""
    loop.run_until_complete(asyncio.sleep(seconds))


def play(engine, *indices):
    for i in indices:
        engine.submit_move(i)
