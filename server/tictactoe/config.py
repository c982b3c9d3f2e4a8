"""Game configuration dataclasses."""
from __future__ import annotations
from dataclasses import dataclass, field
import json


@dataclass
class GameConfig:
    """Settings for one game session."""
    reveal_delay: float = 0.3  # seconds before the result overlay is shown
    ascending: bool = True  # initial move-list order
    # Keep the reveal flag when jumping back from a finished game
    keep_reveal_on_rewind: bool = True

    def __post_init__(self):
        if self.reveal_delay < 0:
            raise ValueError(f"reveal_delay must be >= 0, got {self.reveal_delay}")

    def to_dict(self) -> dict:
        return {
            "reveal_delay": self.reveal_delay,
            "ascending": self.ascending,
            "keep_reveal_on_rewind": self.keep_reveal_on_rewind,
        }

    @classmethod
    def from_dict(cls, data: dict) -> GameConfig:
        return cls(
            reveal_delay=data.get("reveal_delay", 0.3),
            ascending=data.get("ascending", True),
            keep_reveal_on_rewind=data.get("keep_reveal_on_rewind", True),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> GameConfig:
        return cls.from_dict(json.loads(json_str))


@dataclass
class ServerConfig:
    """Web server settings."""
    host: str = "0.0.0.0"
    port: int = 7000
    game: GameConfig = field(default_factory=GameConfig)

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "game": self.game.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ServerConfig:
        return cls(
            host=data.get("host", "0.0.0.0"),
            port=data.get("port", 7000),
            game=GameConfig.from_dict(data.get("game", {})),
        )
