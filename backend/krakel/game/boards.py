from __future__ import annotations

import logging
import random
from pathlib import Path

from .models import Player

logger = logging.getLogger(__name__)


IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp")


def is_image_file(filename: str) -> bool:
    return Path(filename).suffix.lower() in IMAGE_EXTENSIONS


class BoardCatalog:
    def __init__(
        self,
        directory: str | Path,
        base_url: str,
        fallback: str = "board1.jpg",
        rng: random.Random | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")
        self.fallback = fallback
        self._rng = rng or random.Random()

    def on_disk(self) -> list[str]:
        """Image files currently in the boards directory (may be empty)."""
        if not self.directory.is_dir():
            return []
        try:
            return sorted(p.name for p in self.directory.iterdir() if p.is_file() and is_image_file(p.name))
        except OSError:
            logger.exception("[boards] failed to read %s", self.directory)
            return []

    def available(self) -> list[str]:
        boards = self.on_disk()
        if not boards:
            logger.warning("[boards] no board images in %s, using %s", self.directory, self.fallback)
            return [self.fallback]
        return boards

    def pick(self) -> str:
        return self._rng.choice(self.available())

    def url_for(self, board: str | None) -> str | None:
        if not board:
            return None
        return f"{self.base_url}/boards/{board}"

    def describe(self) -> list[dict]:
        return [{"filename": b, "url": self.url_for(b), "name": Path(b).stem} for b in self.on_disk()]


def rotate_boards(players: list[Player]) -> None:
    # Player i takes the board held by player i+1; the last wraps to the first.
    held = [p.board for p in players]
    total = len(held)
    for idx, player in enumerate(players):
        player.board = held[(idx + 1) % total]
