from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from threading import Lock

logger = logging.getLogger(__name__)


DEFAULT_WORDS = [
    "cat", "dog", "house", "tree", "car", "flower", "bird", "fish", "sun", "moon",
    "mountain", "river", "ocean", "forest", "beach", "stars", "clouds", "rain", "snow",
    "grass", "rocks", "cave", "volcano", "island", "desert", "lake", "waterfall", "bridge",
    "dragon", "unicorn", "wizard", "witch", "fairy", "castle", "knight", "princess",
    "king", "queen", "magic wand", "crystal ball", "flying carpet", "treasure chest",
]

WORD_CATEGORIES: dict[str, list[str]] = {
    "animals": [
        "cat", "dog", "elephant", "lion", "tiger", "bear", "wolf", "fox", "deer", "rabbit",
        "squirrel", "bird", "fish", "horse", "cow", "pig", "sheep", "goat", "chicken", "duck",
    ],
    "objects": [
        "car", "house", "tree", "flower", "book", "phone", "computer", "chair", "table", "bed",
        "lamp", "clock", "cup", "plate", "fork", "knife", "spoon", "bottle", "bag", "shoes",
    ],
    "nature": [
        "mountain", "river", "ocean", "forest", "beach", "sun", "moon", "stars", "clouds", "rain",
        "snow", "grass", "rocks", "cave", "volcano", "island", "desert", "lake", "waterfall", "bridge",
    ],
    "food": [
        "apple", "banana", "orange", "pizza", "hamburger", "hotdog", "ice cream", "cake", "bread", "cheese",
        "milk", "eggs", "rice", "pasta", "soup", "salad", "steak", "chicken", "fish", "vegetables",
    ],
    "fantasy": [
        "dragon", "unicorn", "wizard", "witch", "fairy", "castle", "knight", "princess", "king", "queen",
        "magic wand", "crystal ball", "flying carpet", "treasure chest", "monster", "ghost", "vampire",
        "werewolf", "mermaid", "phoenix",
    ],
}


class CatalogTooSmall(RuntimeError):
    """The catalog cannot satisfy a draw even after a reset."""


def random_word(rng: random.Random | None = None) -> tuple[str, str]:
    """Returns (word, category) from WORD_CATEGORIES, independent of any pool."""
    r = rng or random
    category = r.choice(list(WORD_CATEGORIES))
    return r.choice(WORD_CATEGORIES[category]), category


class WordPool:
    """Hands out words without repetition until the catalog runs dry.

    The used-set is shared by every caller of the pool, so one pool serves all
    rooms of a registry. Draws are serialized by an internal lock.
    """

    def __init__(self, catalog: Iterable[str] = DEFAULT_WORDS, rng: random.Random | None = None) -> None:
        self._catalog: list[str] = list(dict.fromkeys(w for w in catalog if w))
        self._used: set[str] = set()
        self._rng = rng or random.Random()
        self._lock = Lock()

    @property
    def catalog(self) -> list[str]:
        return list(self._catalog)

    def remaining(self) -> int:
        with self._lock:
            return sum(1 for w in self._catalog if w not in self._used)

    def reset(self) -> None:
        with self._lock:
            self._used.clear()

    def draw(self, count: int, exclude: Sequence[str] = ()) -> list[str]:
        if count <= 0:
            return []

        blocked = set(exclude)
        with self._lock:
            eligible = [w for w in self._catalog if w not in self._used and w not in blocked]
            if len(eligible) < count:
                self._used.clear()
                eligible = [w for w in self._catalog if w not in blocked]
                logger.warning("[word-pool] reset used words, %d available again", len(eligible))
                if len(eligible) < count:
                    raise CatalogTooSmall(
                        f"word catalog has {len(eligible)} usable words, {count} requested"
                    )

            picked = self._rng.sample(eligible, count)
            self._used.update(picked)
            return picked
