from __future__ import annotations

import logging
import random
from typing import Iterator, List, Optional

from .pieces import RustominoType

logger = logging.getLogger(__name__)


class BagRandomizer:
    """7-bag piece supply.

    Each refill holds exactly one of every type and is drawn without
    replacement, so a type never repeats inside a bag and never goes
    more than 12 draws without appearing.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.pool: List[RustominoType] = []

    def fill(self) -> None:
        if self.pool:
            return
        self.pool.extend(RustominoType)
        self.rng.shuffle(self.pool)
        logger.debug("filled rustomino bag: %s", [k.name for k in self.pool])

    def next(self) -> RustominoType:
        self.fill()
        return self.pool.pop()

    def __iter__(self) -> Iterator[RustominoType]:
        return self

    def __next__(self) -> RustominoType:
        return self.next()
