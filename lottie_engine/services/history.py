"""Undo/redo snapshots for an editing session."""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from lottie_engine.utils.config import settings

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    document: Dict[str, Any]
    background_color: Optional[str]
    speed: float

    def copy(self) -> "Snapshot":
        return Snapshot(copy.deepcopy(self.document), self.background_color, self.speed)


class EditHistory:
    """Linear history of session states.

    ``save_state`` records the state *after* an edit; the first call records
    the freshly opened document. Saving after an undo drops the redo tail,
    and the oldest entries are evicted beyond ``limit``.
    """

    def __init__(self, limit: Optional[int] = None):
        self.limit = max(1, settings.history_limit if limit is None else limit)
        self._states: List[Snapshot] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._states)

    def save_state(self, document: Dict[str, Any], background_color: Optional[str] = None, speed: float = 1.0) -> None:
        del self._states[self._index + 1 :]
        self._states.append(Snapshot(copy.deepcopy(document), background_color, speed))
        if len(self._states) > self.limit:
            self._states.pop(0)
        self._index = len(self._states) - 1

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._states) - 1

    def undo(self) -> Optional[Snapshot]:
        if not self.can_undo():
            return None
        self._index -= 1
        logger.debug("Undo to state %d of %d", self._index + 1, len(self._states))
        return self._states[self._index].copy()

    def redo(self) -> Optional[Snapshot]:
        if not self.can_redo():
            return None
        self._index += 1
        logger.debug("Redo to state %d of %d", self._index + 1, len(self._states))
        return self._states[self._index].copy()

    def clear(self) -> None:
        self._states = []
        self._index = -1
