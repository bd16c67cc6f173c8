# plugins/core_config_editor/document.py
import copy
import logging
from enum import Enum
from typing import Any, List, Optional

from backend.core.errors import ValidationError
from backend.core.utils import ensure_literal_compatible, set_in_path
from .extractor import ExtractedConfig, extract_config, render_config

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


class DocumentState(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    EDITED = "edited"
    SAVED = "saved"


class ConfigDocument:
    """
    One config module being edited, with linear undo/redo.

    Every entry in the history is a complete config value. Edits build the
    next entry copy-on-write, so consecutive entries share every subtree
    the edit did not touch; entries must therefore never be mutated in
    place. The history keeps at most ``history_limit`` entries and forgets
    the oldest ones first.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT):
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self.history_limit = history_limit
        self.state = DocumentState.EMPTY
        self._extracted: Optional[ExtractedConfig] = None
        self._history: List[Any] = []
        self._cursor = -1

    # --- loading ---

    def load(self, source: str) -> None:
        """Parses source. On ParseError the document is left exactly as it was."""
        extracted = extract_config(source)
        self._extracted = extracted
        self._history = [extracted.value]
        self._cursor = 0
        self.state = DocumentState.LOADED
        logger.debug(f"Loaded config export '{extracted.export_identifier}'.")

    def _require_loaded(self) -> ExtractedConfig:
        if self._extracted is None:
            raise ValidationError("No config document is loaded.")
        return self._extracted

    # --- accessors ---

    @property
    def value(self) -> Any:
        self._require_loaded()
        return self._history[self._cursor]

    @property
    def export_identifier(self) -> str:
        return self._require_loaded().export_identifier

    @property
    def export_kind(self) -> str:
        return self._require_loaded().export_kind

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self._cursor < len(self._history) - 1

    # --- editing ---

    def set_path(self, path: str, value: Any) -> Any:
        self._require_loaded()
        ensure_literal_compatible(value)
        updated = set_in_path(self.value, path, copy.deepcopy(value))

        del self._history[self._cursor + 1:]
        self._history.append(updated)
        overflow = len(self._history) - self.history_limit
        if overflow > 0:
            del self._history[:overflow]
        self._cursor = len(self._history) - 1
        self.state = DocumentState.EDITED
        return updated

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self._cursor -= 1
        self.state = DocumentState.EDITED
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._cursor += 1
        self.state = DocumentState.EDITED
        return True

    # --- saving ---

    def render(self) -> str:
        extracted = self._require_loaded()
        return render_config(extracted.prefix, extracted.export_identifier, self.value, extracted.suffix)

    def mark_saved(self) -> None:
        self._require_loaded()
        self.state = DocumentState.SAVED
