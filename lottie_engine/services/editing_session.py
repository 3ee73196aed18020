"""One open animation plus its sidecar metadata, edit history and preview scheduling."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from lottie_engine.codec import LottieFormat, check_file_size, decode_document, encode_document, output_filename
from lottie_engine.document.handles import TextSpan
from lottie_engine.editors.color_editor import ColorEditor
from lottie_engine.editors.layer_visibility import (
    LayerSummary,
    hidden_layer_paths,
    layer_at,
    list_layers,
    materialize_for_persist,
    set_hidden,
)
from lottie_engine.editors.text_editor import extract_text_spans, update_text
from lottie_engine.interactions.rules import AnimationMetadata, NormalizationReport, clamp_speed, normalize_rules_with_report
from lottie_engine.normalizer import normalize_in_place, prepare_for_playback
from lottie_engine.services.history import EditHistory
from lottie_engine.services.render_scheduler import DebouncedScheduler
from lottie_engine.utils.colors import normalize_hex

logger = logging.getLogger(__name__)

Renderer = Callable[[Dict[str, Any], AnimationMetadata], None]


@dataclass
class PersistResult:
    content: bytes
    filename: str
    format: LottieFormat
    metadata: Dict[str, Any]


class EditingSession:
    """Mutations go to the live document; every one is recorded for undo and
    schedules a debounced preview render when a renderer is attached."""

    def __init__(
        self,
        document: Dict[str, Any],
        fmt: LottieFormat = LottieFormat.PLAIN,
        filename: Optional[str] = None,
        metadata: Optional[AnimationMetadata] = None,
        scheduler: Any = None,
        renderer: Optional[Renderer] = None,
        history_limit: Optional[int] = None,
        color_tolerance: Optional[float] = None,
    ):
        self.document = document
        self.format = fmt
        self.filename = filename or f"animation{fmt.extension}"
        self.metadata = metadata or AnimationMetadata()
        self.scheduler = scheduler if scheduler is not None else DebouncedScheduler()
        self.renderer = renderer
        self.history = EditHistory(history_limit)
        self.color_editor = ColorEditor(tolerance=color_tolerance)
        self.dirty = False
        self._record()

    @classmethod
    def open(
        cls,
        data: bytes | str,
        filename: Optional[str] = None,
        metadata: Any = None,
        **kwargs: Any,
    ) -> "EditingSession":
        """Decode ``data`` and start a session; raises the typed document errors."""
        size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
        check_file_size(size)
        decoded = decode_document(data, filename)
        if metadata is not None and not isinstance(metadata, AnimationMetadata):
            metadata = AnimationMetadata.model_validate(metadata)
        logger.info(
            "Opened %s (%s, %d layers)",
            filename or "animation",
            decoded.format.value,
            len(decoded.document.get("layers") or []),
        )
        return cls(decoded.document, decoded.format, filename, metadata, **kwargs)

    # state bookkeeping

    def _record(self) -> None:
        self.history.save_state(self.document, self.metadata.background_color, self.metadata.speed)

    def _changed(self) -> None:
        self._record()
        self.dirty = True
        self._schedule_render()

    def _schedule_render(self) -> None:
        if self.renderer is None:
            return
        renderer = self.renderer
        self.scheduler.schedule(lambda: renderer(self.preview_document(), self.metadata))

    def _update_metadata(self, **values: Any) -> None:
        self.metadata = self.metadata.model_copy(update=values)

    # colors

    def colors(self) -> List[str]:
        return sorted(self.color_editor.extract_colors(self.document))

    def replace_color(self, old_hex: str, new_hex: str) -> int:
        count = self.color_editor.replace_color(self.document, old_hex, new_hex)
        if count:
            self._changed()
        return count

    def apply_palette_color(self, palette_hex: str) -> Optional[str]:
        replaced = self.color_editor.apply_palette_color(self.document, palette_hex)
        if replaced is not None and replaced != normalize_hex(palette_hex):
            self._changed()
        return replaced

    # text

    def text_spans(self) -> List[TextSpan]:
        return extract_text_spans(self.document)

    def update_text(self, span: TextSpan, new_text: str) -> TextSpan:
        updated = update_text(self.document, span, new_text)
        self._changed()
        return updated

    # layers

    def layers(self) -> List[LayerSummary]:
        return list_layers(self.document)

    def set_layer_hidden(self, index: int, hidden: bool) -> None:
        layer = layer_at(self.document, index)
        set_hidden(layer, hidden, default_op=self.document.get("op"))
        self._changed()

    # playback metadata

    def set_speed(self, speed: Any) -> float:
        value = clamp_speed(speed)
        self._update_metadata(speed=value)
        self._changed()
        return value

    def set_background(self, color: Optional[str]) -> Optional[str]:
        value = normalize_hex(color) if color else None
        self._update_metadata(background_color=value)
        self._changed()
        return value

    def set_interactions(self, raw: Any) -> NormalizationReport:
        report = normalize_rules_with_report(raw)
        self._update_metadata(interactions=report.rules)
        self.dirty = True
        self._schedule_render()
        return report

    # history

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def undo(self) -> bool:
        return self._restore(self.history.undo())

    def redo(self) -> bool:
        return self._restore(self.history.redo())

    def _restore(self, snapshot: Any) -> bool:
        if snapshot is None:
            return False
        self.document = snapshot.document
        self._update_metadata(background_color=snapshot.background_color, speed=snapshot.speed)
        self.color_editor.invalidate()
        self.dirty = True
        self._schedule_render()
        return True

    # output

    def preview_document(self) -> Dict[str, Any]:
        return prepare_for_playback(self.document)

    def persist(self) -> PersistResult:
        """Serialize the document in its original container format."""
        output = materialize_for_persist(self.document)
        normalize_in_place(output)
        content = encode_document(output, self.format)
        filename = output_filename(self.filename, self.format)
        logger.info(
            "Persisted %s (%d bytes, %d hidden layers collapsed)",
            filename,
            len(content),
            len(hidden_layer_paths(self.document)),
        )
        self.dirty = False
        return PersistResult(content=content, filename=filename, format=self.format, metadata=self.metadata.to_record())
