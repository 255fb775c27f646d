"""
Session-scoped layout context store.

Accumulates the partial contexts produced by the extractor into one
running ``LayoutContext`` and keeps the current view visibility flags.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict

from services.extraction import classify_triggers, extract_layout_info
from services.layout_types import (
    CONTEXT_FIELDS,
    LayoutContext,
    RoofDimensions,
    VisibilityState,
    partial_to_dict,
)

logger = logging.getLogger(__name__)


class LayoutContextStore:
    """Running context and visibility for one conversation."""

    def __init__(self):
        self._context = LayoutContext()
        self._visibility = VisibilityState()

    @property
    def visibility(self) -> VisibilityState:
        return replace(self._visibility)

    def get_context(self) -> LayoutContext:
        return replace(self._context)

    def update(self, partial: dict) -> LayoutContext:
        """
        Merge a partial context.

        A field present in ``partial`` (and not None) replaces the stored
        value; anything else is left as it was.
        """
        unknown = set(partial) - set(CONTEXT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown layout context fields: {sorted(unknown)}")

        for name, value in partial.items():
            if value is not None:
                setattr(self._context, name, value)
        return self.get_context()

    def reset(self) -> None:
        self._context = LayoutContext()
        self._visibility = VisibilityState()

    def process_utterance(self, text: str) -> dict:
        """
        Run one user utterance through the classifier and the extractor.

        Visibility is replaced outright by this utterance's triggers, while
        extracted fields are merged into the running context.
        """
        visibility = classify_triggers(text)
        extracted = extract_layout_info(text)
        context = self.update(extracted)
        self._visibility = visibility

        logger.info(
            f"Processed utterance: fields={sorted(extracted)} "
            f"satellite={visibility.show_satellite_view} layout={visibility.show_layout_view}"
        )
        return {
            "context": context,
            "extracted": extracted,
            "show_satellite_view": visibility.show_satellite_view,
            "show_layout_view": visibility.show_layout_view,
        }

    def handle_roof_detected(self, dimensions: RoofDimensions) -> LayoutContext:
        """Record detected roof dimensions and force the layout view open."""
        context = self.update({"roof_dimensions": dimensions})
        self._visibility = replace(self._visibility, show_layout_view=True)
        logger.info(f"Roof detected: {dimensions.width:.1f} x {dimensions.height:.1f} ft")
        return context

    def snapshot(self) -> dict:
        """JSON-friendly view of the context and flags."""
        return {
            "context": self._context.to_dict(),
            **self._visibility.to_dict(),
        }


def describe_extracted(result: dict) -> dict:
    """Serializable copy of a ``process_utterance`` result."""
    return {
        "context": result["context"].to_dict(),
        "extracted": partial_to_dict(result["extracted"]),
        "show_satellite_view": result["show_satellite_view"],
        "show_layout_view": result["show_layout_view"],
    }


class SessionRegistry:
    """One ``LayoutContextStore`` per conversation session id."""

    def __init__(self, store_factory: Callable[[], LayoutContextStore] = LayoutContextStore):
        self._store_factory = store_factory
        self._stores: Dict[str, LayoutContextStore] = {}

    def get(self, session_id: str) -> LayoutContextStore:
        store = self._stores.get(session_id)
        if store is None:
            store = self._store_factory()
            self._stores[session_id] = store
            logger.debug(f"Created layout session {session_id}")
        return store

    def clear(self, session_id: str) -> bool:
        """Discard a session. Returns False when it did not exist."""
        return self._stores.pop(session_id, None) is not None

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._stores

    def __len__(self) -> int:
        return len(self._stores)
