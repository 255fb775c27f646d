"""
Layout context store and session registry checks.

Run: python test_layout_context.py
"""

import os
import sys
sys.path.insert(0, os.path.dirname(__file__) or ".")

from services.layout_context import LayoutContextStore, SessionRegistry, describe_extracted
from services.layout_types import CONTEXT_FIELDS, LayoutContext, Orientation, RoofDimensions


def test_absent_fields_never_blank():
    store = LayoutContextStore()
    store.update({"panel_count": 20})
    context = store.update({})
    assert context.panel_count == 20

    context = store.update({"panel_count": None, "address": "1 Elm St"})
    assert context.panel_count == 20
    assert context.address == "1 Elm St"


def test_newer_values_overwrite():
    store = LayoutContextStore()
    store.update({"panel_count": 20, "system_size": 8.0})
    context = store.update({"panel_count": 24})
    assert context.panel_count == 24
    assert context.system_size == 8.0


def test_unknown_field_rejected():
    store = LayoutContextStore()
    try:
        store.update({"roof_pitch": 30})
    except ValueError:
        pass
    else:
        raise AssertionError("unknown field should raise ValueError")


def test_reset_gives_empty_context():
    store = LayoutContextStore()
    store.process_utterance("24 panels at 123 Main Street, portrait")
    store.reset()
    context = store.get_context()
    assert context.is_empty()
    assert all(getattr(context, name) is None for name in CONTEXT_FIELDS)
    assert not store.visibility.show_satellite_view
    assert not store.visibility.show_layout_view


def test_get_context_returns_copy():
    store = LayoutContextStore()
    store.update({"panel_count": 10})
    snapshot = store.get_context()
    snapshot.panel_count = 99
    assert store.get_context().panel_count == 10


def test_visibility_recomputed_each_utterance():
    store = LayoutContextStore()
    result = store.process_utterance("Show me the satellite imagery of 9 Bay Road")
    assert result["show_satellite_view"] is True
    assert result["show_layout_view"] is False

    result = store.process_utterance("thanks")
    assert result["show_satellite_view"] is False
    assert result["show_layout_view"] is False
    # context is kept even though the flags dropped
    assert result["context"].address == "9 Bay Road"


def test_process_returns_merged_context():
    store = LayoutContextStore()
    store.process_utterance("let's do 16 panels")
    result = store.process_utterance("in landscape orientation")
    assert result["extracted"] == {"orientation": Orientation.LANDSCAPE}
    assert result["context"].panel_count == 16
    assert result["context"].orientation is Orientation.LANDSCAPE


def test_roof_detected_forces_layout_view():
    store = LayoutContextStore()
    store.process_utterance("analyze my roof")
    assert store.visibility.show_layout_view is False

    context = store.handle_roof_detected(RoofDimensions(width=35, height=28))
    assert context.roof_dimensions == RoofDimensions(35, 28)
    assert store.visibility.show_layout_view is True
    assert store.visibility.show_satellite_view is True


def test_roof_detected_overrides_text_dimensions():
    store = LayoutContextStore()
    store.process_utterance("the roof is 40x30 feet")
    store.handle_roof_detected(RoofDimensions(width=42.5, height=31.0))
    assert store.get_context().roof_dimensions == RoofDimensions(42.5, 31.0)


def test_default_panel_watts():
    context = LayoutContext()
    assert context.panel_watts is None
    assert context.effective_panel_watts == 400
    assert LayoutContext(panel_watts=350).effective_panel_watts == 350


def test_describe_extracted_is_serializable():
    store = LayoutContextStore()
    described = describe_extracted(store.process_utterance("25 by 20 ft roof in portrait"))
    assert described["extracted"] == {
        "roof_dimensions": {"width": 25.0, "height": 20.0},
        "orientation": "portrait",
    }
    assert described["context"]["orientation"] == "portrait"
    assert described["context"]["address"] is None


def test_session_registry():
    registry = SessionRegistry()
    first = registry.get("a")
    assert registry.get("a") is first
    assert registry.get("b") is not first
    assert len(registry) == 2

    assert registry.clear("a") is True
    assert "a" not in registry
    assert registry.clear("a") is False
    assert registry.get("a").get_context().is_empty()


if __name__ == "__main__":
    tests = [v for k, v in list(globals().items()) if k.startswith("test_")]
    for fn in tests:
        fn()
        print(f"  PASS  {fn.__name__}")
    print("=" * 60)
    print(f"ALL {len(tests)} TESTS PASSED")
