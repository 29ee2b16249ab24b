"""Unit tests for the pointer source and draw-request renderers."""

from rotorforge.core.inputs import PointerSource
from rotorforge.core.render import DrawRequest, NullRenderer, RecordingRenderer


class TestPointerSource:
    """Test latest-value pointer semantics."""

    def test_initial_and_update(self):
        """The latest sample wins."""
        pointer = PointerSource((300.0, 300.0))
        assert pointer.latest() == (300.0, 300.0)
        pointer.update(10, 20)
        pointer.update(11, 21)
        assert pointer.latest() == (11.0, 21.0)
        assert pointer.samples == 2

    def test_page_coordinates(self):
        """Page samples are shifted by the surface origin."""
        pointer = PointerSource((0.0, 0.0), origin=(100.0, 50.0))
        pointer.push_page((150.0, 80.0))
        assert pointer.latest() == (50.0, 30.0)

    def test_dropout_keeps_last(self):
        """A missing gaze sample leaves the position unchanged."""
        pointer = PointerSource((0.0, 0.0))
        pointer.push_page((5.0, 5.0))
        pointer.push_page(None)
        assert pointer.latest() == (5.0, 5.0)
        assert pointer.samples == 1


class TestRenderers:
    """Test renderer sinks."""

    def test_null_renderer(self):
        """NullRenderer accepts anything."""
        assert NullRenderer().draw(0.0, [DrawRequest("target", 0, 0, 8, "#fafafa")]) is None

    def test_recording_renderer(self):
        """RecordingRenderer keeps every tick and filters by layer."""
        renderer = RecordingRenderer()
        renderer.draw(0.0, [DrawRequest("target", 1, 2, 8, "#fafafa"), DrawRequest("pointer", 3, 4, 3, "#0ff")])
        renderer.draw(16.0, [DrawRequest("target", 5, 6, 8, "#fafafa", "square")])
        assert renderer.ticks == [0.0, 16.0]
        targets = renderer.layer("target")
        assert [(r.x, r.y) for r in targets] == [(1, 2), (5, 6)]
        assert targets[1].shape == "square"
        assert len(renderer.layer("pointer")) == 1
