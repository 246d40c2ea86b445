"""
Tests for inbound event validation.
"""

import math

import pytest
from pydantic import ValidationError

from grove.events import HoverEvent, ScaleEvent, TriggerEvent, parse_event
from grove.geometry import Point


class TestParse:
    """Tests for payload routing by kind."""

    def test_trigger(self) -> None:
        event = parse_event({"kind": "trigger", "x": 10, "y": 20.5})
        assert isinstance(event, TriggerEvent)
        assert event.point == Point(10.0, 20.5)

    def test_hover(self) -> None:
        assert isinstance(parse_event({"kind": "hover", "x": 0, "y": 0}), HoverEvent)

    def test_scale_without_pointer(self) -> None:
        event = parse_event({"kind": "scale", "delta": 120})
        assert isinstance(event, ScaleEvent)
        assert event.point is None

    def test_scale_with_pointer(self) -> None:
        event = parse_event({"kind": "scale", "delta": -1, "x": 3, "y": 4})
        assert event.point == Point(3.0, 4.0)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            parse_event({"kind": "drag", "x": 1, "y": 1})


class TestValidation:
    """Malformed payloads never reach the scene."""

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TriggerEvent(x=math.nan, y=0.0)

    def test_inf_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_event({"kind": "scale", "delta": math.inf})

    def test_missing_coordinate(self) -> None:
        with pytest.raises(ValidationError):
            parse_event({"kind": "hover", "x": 5})

    def test_non_numeric(self) -> None:
        with pytest.raises(ValidationError):
            parse_event({"kind": "trigger", "x": "left", "y": 5})
