# Inbound event schemas
# Pointer and wheel payloads, validated before they reach the scene

from typing import Literal

from pydantic import BaseModel, Field

from grove.geometry import Point

#
# Schemata
#


class PointerEvent(BaseModel):
    """Pointer position already mapped to scene coordinates."""

    x: float = Field(allow_inf_nan=False, description="Horizontal position in pixels")
    y: float = Field(allow_inf_nan=False, description="Vertical position in pixels (down)")

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


class TriggerEvent(PointerEvent):
    """Click: plant and grow a tree under the pointer."""

    kind: Literal["trigger"] = "trigger"


class HoverEvent(PointerEvent):
    """Pointer move: move the trunk preview."""

    kind: Literal["hover"] = "hover"


class ScaleEvent(BaseModel):
    """Wheel: resize the trunk. Positive delta shrinks, negative grows."""

    kind: Literal["scale"] = "scale"
    delta: float = Field(allow_inf_nan=False, description="Wheel delta (sign matters)")
    x: float | None = Field(
        default=None, allow_inf_nan=False, description="Pointer x for redrawing the preview"
    )
    y: float | None = Field(
        default=None, allow_inf_nan=False, description="Pointer y for redrawing the preview"
    )

    @property
    def point(self) -> Point | None:
        if self.x is None or self.y is None:
            return None
        return Point(self.x, self.y)


SceneEvent = TriggerEvent | HoverEvent | ScaleEvent


def parse_event(payload: dict) -> SceneEvent:
    """Validate a raw payload by its "kind" field."""
    kind = payload.get("kind")
    if kind == "trigger":
        return TriggerEvent.model_validate(payload)
    if kind == "hover":
        return HoverEvent.model_validate(payload)
    if kind == "scale":
        return ScaleEvent.model_validate(payload)
    raise ValueError(f"Unknown event kind: {kind!r}")
