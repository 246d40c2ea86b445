"""
Grove Scene Module

A procedural animation engine for a small natural scene: a fractal tree
that grows stroke by stroke where the pointer clicks, over a cycling
day/night sky and a grass ground tinted by the ambient light.

Modules:
    config: Constants and configuration
    geometry: Recursive branch geometry
    timeline: Single ordered event timeline
    growth: Stroke-reveal growth scheduling and the builder lock
    raster: RGBA surfaces and compositing
    fade: Aging of previously drawn trees
    sky: Palette clock, celestial clock, star field, ambience engine
    ground: Grass terrain and ambience tint
    events: Validated inbound events
    scene: Scene controller
    rollout: Headless sessions and frame export
"""

from grove.config import (
    CelestialConfig,
    FadeConfig,
    GroundConfig,
    GrowthConfig,
    PaletteConfig,
    SceneConfig,
    StarConfig,
    TreeConfig,
)
from grove.events import HoverEvent, ScaleEvent, TriggerEvent, parse_event
from grove.fade import age, alpha_decay, brighten
from grove.geometry import Point, Segment, generate_branches, generate_tree, trunk_for
from grove.ground import Ground, generate_terrain, retint
from grove.growth import BuilderLock, GrowthPlan, GrowthTask, plan_growth, schedule_growth
from grove.raster import Raster, composite
from grove.rollout import SessionTrace, render_frame, run_session, save_frame
from grove.scene import Scene
from grove.sky import AmbienceEngine, StarField, celestial_state, palette_state
from grove.timeline import Timeline

__all__ = [
    # Config
    "CelestialConfig",
    "FadeConfig",
    "GroundConfig",
    "GrowthConfig",
    "PaletteConfig",
    "SceneConfig",
    "StarConfig",
    "TreeConfig",
    # Geometry and growth
    "Point",
    "Segment",
    "generate_branches",
    "generate_tree",
    "trunk_for",
    "BuilderLock",
    "GrowthPlan",
    "GrowthTask",
    "plan_growth",
    "schedule_growth",
    "Timeline",
    # Layers
    "Raster",
    "composite",
    "age",
    "alpha_decay",
    "brighten",
    "AmbienceEngine",
    "StarField",
    "celestial_state",
    "palette_state",
    "Ground",
    "generate_terrain",
    "retint",
    # Scene
    "HoverEvent",
    "ScaleEvent",
    "TriggerEvent",
    "parse_event",
    "Scene",
    # Sessions
    "SessionTrace",
    "render_frame",
    "run_session",
    "save_frame",
]
