from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from trackbox.animation.curve import Curve, InterpolationType


@runtime_checkable
class BoxValuesProvider(Protocol):
    """Anything that can report its current {name -> value} map for a generic property UI."""

    def get_box_values(self, frame_number: int) -> Dict[str, float]:
        ...


def add_property_json(
    name: str,
    value: Any,
    prop_type: str,
    memo: str,
    curve: Optional[Curve],
    min_value: float,
    max_value: float,
    readonly: bool,
    requested_frame: int,
    choices: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Describe one property so an editor can render it without knowing the owner."""
    prop: Dict[str, Any] = {
        "name": name,
        "value": value,
        "type": prop_type,
        "memo": memo,
        "description": memo,
        "min": min_value,
        "max": max_value,
        "readonly": readonly,
        "choices": choices or [],
    }
    if curve is not None:
        closest = curve.get_closest_point(requested_frame)
        previous = curve.get_previous_point(requested_frame)
        prop.update(
            {
                "keyframe": curve.contains(requested_frame),
                "points": curve.get_count(),
                "interpolation": closest.interpolation.value if closest else InterpolationType.CONSTANT.value,
                "closest_point_x": closest.frame if closest else -1,
                "previous_point_x": previous.frame if previous else -1,
                "keyframe_points": curve.json_value(),
            }
        )
    else:
        prop.update(
            {
                "keyframe": False,
                "points": 0,
                "interpolation": InterpolationType.CONSTANT.value,
                "closest_point_x": -1,
                "previous_point_x": -1,
                "keyframe_points": [],
            }
        )
    return prop


def add_property_choice_json(name: str, value: Any, selected_value: Any) -> Dict[str, Any]:
    return {"name": name, "value": value, "selected": value == selected_value}
