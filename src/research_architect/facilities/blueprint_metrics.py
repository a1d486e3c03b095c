"""
Blueprint Metrics

Resource figures derived from a project map (PROJECT_MAPPER slice) and gap counts
from an expertise heatmap (EXPERTISE_DETECTOR slice). Slices are plain JSON data;
every field is read defensively since user edits and older exports go through here too.
"""

import copy
from typing import Any, Dict, List, Optional

from .facility_schemas import LEVEL_RANGE, TIME_ESTIMATE_RANGE, GAP_STATUSES
from ..utils.text_utils import clamp, coerce_number


RISK_BANDS = (
    (4, "low"),
    (7, "medium"),
)

EDITABLE_METRICS = {
    "timeEstimate": TIME_ESTIMATE_RANGE,
    "effortLevel": LEVEL_RANGE,
    "uncertaintyLevel": LEVEL_RANGE,
}


def node_risk(node: Dict[str, Any]) -> float:
    """Mean of effort and uncertainty, each defaulting to 1"""
    effort = coerce_number(node.get("effortLevel")) or 1
    uncertainty = coerce_number(node.get("uncertaintyLevel")) or 1
    return (effort + uncertainty) / 2


def risk_band(score: float) -> str:
    for upper, band in RISK_BANDS:
        if score < upper:
            return band
    return "high"


def method_nodes(blueprint: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    graph = (blueprint or {}).get("graph") or []
    return [node for node in graph if isinstance(node, dict) and node.get("type") == "Method"]


def total_method_weeks(blueprint: Optional[Dict[str, Any]]) -> float:
    """Sum of timeEstimate over Method nodes; missing estimates count as 0"""
    return sum(coerce_number(node.get("timeEstimate")) or 0 for node in method_nodes(blueprint))


def update_node(blueprint: Dict[str, Any], node_id: str, **metrics) -> Dict[str, Any]:
    """
    Return a copy of the blueprint with one node's resource metrics replaced

    Args:
        blueprint: PROJECT_MAPPER slice
        node_id: id of the node to edit
        **metrics: any of timeEstimate, effortLevel, uncertaintyLevel

    Returns:
        New blueprint dict; the input is left untouched

    Raises:
        KeyError: unknown node id
        ValueError: unknown metric name or non-numeric value
    """
    unknown = set(metrics) - set(EDITABLE_METRICS)
    if unknown:
        raise ValueError(f"Not an editable node metric: {', '.join(sorted(unknown))}")

    updated = copy.deepcopy(blueprint)
    for node in updated.get("graph") or []:
        if node.get("id") == node_id:
            for name, value in metrics.items():
                number = coerce_number(value)
                if number is None:
                    raise ValueError(f"{name} must be numeric, got {value!r}")
                node[name] = clamp(number, *EDITABLE_METRICS[name])
            return updated
    raise KeyError(f"No blueprint node with id '{node_id}'")


def status_counts(heatmap: Optional[Dict[str, Any]]) -> Dict[str, int]:
    counts = {status: 0 for status in GAP_STATUSES}
    for component in (heatmap or {}).get("components") or []:
        status = component.get("status") if isinstance(component, dict) else None
        if status in counts:
            counts[status] += 1
    return counts


def critical_components(heatmap: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Components flagged red"""
    return [c for c in (heatmap or {}).get("components") or []
            if isinstance(c, dict) and c.get("status") == "red"]
