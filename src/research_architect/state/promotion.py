"""
Promotion between facilities

A facility's result can be carried forward as the pre-filled input of the next
facility in the sequence.
"""

from typing import Any, Dict, Optional

from ..facilities.facility_kind import FacilityKind


PROMOTION_TARGETS = {
    FacilityKind.QUESTION_EXPLORER: FacilityKind.HYPOTHESIS_ENGINE,
    FacilityKind.HYPOTHESIS_ENGINE: FacilityKind.PROJECT_MAPPER,
    FacilityKind.PROJECT_MAPPER: FacilityKind.EXPERTISE_DETECTOR,
    FacilityKind.EXPERTISE_DETECTOR: FacilityKind.LIT_STRATEGY,
}


def promotion_target(kind) -> Optional[FacilityKind]:
    return PROMOTION_TARGETS.get(FacilityKind.parse(kind))


def _items(data: Dict[str, Any], key: str):
    return [item for item in data.get(key) or [] if isinstance(item, dict)]


def question_node_text(data: Optional[Dict[str, Any]], node_id: str) -> str:
    """
    Text of one sub-question of a question map

    Raises:
        KeyError: no node with that id in the map
    """
    for node in _items(data or {}, "nodes"):
        if node.get("id") == node_id:
            return node.get("text")
    raise KeyError(f"No question node with id '{node_id}'")


def promotion_text(kind, data: Optional[Dict[str, Any]], node_id: str = None) -> Optional[str]:
    """
    Build the input handed to the next facility

    Args:
        kind: Facility the result comes from
        data: That facility's slice
        node_id: QUESTION_EXPLORER only, promote one node instead of the root question

    Returns:
        The pre-fill text, or None when there is nothing to promote
    """
    kind = FacilityKind.parse(kind)
    if not data or data.get("error") or kind not in PROMOTION_TARGETS:
        return None

    if kind == FacilityKind.QUESTION_EXPLORER:
        if node_id is not None:
            return question_node_text(data, node_id)
        return data.get("root_question") or None

    if kind == FacilityKind.HYPOTHESIS_ENGINE:
        statements = [h.get("statement", "") for h in _items(data, "hypotheses")]
        return "Hypotheses:\n" + "\n".join(f"- {s}" for s in statements)

    if kind == FacilityKind.PROJECT_MAPPER:
        return " ".join(node.get("content", "") for node in _items(data, "graph"))

    topics = []
    for component in _items(data, "components"):
        topics.extend(component.get("learning_topics") or [])
    return ", ".join(str(topic) for topic in topics)
