"""
Tabular and markdown renderings of facility slices for the web workspace and reports
"""

from typing import Any, Dict, List, Optional

import pandas as pd

from ..facilities.blueprint_metrics import node_risk, risk_band
from ..facilities.facility_kind import FacilityKind
from ..facilities.facility_schemas import Claims


QUESTION_COLUMNS = ["id", "axis", "text"]
HYPOTHESIS_COLUMNS = ["id", "statement", "independent", "dependent", "control",
                      "directionality", "prediction", "testability"]
BLUEPRINT_COLUMNS = ["id", "type", "content", "weeks", "effort", "uncertainty", "risk", "risk_band"]
HEATMAP_COLUMNS = ["topic", "depth_required", "complexity", "status", "learning_topics"]
CLUSTER_COLUMNS = ["category", "terms"]


def _rows(data: Optional[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    if not data or data.get("error"):
        return []
    return [item for item in data.get(key) or [] if isinstance(item, dict)]


def _joined(values) -> str:
    return ", ".join(str(v) for v in values or [])


def question_table(data: Optional[Dict[str, Any]]) -> pd.DataFrame:
    rows = [{"id": n.get("id"), "axis": n.get("axis"), "text": n.get("text")} for n in _rows(data, "nodes")]
    return pd.DataFrame(rows, columns=QUESTION_COLUMNS)


def hypothesis_table(data: Optional[Dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for h in _rows(data, "hypotheses"):
        variables = h.get("variables") or {}
        rows.append({
            "id": h.get("id"),
            "statement": h.get("statement"),
            "independent": _joined(variables.get("independent")),
            "dependent": _joined(variables.get("dependent")),
            "control": _joined(variables.get("control")),
            "directionality": h.get("directionality", ""),
            "prediction": h.get("prediction", ""),
            "testability": h.get("testability_score"),
        })
    return pd.DataFrame(rows, columns=HYPOTHESIS_COLUMNS)


def blueprint_table(data: Optional[Dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for node in _rows(data, "graph"):
        risk = node_risk(node)
        rows.append({
            "id": node.get("id"),
            "type": node.get("type"),
            "content": node.get("content"),
            "weeks": node.get("timeEstimate"),
            "effort": node.get("effortLevel"),
            "uncertainty": node.get("uncertaintyLevel"),
            "risk": risk,
            "risk_band": risk_band(risk),
        })
    return pd.DataFrame(rows, columns=BLUEPRINT_COLUMNS)


def heatmap_table(data: Optional[Dict[str, Any]]) -> pd.DataFrame:
    rows = [{
        "topic": c.get("topic"),
        "depth_required": c.get("depth_required"),
        "complexity": c.get("complexity"),
        "status": c.get("status"),
        "learning_topics": _joined(c.get("learning_topics")),
    } for c in _rows(data, "components")]
    return pd.DataFrame(rows, columns=HEATMAP_COLUMNS)


def cluster_table(data: Optional[Dict[str, Any]]) -> pd.DataFrame:
    rows = [{"category": c.get("category"), "terms": _joined(c.get("terms"))} for c in _rows(data, "clusters")]
    return pd.DataFrame(rows, columns=CLUSTER_COLUMNS)


SLICE_TABLES = {
    FacilityKind.QUESTION_EXPLORER: question_table,
    FacilityKind.HYPOTHESIS_ENGINE: hypothesis_table,
    FacilityKind.PROJECT_MAPPER: blueprint_table,
    FacilityKind.EXPERTISE_DETECTOR: heatmap_table,
    FacilityKind.LIT_STRATEGY: cluster_table,
}


def slice_table(kind, data: Optional[Dict[str, Any]]) -> pd.DataFrame:
    return SLICE_TABLES[FacilityKind.parse(kind)](data)


def ledger_markdown(claims: Claims) -> str:
    """The architect's ledger: the claims triad as three separate lists"""
    sections = []
    for title, items in (("User claims", claims.user_claims),
                         ("System inferences", claims.system_inferences),
                         ("Assumptions", claims.assumptions)):
        lines = [f"- {item}" for item in items] or ["_none_"]
        sections.append(f"**{title}**\n\n" + "\n".join(lines))
    return "\n\n".join(sections)
