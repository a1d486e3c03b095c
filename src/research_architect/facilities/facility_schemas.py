"""
Facility Result Types

Typed views of the JSON each facility returns. from_dict() is a validating decode:
shapes coming back from the model are coerced to defaults where a field is missing or
of the wrong type, numeric ranges are clamped, and items that lack mandatory content
(or carry an enum value outside the allowed set) are dropped and reported.
to_dict() writes the JSON shape back, omitting optional fields that were absent.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..utils.text_utils import (
    clamp, coerce_number, coerce_str, coerce_str_list, match_choice
)


QUESTION_AXES = ["scale", "mechanism", "comparison", "causality", "feasibility", "measurement", "confounders"]
BLUEPRINT_NODE_TYPES = ["Objective", "Hypothesis", "Activity", "Method", "Output"]
DEPTH_LEVELS = ["low", "medium", "high"]
GAP_STATUSES = ["green", "yellow", "red"]

TESTABILITY_RANGE = (1, 10)
TIME_ESTIMATE_RANGE = (0, 52)
LEVEL_RANGE = (1, 10)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _ranged(value: Any, bounds) -> Optional[float]:
    number = coerce_number(value)
    if number is None:
        return None
    return clamp(number, *bounds)


def _item_id(raw: Dict[str, Any], prefix: str, position: int) -> str:
    item_id = coerce_str(raw.get("id")).strip()
    return item_id or f"{prefix}-{position}"


def _note(issues: Optional[List[str]], message: str):
    if issues is not None:
        issues.append(message)


@dataclass
class Claims:
    """The claims triad; the three lists are kept apart exactly as generated"""
    user_claims: List[str] = field(default_factory=list)
    system_inferences: List[str] = field(default_factory=list)
    assumptions: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Claims":
        data = _as_dict(data)
        return cls(
            user_claims=coerce_str_list(data.get("user_claims")),
            system_inferences=coerce_str_list(data.get("system_inferences")),
            assumptions=coerce_str_list(data.get("assumptions")),
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "user_claims": list(self.user_claims),
            "system_inferences": list(self.system_inferences),
            "assumptions": list(self.assumptions),
        }

    @property
    def is_empty(self) -> bool:
        return not (self.user_claims or self.system_inferences or self.assumptions)


@dataclass
class QuestionNode:
    id: str
    text: str
    axis: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "axis": self.axis}


@dataclass
class QuestionMap:
    root_question: str = ""
    nodes: List[QuestionNode] = field(default_factory=list)
    claims: Claims = field(default_factory=Claims)
    schema_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, issues: List[str] = None) -> "QuestionMap":
        data = _as_dict(data)
        nodes = []
        for position, raw in enumerate(_as_list(data.get("nodes")), 1):
            raw = _as_dict(raw)
            text = coerce_str(raw.get("text")).strip()
            axis = match_choice(raw.get("axis"), QUESTION_AXES)
            if not text or axis is None:
                _note(issues, f"question node #{position} dropped (text={text!r}, axis={raw.get('axis')!r})")
                continue
            nodes.append(QuestionNode(id=_item_id(raw, "node", position), text=text, axis=axis))
        return cls(
            root_question=coerce_str(data.get("root_question")),
            nodes=nodes,
            claims=Claims.from_dict(data.get("claims")),
            schema_version=coerce_str(data.get("schema_version")) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.schema_version:
            result["schema_version"] = self.schema_version
        result.update({
            "root_question": self.root_question,
            "nodes": [node.to_dict() for node in self.nodes],
            "claims": self.claims.to_dict(),
        })
        return result


@dataclass
class HypothesisVariables:
    independent: List[str] = field(default_factory=list)
    dependent: List[str] = field(default_factory=list)
    control: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "HypothesisVariables":
        data = _as_dict(data)
        return cls(
            independent=coerce_str_list(data.get("independent")),
            dependent=coerce_str_list(data.get("dependent")),
            control=coerce_str_list(data.get("control")),
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "independent": list(self.independent),
            "dependent": list(self.dependent),
            "control": list(self.control),
        }


@dataclass
class Hypothesis:
    id: str
    statement: str
    variables: HypothesisVariables = field(default_factory=HypothesisVariables)
    directionality: str = ""
    prediction: str = ""
    testability_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "statement": self.statement,
            "variables": self.variables.to_dict(),
            "directionality": self.directionality,
            "prediction": self.prediction,
        }
        if self.testability_score is not None:
            result["testability_score"] = self.testability_score
        return result


@dataclass
class HypothesisSet:
    hypotheses: List[Hypothesis] = field(default_factory=list)
    claims: Claims = field(default_factory=Claims)
    schema_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, issues: List[str] = None) -> "HypothesisSet":
        data = _as_dict(data)
        hypotheses = []
        for position, raw in enumerate(_as_list(data.get("hypotheses")), 1):
            raw = _as_dict(raw)
            statement = coerce_str(raw.get("statement")).strip()
            if not statement:
                _note(issues, f"hypothesis #{position} dropped (no statement)")
                continue
            hypotheses.append(Hypothesis(
                id=_item_id(raw, "hyp", position),
                statement=statement,
                variables=HypothesisVariables.from_dict(raw.get("variables")),
                directionality=coerce_str(raw.get("directionality")),
                prediction=coerce_str(raw.get("prediction")),
                testability_score=_ranged(raw.get("testability_score"), TESTABILITY_RANGE),
            ))
        return cls(
            hypotheses=hypotheses,
            claims=Claims.from_dict(data.get("claims")),
            schema_version=coerce_str(data.get("schema_version")) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.schema_version:
            result["schema_version"] = self.schema_version
        result.update({
            "hypotheses": [h.to_dict() for h in self.hypotheses],
            "claims": self.claims.to_dict(),
        })
        return result


@dataclass
class BlueprintNode:
    id: str
    type: str
    content: str
    time_estimate: Optional[float] = None
    effort_level: Optional[float] = None
    uncertainty_level: Optional[float] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], position: int) -> Optional["BlueprintNode"]:
        node_type = match_choice(raw.get("type"), BLUEPRINT_NODE_TYPES)
        content = coerce_str(raw.get("content")).strip()
        if node_type is None or not content:
            return None
        return cls(
            id=_item_id(raw, "node", position),
            type=node_type,
            content=content,
            time_estimate=_ranged(raw.get("timeEstimate"), TIME_ESTIMATE_RANGE),
            effort_level=_ranged(raw.get("effortLevel"), LEVEL_RANGE),
            uncertainty_level=_ranged(raw.get("uncertaintyLevel"), LEVEL_RANGE),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"id": self.id, "type": self.type, "content": self.content}
        if self.time_estimate is not None:
            result["timeEstimate"] = self.time_estimate
        if self.effort_level is not None:
            result["effortLevel"] = self.effort_level
        if self.uncertainty_level is not None:
            result["uncertaintyLevel"] = self.uncertainty_level
        return result


@dataclass
class ProjectBlueprint:
    graph: List[BlueprintNode] = field(default_factory=list)
    consistency_report: List[str] = field(default_factory=list)
    claims: Claims = field(default_factory=Claims)
    schema_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, issues: List[str] = None) -> "ProjectBlueprint":
        data = _as_dict(data)
        graph = []
        for position, raw in enumerate(_as_list(data.get("graph")), 1):
            raw = _as_dict(raw)
            node = BlueprintNode.from_dict(raw, position)
            if node is None:
                _note(issues, f"blueprint node #{position} dropped (type={raw.get('type')!r})")
                continue
            graph.append(node)
        return cls(
            graph=graph,
            consistency_report=coerce_str_list(data.get("consistency_report")),
            claims=Claims.from_dict(data.get("claims")),
            schema_version=coerce_str(data.get("schema_version")) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.schema_version:
            result["schema_version"] = self.schema_version
        result.update({
            "graph": [node.to_dict() for node in self.graph],
            "consistency_report": list(self.consistency_report),
            "claims": self.claims.to_dict(),
        })
        return result


@dataclass
class ExpertiseComponent:
    topic: str
    depth_required: str
    complexity: str
    status: str
    learning_topics: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "depth_required": self.depth_required,
            "complexity": self.complexity,
            "status": self.status,
            "learning_topics": list(self.learning_topics),
        }


@dataclass
class ExpertiseHeatmap:
    components: List[ExpertiseComponent] = field(default_factory=list)
    claims: Claims = field(default_factory=Claims)
    schema_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, issues: List[str] = None) -> "ExpertiseHeatmap":
        data = _as_dict(data)
        components = []
        for position, raw in enumerate(_as_list(data.get("components")), 1):
            raw = _as_dict(raw)
            topic = coerce_str(raw.get("topic")).strip()
            depth = match_choice(raw.get("depth_required"), DEPTH_LEVELS)
            status = match_choice(raw.get("status"), GAP_STATUSES)
            if not topic or depth is None or status is None:
                _note(issues, f"expertise component #{position} dropped (topic={topic!r})")
                continue
            components.append(ExpertiseComponent(
                topic=topic,
                depth_required=depth,
                complexity=coerce_str(raw.get("complexity")),
                status=status,
                learning_topics=coerce_str_list(raw.get("learning_topics")),
            ))
        return cls(
            components=components,
            claims=Claims.from_dict(data.get("claims")),
            schema_version=coerce_str(data.get("schema_version")) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.schema_version:
            result["schema_version"] = self.schema_version
        result.update({
            "components": [c.to_dict() for c in self.components],
            "claims": self.claims.to_dict(),
        })
        return result


@dataclass
class KeywordCluster:
    category: str
    terms: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "terms": list(self.terms)}


@dataclass
class LiteratureStrategy:
    clusters: List[KeywordCluster] = field(default_factory=list)
    boolean_strings: List[str] = field(default_factory=list)
    inclusion_terms: List[str] = field(default_factory=list)
    exclusion_terms: List[str] = field(default_factory=list)
    claims: Claims = field(default_factory=Claims)
    schema_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, issues: List[str] = None) -> "LiteratureStrategy":
        data = _as_dict(data)
        clusters = []
        for position, raw in enumerate(_as_list(data.get("clusters")), 1):
            raw = _as_dict(raw)
            category = coerce_str(raw.get("category")).strip()
            if not category:
                _note(issues, f"keyword cluster #{position} dropped (no category)")
                continue
            clusters.append(KeywordCluster(category=category, terms=coerce_str_list(raw.get("terms"))))
        return cls(
            clusters=clusters,
            boolean_strings=coerce_str_list(data.get("boolean_strings")),
            inclusion_terms=coerce_str_list(data.get("inclusion_terms")),
            exclusion_terms=coerce_str_list(data.get("exclusion_terms")),
            claims=Claims.from_dict(data.get("claims")),
            schema_version=coerce_str(data.get("schema_version")) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.schema_version:
            result["schema_version"] = self.schema_version
        result.update({
            "clusters": [c.to_dict() for c in self.clusters],
            "boolean_strings": list(self.boolean_strings),
            "inclusion_terms": list(self.inclusion_terms),
            "exclusion_terms": list(self.exclusion_terms),
            "claims": self.claims.to_dict(),
        })
        return result
