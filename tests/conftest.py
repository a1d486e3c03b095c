import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from research_architect.state.project_document import ProjectDocument
from research_architect.utils.debug_logger import DebugLogger


@pytest.fixture
def logger(tmp_path):
    debug_logger = DebugLogger(debug_mode=True, log_dir=str(tmp_path / "logs"), project_title="Test Project")
    yield debug_logger
    debug_logger.finalize_session()


@pytest.fixture
def document():
    return ProjectDocument(
        id="p-1",
        title="Urban Pollinators",
        description="Pollinator diversity across city green spaces.",
    )


@pytest.fixture
def question_map():
    return {
        "schema_version": "1.1.0",
        "root_question": "How does urban green space shape pollinator diversity?",
        "nodes": [
            {"id": "n1", "text": "At what spatial scale do effects appear?", "axis": "scale"},
            {"id": "n2", "text": "Which floral traits mediate visits?", "axis": "mechanism"},
        ],
        "claims": {
            "user_claims": ["Green space matters"],
            "system_inferences": ["Scale is a likely confounder"],
            "assumptions": ["Sampling is feasible in summer"],
        },
    }


@pytest.fixture
def hypothesis_set():
    return {
        "hypotheses": [
            {
                "id": "h1",
                "statement": "Larger parks host more bee species.",
                "variables": {"independent": ["park area"], "dependent": ["species richness"], "control": ["season"]},
                "directionality": "positive",
                "prediction": "Richness increases with area.",
                "testability_score": 8,
            },
            {
                "id": "h2",
                "statement": "Native plantings attract more visits.",
                "variables": {"independent": ["planting type"], "dependent": ["visit rate"], "control": []},
                "directionality": "positive",
                "prediction": "Native plots see more visits.",
                "testability_score": 6,
            },
        ],
        "claims": {"user_claims": [], "system_inferences": ["Area drives richness"], "assumptions": []},
    }


@pytest.fixture
def blueprint():
    return {
        "graph": [
            {"id": "o1", "type": "Objective", "content": "Quantify pollinator diversity"},
            {"id": "m1", "type": "Method", "content": "Pan trapping", "timeEstimate": 6, "effortLevel": 4, "uncertaintyLevel": 2},
            {"id": "m2", "type": "Method", "content": "Transect walks", "timeEstimate": 10, "effortLevel": 8, "uncertaintyLevel": 9},
            {"id": "out1", "type": "Output", "content": "Species inventory"},
        ],
        "consistency_report": ["Objective o1 has no linked hypothesis"],
        "claims": {"user_claims": [], "system_inferences": [], "assumptions": ["Two field seasons"]},
    }


@pytest.fixture
def heatmap():
    return {
        "components": [
            {"topic": "Bee taxonomy", "depth_required": "high", "complexity": "high", "status": "red",
             "learning_topics": ["Apoidea keys", "Specimen pinning"]},
            {"topic": "GIS", "depth_required": "medium", "complexity": "medium", "status": "yellow",
             "learning_topics": ["Buffer analysis"]},
            {"topic": "Field sampling", "depth_required": "low", "complexity": "low", "status": "green",
             "learning_topics": []},
        ],
        "claims": {"user_claims": [], "system_inferences": [], "assumptions": []},
    }


@pytest.fixture
def lit_strategy():
    return {
        "clusters": [{"category": "Taxa", "terms": ["bees", "hoverflies"]}],
        "boolean_strings": ['("urban" AND "pollinator")'],
        "inclusion_terms": ["field study"],
        "exclusion_terms": ["greenhouse"],
        "claims": {"user_claims": [], "system_inferences": [], "assumptions": []},
    }


@pytest.fixture
def fake_llm():
    """Generation client double; set generate_json.return_value or side_effect per test"""
    llm = MagicMock()
    llm.generate_json = AsyncMock(return_value=json.dumps({"hypotheses": []}))
    return llm
