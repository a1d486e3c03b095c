"""
Prompts for each generative facility: purpose and JSON output requirements,
plus the directive used when the user leaves the input empty.
"""

QUESTION_EXPLORER_PROMPT = """Purpose: Expand a research question into a branching map by axes: scale, mechanism, comparison, causality, feasibility, measurement, confounders.
User Input: An initial research question or area of interest.
JSON Output Requirements:
{
  "schema_version": "1.1.0",
  "root_question": "string",
  "nodes": [{"id": "string", "text": "string", "axis": "scale|mechanism|comparison|causality|feasibility|measurement|confounders"}],
  "claims": {"user_claims": [], "system_inferences": [], "assumptions": []}
}"""

HYPOTHESIS_ENGINE_PROMPT = """Purpose: Convert ideas/questions into testable hypotheses with variables, directionality, and predictions.
User Input: Refined research question or draft ideas.
JSON Output Requirements:
{
  "hypotheses": [{"id": "string", "statement": "string", "variables": {"independent": [], "dependent": [], "control": []}, "directionality": "string", "prediction": "string", "testability_score": "number 1-10"}],
  "claims": {"user_claims": [], "system_inferences": [], "assumptions": []}
}"""

PROJECT_MAPPER_PROMPT = """Purpose: Map Title -> Objectives -> Hypotheses -> Activities -> Methods -> Outputs.
Crucial: Assign a unique "id" to every node.
For nodes of type "Method", provide realistic initial estimates for:
"timeEstimate" (0-52 weeks), "effortLevel" (1-10), "uncertaintyLevel" (1-10).
JSON Output Requirements:
{
  "graph": [{"id": "string", "type": "Objective|Hypothesis|Activity|Method|Output", "content": "string", "timeEstimate": "number", "effortLevel": "number", "uncertaintyLevel": "number"}],
  "consistency_report": ["string"],
  "claims": {"user_claims": [], "system_inferences": [], "assumptions": []}
}"""

EXPERTISE_DETECTOR_PROMPT = """Purpose: Estimate the theoretical depth and complexity each component of the project demands, and flag knowledge gaps.
JSON Output Requirements:
{
  "components": [{"topic": "string", "depth_required": "low|medium|high", "complexity": "string", "status": "green|yellow|red", "learning_topics": []}],
  "claims": {"user_claims": [], "system_inferences": [], "assumptions": []}
}"""

LIT_STRATEGY_PROMPT = """Purpose: Design a keyword-only literature search strategy.
JSON Output Requirements:
{
  "clusters": [{"category": "string", "terms": []}],
  "boolean_strings": [],
  "inclusion_terms": [],
  "exclusion_terms": [],
  "claims": {"user_claims": [], "system_inferences": [], "assumptions": []}
}"""

# Substituted for empty user input
QUESTION_EXPLORER_DEFAULT = "Explore the research question implied by the current project state."
HYPOTHESIS_ENGINE_DEFAULT = "Generate testable hypotheses from the current project state."
PROJECT_MAPPER_DEFAULT = "Map research architecture."
EXPERTISE_DETECTOR_DEFAULT = "Scan for knowledge gaps."
LIT_STRATEGY_DEFAULT = "Build a search strategy for the current blueprint."
