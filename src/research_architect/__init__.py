"""
ARCH Research Architect

Facility orchestration over an LLM JSON generation API: each facility composes a
prompt from the accumulated project, asks the model for strict JSON, normalizes and
decodes the answer, and merges it into the project document.
"""

__version__ = "1.0"
