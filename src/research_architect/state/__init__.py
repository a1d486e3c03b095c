from .project_document import ProjectDocument, merge
from .project_store import ProjectStore, RequestToken
from .project_export import DEFAULT_EXPORT_FILENAME, export_project, load_project
from .promotion import promotion_target, promotion_text, question_node_text

__all__ = [
    "ProjectDocument",
    "merge",
    "ProjectStore",
    "RequestToken",
    "DEFAULT_EXPORT_FILENAME",
    "export_project",
    "load_project",
    "promotion_target",
    "promotion_text",
    "question_node_text",
]
