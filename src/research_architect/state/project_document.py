"""
Project Document

In-memory project: identity plus one slice per facility that has run.
Documents are never mutated; merge() builds the next snapshot and shares every
untouched slice with the previous one.
"""

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..facilities.facility_kind import FACILITY_SEQUENCE, FacilityKind


def _frozen(facilities: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(facilities or {}))


@dataclass(frozen=True)
class ProjectDocument:
    id: str
    title: str
    description: str = ""
    facilities: Mapping[FacilityKind, Dict[str, Any]] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not isinstance(self.facilities, MappingProxyType):
            object.__setattr__(self, "facilities", _frozen(
                {FacilityKind.parse(kind): data for kind, data in (self.facilities or {}).items()}
            ))

    def get_slice(self, kind) -> Optional[Dict[str, Any]]:
        return self.facilities.get(FacilityKind.parse(kind))

    def has_run(self, kind) -> bool:
        return FacilityKind.parse(kind) in self.facilities

    def context_for(self, kind) -> Dict[str, Any]:
        """
        State handed to the prompt composer for a run of `kind`

        Contains the project identity, the facility's own previous slice and the
        slices of the facilities that come before it in the sequence. Fallback
        slices are left out so a failed run never feeds the next one.
        """
        kind = FacilityKind.parse(kind)
        if kind in FACILITY_SEQUENCE:
            visible = FACILITY_SEQUENCE[:FACILITY_SEQUENCE.index(kind) + 1]
        else:
            visible = FACILITY_SEQUENCE

        facilities = {}
        for other in visible:
            data = self.facilities.get(other)
            if data and not data.get("error"):
                facilities[other.value] = data

        return {
            "project": {"title": self.title, "description": self.description},
            "facilities": facilities,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "facilities": {kind.value: data for kind, data in self.facilities.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectDocument":
        """
        Rebuild a document from its exported form

        Raises:
            ValueError: when the payload is not a project document
        """
        if not isinstance(data, dict):
            raise ValueError("Project document must be a JSON object")
        facilities = data.get("facilities") or {}
        if not isinstance(facilities, dict):
            raise ValueError("'facilities' must be an object keyed by facility name")
        return cls(
            id=str(data.get("id") or "project"),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            facilities=facilities,
        )


def merge(document: ProjectDocument, kind, new_slice: Dict[str, Any]) -> ProjectDocument:
    """
    Return a new document whose `kind` slice is replaced wholesale

    Every other slice is carried over by reference; the input document is unchanged.
    """
    kind = FacilityKind.parse(kind)
    facilities = dict(document.facilities)
    facilities[kind] = new_slice
    return dataclasses.replace(document, facilities=MappingProxyType(facilities))
