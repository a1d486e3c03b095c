"""
Facilities Package

- facility_kind: FacilityKind / Language enums
- schema_registry: generation contract (instruction, default directive, result type) per facility
- facility_schemas: typed, validating decode of facility results
- blueprint_metrics: risk and workload figures derived from project maps and expertise heatmaps
"""

from .facility_kind import FacilityKind, Language, FACILITY_SEQUENCE
from .schema_registry import (
    FacilityContract, NoGenerationContractError, contract_for, default_directive_for,
    decode_slice, generative_kinds, instruction_for
)
from .facility_schemas import Claims

__all__ = [
    'FacilityKind',
    'Language',
    'FACILITY_SEQUENCE',
    'FacilityContract',
    'NoGenerationContractError',
    'contract_for',
    'default_directive_for',
    'generative_kinds',
    'instruction_for',
    'Claims',
    'decode_slice'
]
