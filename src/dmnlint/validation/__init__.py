"""Five-layer static validation of DMN documents.

Layer 1 (Base):        well-formedness, root element and namespace sanity.
Layer 2 (Business):    decision table structure, types, duplicate/overlapping rules.
Layer 3 (Execution):   CPRMV extension attributes.
Layer 4 (Interaction): DRD wiring between decisions and input data.
Layer 5 (Content):     metadata completeness.
"""

from .base import BaseLayerOutcome, validate_base_layer
from .business import validate_business_layer
from .content import validate_content_layer
from .execution import validate_execution_layer
from .framework import (
    LAYER_KEYS,
    LAYER_LABELS,
    DmnValidationResult,
    DmnValidator,
    LayerResult,
    Severity,
    ValidationIssue,
    ValidationSummary,
    build_result,
    validate_dmn_content,
)
from .interaction import validate_interaction_layer

__all__ = [
    "LAYER_KEYS",
    "LAYER_LABELS",
    "BaseLayerOutcome",
    "DmnValidationResult",
    "DmnValidator",
    "LayerResult",
    "Severity",
    "ValidationIssue",
    "ValidationSummary",
    "build_result",
    "validate_dmn_content",
    "validate_base_layer",
    "validate_business_layer",
    "validate_execution_layer",
    "validate_interaction_layer",
    "validate_content_layer",
]
