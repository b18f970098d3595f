"""dmnlint - Static multi-layer validator for DMN decision models.

dmnlint parses a DMN XML document and checks well-formedness, decision table
consistency, CPRMV extension attributes, DRD wiring and content quality,
producing one structured report per document.
"""

__version__ = "0.1.0"
__author__ = "dmnlint contributors"
__email__ = "dev@dmnlint.invalid"
__description__ = "Static multi-layer validator for DMN decision models"

from dmnlint.config import DmnLintConfig
from dmnlint.validation import DmnValidationResult, DmnValidator, validate_dmn_content

__all__ = [
    "__version__",
    "__author__",
    "__email__",
    "__description__",
    "DmnLintConfig",
    "DmnValidationResult",
    "DmnValidator",
    "validate_dmn_content",
]
