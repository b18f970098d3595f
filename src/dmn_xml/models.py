"""Data models for DMN document loading.

Plain dataclasses, no behaviour beyond what the loader fills in.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .document import DmnDocument


@dataclass
class ParseDiagnostics:
    """Diagnostic information about a load operation."""
    total_elements: int = 0
    xml_depth: int = 0
    namespaces_declared: int = 0
    content_length: int = 0
    root_element_tag: Optional[str] = None
    processing_steps: List[str] = field(default_factory=list)
    performance_metrics: Dict[str, float] = field(default_factory=dict)


@dataclass
class ParseResult:
    """Outcome of loading one XML document.

    ``error_kind`` is one of ``'syntax'`` (not well-formed), ``'forbidden'``
    (rejected by the secure parser) or ``'unexpected'``; it is None on success.
    """
    document: Optional['DmnDocument'] = None
    success: bool = True
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    parse_time_ms: float = 0.0
    source: Optional[str] = None
    diagnostics: Optional[ParseDiagnostics] = None
