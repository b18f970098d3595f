"""Core validation framework for DMN documents.

Holds the report model (issues, layer results, the aggregated result), the
aggregator that assembles a report from per-layer results, and the
``DmnValidator`` pipeline that runs the five layers over one document.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..config import DmnLintConfig, create_default_config

logger = logging.getLogger(__name__)

LAYER_KEYS = ("base", "business", "execution", "interaction", "content")

LAYER_LABELS = {
    "base": "Base DMN",
    "business": "Business Rules",
    "execution": "Execution Rules",
    "interaction": "Interaction Rules",
    "content": "Content",
}

LAYER_CODE_PREFIXES = {
    "base": "BASE",
    "business": "BIZ",
    "execution": "EXEC",
    "interaction": "INT",
    "content": "CON",
}


class Severity(str, Enum):
    """Issue severity. Only ERROR blocks validity."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationIssue:
    """A single finding reported by a layer."""
    severity: Severity
    code: str
    message: str
    location: str | None = None
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        where = f" at {self.location}" if self.location else ""
        if self.line is not None:
            where += f" (line {self.line}, column {self.column})"
        return f"[{self.severity.value.upper()}] {self.code}: {self.message}{where}"

    def to_dict(self) -> dict:
        """Convert to dictionary, omitting absent optional fields."""
        data = {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
        }
        if self.location:
            data["location"] = self.location
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        return data


@dataclass(frozen=True)
class LayerResult:
    """Issues of one layer in discovery order."""
    label: str
    issues: tuple[ValidationIssue, ...] = ()

    @classmethod
    def empty(cls, key: str) -> "LayerResult":
        return cls(LAYER_LABELS[key])

    def codes(self) -> list[str]:
        return [issue.code for issue in self.issues]

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "issues": [issue.to_dict() for issue in self.issues],
        }


class LayerCollector:
    """Mutable issue list used while a layer runs; frozen into a LayerResult."""

    def __init__(self, key: str):
        self.key = key
        self._issues: list[ValidationIssue] = []

    def add(self, severity: Severity, code: str, message: str,
            location: str | None = None, line: int | None = None,
            column: int | None = None) -> None:
        self._issues.append(ValidationIssue(severity, code, message, location, line, column))

    def error(self, code: str, message: str, location: str | None = None) -> None:
        self.add(Severity.ERROR, code, message, location)

    def warning(self, code: str, message: str, location: str | None = None) -> None:
        self.add(Severity.WARNING, code, message, location)

    def info(self, code: str, message: str, location: str | None = None) -> None:
        self.add(Severity.INFO, code, message, location)

    def result(self) -> LayerResult:
        return LayerResult(LAYER_LABELS[self.key], tuple(self._issues))


@dataclass(frozen=True)
class ValidationSummary:
    """Issue counts across all layers."""
    errors: int = 0
    warnings: int = 0
    infos: int = 0

    @property
    def total(self) -> int:
        return self.errors + self.warnings + self.infos

    def to_dict(self) -> dict:
        return {"errors": self.errors, "warnings": self.warnings, "infos": self.infos}


@dataclass(frozen=True)
class DmnValidationResult:
    """Root report for one validated document."""
    valid: bool
    parse_error: str | None
    layers: dict[str, LayerResult] = field(default_factory=dict)
    summary: ValidationSummary = field(default_factory=ValidationSummary)

    @property
    def base(self) -> LayerResult:
        return self.layers["base"]

    @property
    def business(self) -> LayerResult:
        return self.layers["business"]

    @property
    def execution(self) -> LayerResult:
        return self.layers["execution"]

    @property
    def interaction(self) -> LayerResult:
        return self.layers["interaction"]

    @property
    def content(self) -> LayerResult:
        return self.layers["content"]

    def all_issues(self) -> list[ValidationIssue]:
        return [issue for key in LAYER_KEYS for issue in self.layers[key].issues]

    def exit_code(self, fail_on_warnings: bool = False) -> int:
        """Exit code for CI: 0 = valid, 1 = invalid (or warnings when requested)."""
        if not self.valid:
            return 1
        if fail_on_warnings and self.summary.warnings > 0:
            return 1
        return 0

    def to_dict(self) -> dict:
        """Convert to the documented JSON shape."""
        return {
            "valid": self.valid,
            "parseError": self.parse_error,
            "layers": {key: self.layers[key].to_dict() for key in LAYER_KEYS},
            "summary": self.summary.to_dict(),
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def build_result(parse_error: str | None, base: LayerResult,
                 business: LayerResult | None = None,
                 execution: LayerResult | None = None,
                 interaction: LayerResult | None = None,
                 content: LayerResult | None = None) -> DmnValidationResult:
    """Assemble the report from per-layer results.

    Layers that were never run are filled with empty results so all five
    slots are always present.
    """
    layers = {
        "base": base,
        "business": business or LayerResult.empty("business"),
        "execution": execution or LayerResult.empty("execution"),
        "interaction": interaction or LayerResult.empty("interaction"),
        "content": content or LayerResult.empty("content"),
    }

    errors = warnings = infos = 0
    for key in LAYER_KEYS:
        for issue in layers[key].issues:
            if issue.severity == Severity.ERROR:
                errors += 1
            elif issue.severity == Severity.WARNING:
                warnings += 1
            else:
                infos += 1

    return DmnValidationResult(
        valid=parse_error is None and errors == 0,
        parse_error=parse_error,
        layers=layers,
        summary=ValidationSummary(errors, warnings, infos),
    )


class DmnValidator:
    """Runs the five validation layers over one DMN document per call."""

    def __init__(self, config: DmnLintConfig | None = None):
        self.config = config or create_default_config()

    def validate(self, xml_content: str, source: str = "<string>") -> DmnValidationResult:
        """Validate raw DMN XML text.

        Never raises for document problems; every anomaly is reported as an
        issue in the returned result.
        """
        from .base import validate_base_layer
        from .business import validate_business_layer
        from .content import validate_content_layer
        from .execution import validate_execution_layer
        from .interaction import validate_interaction_layer

        start_time = time.time()
        logger.info(f"Starting validation of {source}")

        outcome = validate_base_layer(xml_content, source)
        if outcome.parse_error is not None:
            result = build_result(outcome.parse_error, outcome.layer)
        elif outcome.document is None:
            result = build_result(None, outcome.layer)
        else:
            doc = outcome.document
            layer_results = {}
            for key, run in (
                ("business", lambda: validate_business_layer(doc)),
                ("execution", lambda: validate_execution_layer(doc, xml_content)),
                ("interaction", lambda: validate_interaction_layer(doc)),
                ("content", lambda: validate_content_layer(doc)),
            ):
                logger.debug(f"Running {LAYER_LABELS[key]} layer")
                try:
                    layer_results[key] = run()
                except Exception as e:
                    logger.error(f"{LAYER_LABELS[key]} layer failed with error: {e}")
                    collector = LayerCollector(key)
                    collector.error(f"{LAYER_CODE_PREFIXES[key]}-ERR", f"Layer execution failed: {e}")
                    layer_results[key] = collector.result()
            result = build_result(None, outcome.layer, **layer_results)

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Validation of {source} completed in {elapsed_ms:.1f}ms: valid={result.valid}, "
            f"{result.summary.errors} errors, {result.summary.warnings} warnings, "
            f"{result.summary.infos} infos"
        )
        return result

    def validate_file(self, file_path: Path) -> DmnValidationResult:
        """Validate a DMN file read as UTF-8.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        content = Path(file_path).read_text(encoding="utf-8")
        return self.validate(content, source=str(file_path))


def validate_dmn_content(xml_content: str) -> DmnValidationResult:
    """Validate raw DMN XML text with default configuration."""
    return DmnValidator().validate(xml_content)
