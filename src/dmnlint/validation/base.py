"""Layer 1 - Base DMN checks.

Parses the raw text and checks root element and namespace sanity. This is
the only layer that can end the pipeline: a syntax error, a missing XML
engine, a non-``definitions`` root or an unexpected failure here means no
document handle is handed to layers 2-5.
"""

import logging
from dataclasses import dataclass

from dmn_xml import KNOWN_DMN_NAMESPACES, DmnDocument, DmnXmlParser, XmlEngineUnavailable

from .framework import LayerCollector, LayerResult, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaseLayerOutcome:
    """Base layer result plus what later layers need."""
    layer: LayerResult
    document: DmnDocument | None = None
    parse_error: str | None = None


def validate_base_layer(xml_content: str, source: str = "<string>") -> BaseLayerOutcome:
    """Parse ``xml_content`` and run the root-level checks."""
    collector = LayerCollector("base")

    try:
        parsed = DmnXmlParser().parse_content(xml_content, source)
    except XmlEngineUnavailable as e:
        logger.error(f"XML engine unavailable: {e}")
        collector.error("BASE-DEPS", str(e))
        return BaseLayerOutcome(collector.result())
    except Exception as e:
        logger.error(f"Unexpected error in base layer: {e}")
        collector.error("BASE-ERR", f"Unexpected error: {e}")
        return BaseLayerOutcome(collector.result())

    if not parsed.success:
        if parsed.error_kind == "syntax":
            message = f"XML is not well-formed: {parsed.error_message}"
            collector.add(Severity.ERROR, "BASE-PARSE", message,
                          line=parsed.line, column=parsed.column)
            return BaseLayerOutcome(collector.result(), parse_error=message)
        logger.error(f"Unexpected error in base layer: {parsed.error_message}")
        collector.error("BASE-ERR", f"Unexpected error: {parsed.error_message}")
        return BaseLayerOutcome(collector.result())

    document = parsed.document
    try:
        root = document.root

        if root.tag != "definitions":
            collector.error(
                "BASE-ROOT",
                f"Root element is <{root.tag}>, expected <definitions>.",
                root.location,
            )
            return BaseLayerOutcome(collector.result())

        if root.namespace not in KNOWN_DMN_NAMESPACES:
            declared = f'"{root.namespace}"' if root.namespace else "(none)"
            collector.error(
                "BASE-NS",
                f"Root namespace {declared} is not a recognised DMN namespace. "
                f"Expected one of: {', '.join(sorted(KNOWN_DMN_NAMESPACES))}.",
                root.location,
            )

        if not (root.get("name") or "").strip():
            collector.warning("BASE-NAME", "<definitions> is missing a name attribute.", root.location)

        if not (root.get("namespace") or "").strip():
            collector.warning("BASE-NSATTR", "<definitions> is missing a namespace attribute.", root.location)

        if next(document.iter_local("decision"), None) is None:
            collector.warning("BASE-EMPTY", "Document contains no <decision> elements.", root.location)

    except Exception as e:
        logger.error(f"Unexpected error in base layer: {e}")
        collector.error("BASE-ERR", f"Unexpected error: {e}")
        return BaseLayerOutcome(collector.result())

    return BaseLayerOutcome(collector.result(), document=document)
