"""Secure XML loader for DMN documents.

This module provides the DmnXmlParser class that turns raw XML text into a
``DmnDocument``. Parsing goes through defusedxml; the capability is checked
on every load so a missing dependency surfaces as ``XmlEngineUnavailable``
rather than an import failure at module load.
"""

import io
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import xml.etree.ElementTree as ET

from .constants import DEFAULT_CONFIG, DEFAULT_NAMESPACES
from .document import DmnDocument
from .models import ParseDiagnostics, ParseResult
from .utils import ErrorUtils, XmlUtils

logger = logging.getLogger(__name__)


class XmlEngineUnavailable(RuntimeError):
    """Raised when the secure XML parsing library cannot be imported."""


def load_xml_engine():
    """Import and return the defusedxml ElementTree module.

    Raises:
        XmlEngineUnavailable: If defusedxml is not installed
    """
    try:
        from defusedxml import ElementTree as defused_et
    except ImportError as e:
        raise XmlEngineUnavailable(
            "defusedxml is not installed. Run: pip install defusedxml"
        ) from e
    return defused_et


def xml_engine_available() -> bool:
    """Check whether the secure XML parsing library can be loaded."""
    try:
        load_xml_engine()
    except XmlEngineUnavailable:
        return False
    return True


class DmnXmlParser:
    """Loads DMN XML text into a navigable document handle."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize parser with configuration.

        Args:
            config: Parser configuration dict, uses DEFAULT_CONFIG if None
        """
        self.config = {**DEFAULT_CONFIG, **(config or {})}

    def parse_file(self, file_path: Path) -> ParseResult:
        """Load a DMN file from disk (UTF-8).

        Raises:
            XmlEngineUnavailable: If defusedxml is not installed
            OSError: If the file cannot be read
        """
        content = Path(file_path).read_text(encoding='utf-8')
        return self.parse_content(content, source=str(file_path))

    def parse_content(self, xml_content: str, source: str = "<string>") -> ParseResult:
        """Load DMN XML from a string.

        Args:
            xml_content: Raw XML text
            source: Virtual file name for logging

        Returns:
            ParseResult with the document or the failure details

        Raises:
            XmlEngineUnavailable: If defusedxml is not installed
        """
        engine = load_xml_engine()
        from defusedxml.common import DefusedXmlException

        start_time = time.time()
        result = ParseResult(source=source)
        diagnostics = ParseDiagnostics(content_length=len(xml_content or ''))
        diagnostics.processing_steps.append("parse_content_started")

        try:
            root, declared = self._iterparse(engine, xml_content or '')
            diagnostics.performance_metrics['xml_parse_ms'] = (time.time() - start_time) * 1000
            diagnostics.processing_steps.append("xml_parsed")

            document = DmnDocument(root, declared, DEFAULT_NAMESPACES)
            result.document = document

            if self.config.get('collect_diagnostics', True):
                diagnostics.root_element_tag = XmlUtils.get_local_name(root.tag)
                diagnostics.total_elements = document.count_elements()
                diagnostics.xml_depth = document.depth()
                diagnostics.namespaces_declared = len(declared)
                diagnostics.processing_steps.append("diagnostics_collected")

        except ET.ParseError as e:
            message = ErrorUtils.first_line(str(e))
            line, column = ErrorUtils.extract_position(message, getattr(e, 'position', None))
            result.success = False
            result.error_kind = 'syntax'
            result.error_message = message
            result.line = line
            result.column = column
            diagnostics.processing_steps.append("xml_parse_failed")
            logger.debug(f"XML syntax error in {source}: {message}")
        except DefusedXmlException as e:
            result.success = False
            result.error_kind = 'forbidden'
            result.error_message = ErrorUtils.first_line(str(e)) or type(e).__name__
            diagnostics.processing_steps.append("forbidden_construct")
            logger.warning(f"Rejected unsafe XML construct in {source}: {e!r}")

        result.parse_time_ms = (time.time() - start_time) * 1000
        result.diagnostics = diagnostics
        return result

    def _iterparse(self, engine, xml_content: str) -> Tuple[ET.Element, List[Tuple[str, str]]]:
        """Parse while recording every namespace declaration."""
        if xml_content.startswith('\ufeff'):
            xml_content = xml_content[1:]

        declared: List[Tuple[str, str]] = []
        root: Optional[ET.Element] = None
        events = engine.iterparse(
            io.StringIO(xml_content),
            events=("start", "start-ns"),
            forbid_dtd=self.config['forbid_dtd'],
            forbid_entities=self.config['forbid_entities'],
            forbid_external=self.config['forbid_external'],
        )
        for event, item in events:
            if event == "start-ns":
                declared.append((item[0], item[1]))
            elif event == "start" and root is None:
                root = item
        if root is None:
            # iterparse reports an empty document itself; guard for odd inputs
            raise ET.ParseError("no element found: line 1, column 0")
        return root, declared
