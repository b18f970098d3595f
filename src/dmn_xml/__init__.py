"""Secure DMN XML loader.

This package turns DMN XML text into a typed, namespace-aware document
handle. It depends only on defusedxml and has no knowledge of validation
rules, so it can be reused by other DMN tooling.

Basic usage:
    from dmn_xml import DmnXmlParser

    parser = DmnXmlParser()
    result = parser.parse_content(xml_text)

    if result.success:
        for decision in result.document.find_all("//d:decision"):
            print(decision.location)
"""

from .__version__ import __version__, __author__, __description__
from .parser import DmnXmlParser, XmlEngineUnavailable, load_xml_engine, xml_engine_available
from .document import DmnDocument, XmlNode
from .models import ParseResult, ParseDiagnostics
from .utils import XmlUtils, ErrorUtils
from .constants import (
    DMN13_NS,
    KNOWN_DMN_NAMESPACES,
    DEFAULT_NAMESPACES,
    DEFAULT_CONFIG
)

# Public API
__all__ = [
    # Version info
    '__version__',
    '__author__',
    '__description__',

    # Loader
    'DmnXmlParser',
    'XmlEngineUnavailable',
    'load_xml_engine',
    'xml_engine_available',

    # Document handle
    'DmnDocument',
    'XmlNode',

    # Data models
    'ParseResult',
    'ParseDiagnostics',

    # Utilities
    'XmlUtils',
    'ErrorUtils',

    # Constants
    'DMN13_NS',
    'KNOWN_DMN_NAMESPACES',
    'DEFAULT_NAMESPACES',
    'DEFAULT_CONFIG'
]


def parse_dmn_content(content, config=None):
    """Convenience function to load DMN content from a string.

    Args:
        content: DMN XML as string
        config: Optional parser configuration

    Returns:
        ParseResult with the document handle
    """
    return DmnXmlParser(config).parse_content(content)


def parse_dmn_file(file_path, config=None):
    """Convenience function to load a DMN file directly.

    Args:
        file_path: Path to DMN file (string or Path object)
        config: Optional parser configuration

    Returns:
        ParseResult with the document handle
    """
    from pathlib import Path
    return DmnXmlParser(config).parse_file(Path(file_path))
