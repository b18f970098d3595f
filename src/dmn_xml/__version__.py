"""Version information for dmn_xml package."""

__version__ = "0.1.0"
__author__ = "dmnlint contributors"
__description__ = "Secure DMN XML loader with a typed, namespace-aware tree API"
