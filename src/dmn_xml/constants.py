"""Constants for DMN document loading.

Namespace URIs and loader defaults are centralized here for easy maintenance.
"""

from typing import Dict, FrozenSet

# DMN 1.3 model namespace; every layer query binds the ``d`` prefix to it
DMN13_NS = 'https://www.omg.org/spec/DMN/20191111/MODEL/'

# Namespace variants accepted on the <definitions> root element
KNOWN_DMN_NAMESPACES: FrozenSet[str] = frozenset({
    'http://www.omg.org/spec/DMN/20151101/dmn.xsd',      # DMN 1.1
    'http://www.omg.org/spec/DMN/20180521/MODEL/',       # DMN 1.2
    DMN13_NS,                                            # DMN 1.3
    'http://www.omg.org/spec/DMN/20191111/MODEL/',       # DMN 1.3 (http)
    'http://camunda.org/schema/1.0/dmn',                 # Camunda legacy
})

# Prefix map used when evaluating path expressions
DEFAULT_NAMESPACES: Dict[str, str] = {
    'd': DMN13_NS,
}

# Loader settings, passed through to defusedxml
DEFAULT_CONFIG = {
    'forbid_dtd': False,          # DTDs are allowed, entity declarations are not
    'forbid_entities': True,
    'forbid_external': True,
    'collect_diagnostics': True,
}
