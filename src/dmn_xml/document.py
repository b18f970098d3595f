"""Typed tree abstraction over a parsed DMN document.

Validation code only sees ``DmnDocument`` and ``XmlNode``; the ElementTree
objects underneath never leak out. Every query tolerates "not found" and
malformed paths, returning an empty list or None instead of raising.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

import xml.etree.ElementTree as ET

from .constants import DEFAULT_NAMESPACES, DMN13_NS
from .utils import XmlUtils

logger = logging.getLogger(__name__)


class XmlNode:
    """Read-only view of one element in a ``DmnDocument``."""

    __slots__ = ('_document', '_element')

    def __init__(self, document: 'DmnDocument', element: ET.Element):
        self._document = document
        self._element = element

    def __eq__(self, other: object) -> bool:
        return isinstance(other, XmlNode) and other._element is self._element

    def __hash__(self) -> int:
        return id(self._element)

    def __repr__(self) -> str:
        return f'XmlNode({self.location})'

    @property
    def document(self) -> 'DmnDocument':
        return self._document

    @property
    def tag(self) -> str:
        """Local name of the element."""
        return XmlUtils.get_local_name(self._element.tag)

    @property
    def namespace(self) -> str:
        """Namespace URI of the element, empty when unqualified."""
        return XmlUtils.get_namespace_uri(self._element.tag)

    @property
    def attributes(self) -> Dict[str, str]:
        """Copy of the raw attribute map (Clark-notation keys)."""
        return dict(self._element.attrib)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Unqualified attribute value."""
        return self._element.get(name, default)

    @property
    def text(self) -> str:
        """Concatenated text content of the element and its descendants."""
        return ''.join(self._element.itertext())

    @property
    def location(self) -> str:
        """Human-readable location: ``<tag id="X">``, ``<tag name="N">`` or ``<tag>``."""
        element_id = self.get('id')
        if element_id:
            return f'<{self.tag} id="{element_id}">'
        name = self.get('name')
        if name:
            return f'<{self.tag} name="{name}">'
        return f'<{self.tag}>'

    def find_all(self, path: str, namespaces: Optional[Dict[str, str]] = None) -> List['XmlNode']:
        return self._document.find_all(path, context=self, namespaces=namespaces)

    def find(self, path: str, namespaces: Optional[Dict[str, str]] = None) -> Optional['XmlNode']:
        return self._document.find(path, context=self, namespaces=namespaces)

    @property
    def parent(self) -> Optional['XmlNode']:
        return self._document.parent(self)

    def ancestor(self, local_name: str, namespace: Optional[str] = DMN13_NS) -> Optional['XmlNode']:
        return self._document.ancestor(self, local_name, namespace)

    def ns_attr(self, name: str, namespace_uri: str) -> Optional[str]:
        return self._document.ns_attr(self, name, namespace_uri)


class DmnDocument:
    """Parsed document handle scoped to a single validation call."""

    def __init__(self, root: ET.Element,
                 declared_namespaces: Optional[List[Tuple[str, str]]] = None,
                 namespaces: Optional[Dict[str, str]] = None):
        """Initialize document handle.

        Args:
            root: Parsed root element
            declared_namespaces: (prefix, uri) pairs seen while parsing, in
                document order
            namespaces: Prefix map for path queries, DEFAULT_NAMESPACES if None
        """
        self._root = root
        self.declared_namespaces: List[Tuple[str, str]] = list(declared_namespaces or [])
        self.namespaces: Dict[str, str] = dict(namespaces or DEFAULT_NAMESPACES)
        self._parents: Dict[ET.Element, ET.Element] = {
            child: parent for parent in root.iter() for child in parent
        }

    @classmethod
    def from_element(cls, root: ET.Element) -> 'DmnDocument':
        """Wrap an already-built ElementTree root (no namespace declarations recorded)."""
        return cls(root)

    @property
    def root(self) -> XmlNode:
        return XmlNode(self, self._root)

    @property
    def namespace_uris(self) -> List[str]:
        """URIs of every namespace declared anywhere in the document."""
        return [uri for _, uri in self.declared_namespaces]

    def _wrap(self, element: Optional[ET.Element]) -> Optional[XmlNode]:
        return XmlNode(self, element) if element is not None else None

    def _element_of(self, context: Optional[XmlNode]) -> ET.Element:
        return context._element if context is not None else self._root

    @staticmethod
    def _normalize_path(path: str) -> str:
        # ElementPath only accepts descendant searches relative to a node
        if path.startswith('//'):
            return '.' + path
        return path

    def find_all(self, path: str, context: Optional[XmlNode] = None,
                 namespaces: Optional[Dict[str, str]] = None) -> List[XmlNode]:
        """All elements matching an ElementPath expression.

        Args:
            path: Expression such as ``//d:decision`` or ``d:rule``
            context: Node to evaluate from (document root if None)
            namespaces: Prefix map (document default if None)

        Returns:
            Matching nodes in document order, empty on any error
        """
        try:
            elements = self._element_of(context).findall(
                self._normalize_path(path), namespaces or self.namespaces)
        except (SyntaxError, KeyError, TypeError) as e:
            logger.debug(f"Path query '{path}' failed: {e}")
            return []
        return [XmlNode(self, element) for element in elements]

    def find(self, path: str, context: Optional[XmlNode] = None,
             namespaces: Optional[Dict[str, str]] = None) -> Optional[XmlNode]:
        """First element matching an ElementPath expression, or None."""
        try:
            element = self._element_of(context).find(
                self._normalize_path(path), namespaces or self.namespaces)
        except (SyntaxError, KeyError, TypeError) as e:
            logger.debug(f"Path query '{path}' failed: {e}")
            return None
        return self._wrap(element)

    def iter_local(self, local_name: str) -> Iterator[XmlNode]:
        """Every element (root included) with the given local name, any namespace."""
        for element in self._root.iter():
            if XmlUtils.get_local_name(element.tag) == local_name:
                yield XmlNode(self, element)

    def parent(self, node: XmlNode) -> Optional[XmlNode]:
        return self._wrap(self._parents.get(node._element))

    def ancestor(self, node: XmlNode, local_name: str,
                 namespace: Optional[str] = DMN13_NS) -> Optional[XmlNode]:
        """Nearest ancestor with the given local name.

        Args:
            node: Starting node (not itself considered)
            local_name: Local name to match
            namespace: Required namespace URI; None matches any namespace
        """
        current = self._parents.get(node._element)
        while current is not None:
            if XmlUtils.get_local_name(current.tag) == local_name and (
                    namespace is None or XmlUtils.get_namespace_uri(current.tag) == namespace):
                return XmlNode(self, current)
            current = self._parents.get(current)
        return None

    def ns_attr(self, node: XmlNode, name: str, namespace_uri: str) -> Optional[str]:
        """Resolve a namespaced attribute even when its prefix binding is unclean.

        Tries the exact Clark-notation key first, then scans the raw attributes
        for a matching local name whose namespace equals ``namespace_uri``
        up to a trailing slash, or a literal ``prefix:name`` key.
        """
        attrib = node._element.attrib
        exact = attrib.get(XmlUtils.qualify(namespace_uri, name))
        if exact is not None:
            return exact

        wanted = namespace_uri.rstrip('/')
        prefixes = {prefix for prefix, uri in self.declared_namespaces
                    if uri.rstrip('/') == wanted and prefix}
        for key, value in attrib.items():
            if key.startswith('{'):
                if (XmlUtils.get_local_name(key) == name
                        and XmlUtils.get_namespace_uri(key).rstrip('/') == wanted):
                    return value
            elif ':' in key:
                prefix, _, local = key.partition(':')
                if local == name and prefix in prefixes:
                    return value
        return None

    def count_elements(self) -> int:
        return sum(1 for _ in self._root.iter())

    def depth(self) -> int:
        """Maximum nesting depth below the root."""
        max_depth = 0
        stack = [(self._root, 0)]
        while stack:
            element, level = stack.pop()
            max_depth = max(max_depth, level)
            stack.extend((child, level + 1) for child in element)
        return max_depth
