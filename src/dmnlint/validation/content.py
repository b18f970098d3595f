"""Layer 5 - Content completeness checks. Never reports errors."""

import logging

from dmn_xml import DmnDocument

from .constants import CPRMV_PREFIX
from .execution import cprmv_attr
from .framework import LayerCollector, LayerResult

logger = logging.getLogger(__name__)


def validate_content_layer(doc: DmnDocument) -> LayerResult:
    layer = LayerCollector("content")

    for decision in doc.find_all("//d:decision"):
        for attr in ("title", "description"):
            value = cprmv_attr(decision, attr)
            if value is not None and not value.strip():
                layer.warning("CON-001", f"{CPRMV_PREFIX}:{attr} is present but empty on decision.",
                              decision.location)

    for input_data in doc.find_all("//d:inputData"):
        value = cprmv_attr(input_data, "description")
        if value is not None and not value.strip():
            layer.warning("CON-002", f"{CPRMV_PREFIX}:description is present but empty on inputData.",
                          input_data.location)

    for rule in doc.find_all("//d:rule"):
        value = cprmv_attr(rule, "note")
        if value is not None and not value.strip():
            layer.info("CON-003",
                       f"{CPRMV_PREFIX}:note is present but empty. Add content or remove the attribute.",
                       rule.location)

    for variable in doc.find_all("//d:variable"):
        if not variable.get("typeRef"):
            owner = variable.parent
            name = variable.get("name") or "?"
            layer.info(
                "CON-004",
                f'<variable name="{name}"> is missing typeRef. Specifying the type improves interoperability.',
                owner.location if owner is not None else None,
            )

    for annotation in doc.find_all("//d:textAnnotation"):
        text = annotation.find("d:text")
        if text is None or not text.text.strip():
            layer.info("CON-005", "<textAnnotation> has no text content.", annotation.location)

    return layer.result()
