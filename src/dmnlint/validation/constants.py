"""Value sets and format patterns used by the validation layers.

The BWB identifier and ISO date patterns are interoperability contracts
with the issuing organisation's identifier scheme; keep them exact.
"""

import re

CPRMV_NS = "https://cprmv.open-regels.nl/0.3.0/"
CPRMV_HOST = "cprmv.open-regels.nl"
CPRMV_PREFIX = "cprmv"

# Ordered tuples so messages list allowed values in a stable order
VALID_HIT_POLICIES = (
    "UNIQUE", "FIRST", "ANY", "COLLECT", "RULE ORDER", "OUTPUT ORDER", "PRIORITY",
)

# Implicit hit policy when a decisionTable omits the attribute
DEFAULT_HIT_POLICY = "UNIQUE"

# Policies under which at most one rule may match
SINGLE_MATCH_POLICIES = frozenset({"UNIQUE", "ANY"})

VALID_TYPE_REFS = frozenset({
    "string", "boolean", "integer", "long", "double", "number", "date", "Any",
    "String", "Boolean", "Integer", "Long", "Double", "Date", "Number",
})

VALID_CPRMV_RULESET_TYPES = (
    "decision-table", "conditional-calculation", "constraint-table", "derivation-table",
)

VALID_CPRMV_RULE_TYPES = (
    "temporal-period", "conditional", "derivation", "constraint", "decision-rule", "default",
)

VALID_CPRMV_CONFIDENCE = ("low", "medium", "high")

ISO_DATE_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$")
BWB_ID_RE = re.compile(r"^[A-Z]{4}\d{7}$")

# Input entry text that matches any value
MATCH_ANYTHING = frozenset({"", "-"})
