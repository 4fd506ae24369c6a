"""Annotation and type names recognised in class descriptors.

Names are matched on their simple form, so both ``Compensate`` and
``org.eclipse.microprofile.lra.annotation.Compensate`` select the same marker.
"""

# Type-level marker selecting LRA participants
LRA_TYPE_ANNOTATION = "LRA"

# Resource method attributes
PATH_ANNOTATION = "Path"

# Parameter marker for asynchronous completion
SUSPENDED_ANNOTATION = "Suspended"

# Simple type names mapped to parameter category values
PARAMETER_TYPE_NAMES: dict[str, str] = {
    "URI": "URI",
    "LRAStatus": "LRAStatus",
}

# Simple type names mapped to return category values
RETURN_TYPE_NAMES: dict[str, str] = {
    "void": "void",
    "Void": "void",
    "CompletionStage": "CompletionStage",
    "ParticipantStatus": "ParticipantStatus",
    "Response": "Response",
}

DEFAULT_DESCRIPTOR_SUFFIX = ".class.json"
CONFIG_FILE_NAME = ".lracheck.json"


def simple_name(qualified_name: str) -> str:
    """Strip package and generic arguments: ``a.b.C<X>`` -> ``C``."""
    base = qualified_name.split("<", 1)[0].strip()
    return base.rsplit(".", 1)[-1]
