"""Annotation rule validation for LRA participant classes.

The engine derives AnnotationMetadata for each ClassModel, runs the rule
checklist and records findings in the FailureCatalog of the run.
"""

from .findings import ErrorCode, FailureCatalog, Finding
from .framework import LraRule, RuleEngine
from .metadata import AnnotationMetadata
from .rules import (
    AsyncHandlingRule,
    CallbackCardinalityRule,
    ComplementaryAttributesRule,
    ConflictingMarkersRule,
    PlainSignatureRule,
    TerminationCallbackRule,
)

__all__ = [
    "AnnotationMetadata",
    "ErrorCode",
    "FailureCatalog",
    "Finding",
    "LraRule",
    "RuleEngine",
    "AsyncHandlingRule",
    "CallbackCardinalityRule",
    "ComplementaryAttributesRule",
    "ConflictingMarkersRule",
    "PlainSignatureRule",
    "TerminationCallbackRule",
]
