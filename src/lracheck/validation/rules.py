"""LRA annotation rules.

Each rule validates one structural aspect of a participant class.
"""

import itertools
import logging

from lracheck.models.classmodel import ClassModel, MarkerKind
from .framework import LraRule
from .findings import ErrorCode, Finding
from .metadata import AnnotationMetadata
from .shapes import (
    ASYNC_CAPABLE_KINDS,
    ASYNC_SUPPORT_KINDS,
    COMPLEMENTARY_ATTRIBUTES,
    PLAIN_CALLBACK_SHAPES,
    carries_attribute,
)

logger = logging.getLogger(__name__)


class TerminationCallbackRule(LraRule):
    """A participant must be able to compensate or learn the final LRA status."""

    @property
    def name(self) -> str:
        return "termination_callback"

    def check(self, class_model: ClassModel, metadata: AnnotationMetadata) -> list[Finding]:
        if metadata.declared_methods(MarkerKind.COMPENSATE) or metadata.declared_methods(MarkerKind.AFTER_LRA):
            return []
        return [self._finding(
            ErrorCode.MISSING_TERMINATION_CALLBACK,
            f"Class '{class_model.name}' declares neither a "
            f"'{MarkerKind.COMPENSATE.value}' nor an '{MarkerKind.AFTER_LRA.value}' method.",
            class_model,
        )]


class CallbackCardinalityRule(LraRule):
    """At most one method per class may carry a given marker."""

    @property
    def name(self) -> str:
        return "callback_cardinality"

    def check(self, class_model: ClassModel, metadata: AnnotationMetadata) -> list[Finding]:
        findings = []
        # Uniform for every kind, Status and Leave included
        for kind in MarkerKind:
            methods = metadata.declared_methods(kind)
            if len(methods) <= 1:
                continue
            method_names = [m.name for m in methods]
            findings.append(Finding(
                code=ErrorCode.DUPLICATE_MARKER,
                message=(f"Multiple '{kind.value}' markers in the class '{class_model.name}' "
                         f"on methods {method_names}."),
                class_name=class_model.name,
                method_name=", ".join(method_names),
            ))
        return findings


class ConflictingMarkersRule(LraRule):
    """A method cannot serve two lifecycle roles."""

    @property
    def name(self) -> str:
        return "conflicting_markers"

    def check(self, class_model: ClassModel, metadata: AnnotationMetadata) -> list[Finding]:
        findings = []
        for method in class_model.methods:
            for first, second in itertools.combinations(MarkerKind, 2):
                if method.has_marker(first) and method.has_marker(second):
                    findings.append(self._finding(
                        ErrorCode.CONFLICTING_MARKERS,
                        f"Method '{method.name}' of class '{method.declaring_type}' carries conflicting "
                        f"markers '{first.value}' and '{second.value}'.",
                        class_model,
                        method,
                    ))
        return findings


class PlainSignatureRule(LraRule):
    """Callbacks without a path attribute must follow the plain callback signature."""

    @property
    def name(self) -> str:
        return "plain_signature"

    def check(self, class_model: ClassModel, metadata: AnnotationMetadata) -> list[Finding]:
        findings = []
        for kind in MarkerKind:
            shape = PLAIN_CALLBACK_SHAPES[kind]
            for method in metadata.plain_methods(kind):
                reason = shape.mismatch(method)
                if reason is None:
                    continue
                logger.debug(f"{class_model.name}.{method.name} does not fit {kind.value}: {reason}")
                findings.append(self._finding(
                    ErrorCode.WRONG_PLAIN_SIGNATURE,
                    f"Signature for marker '{kind.value}' in the class '{method.declaring_type}' "
                    f"on method '{method.name}' ({reason}). It should be '{shape.describe(kind)}'.",
                    class_model,
                    method,
                ))
        return findings


class ComplementaryAttributesRule(LraRule):
    """Resource callbacks need their HTTP path and verb attributes."""

    @property
    def name(self) -> str:
        return "complementary_attributes"

    def check(self, class_model: ClassModel, metadata: AnnotationMetadata) -> list[Finding]:
        findings = []
        for kind in MarkerKind:
            resource_methods = metadata.resource_methods(kind)
            if not resource_methods:
                continue
            # Further methods of the kind are reported by the cardinality rule
            method = resource_methods[0]
            for attribute in COMPLEMENTARY_ATTRIBUTES[kind]:
                if carries_attribute(method, attribute):
                    continue
                findings.append(self._finding(
                    ErrorCode.MISSING_COMPLEMENTARY_ATTRIBUTE,
                    f"Method '{method.name}' of class '{method.declaring_type}' marked with "
                    f"'{kind.value}' misses complementary attribute '{attribute}'.",
                    class_model,
                    method,
                ))
        return findings


class AsyncHandlingRule(LraRule):
    """Asynchronous completion requires Status and Forget callbacks."""

    @property
    def name(self) -> str:
        return "async_handling"

    def check(self, class_model: ClassModel, metadata: AnnotationMetadata) -> list[Finding]:
        if all(metadata.declared_methods(kind) for kind in ASYNC_SUPPORT_KINDS):
            return []

        findings = []
        for kind in ASYNC_CAPABLE_KINDS:
            resource_methods = metadata.resource_methods(kind)
            if not resource_methods or not resource_methods[0].has_suspended_parameter():
                continue
            method = resource_methods[0]
            findings.append(self._finding(
                ErrorCode.INCOMPLETE_ASYNC_HANDLING,
                f"Method '{method.name}' of class '{method.declaring_type}' marked with '{kind.value}' "
                f"completes asynchronously via a suspended parameter. The class has to declare "
                f"'{MarkerKind.STATUS.value}' and '{MarkerKind.FORGET.value}' methods to support such handling.",
                class_model,
                method,
            ))
        return findings
