"""Rule engine for LRA participant classes.

Each rule is a pluggable, independent check over one ClassModel. The engine
runs every rule for every class and collects their findings into the
FailureCatalog of the run; a failing rule never stops the others.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from lracheck.models.classmodel import ClassModel, MethodModel
from lracheck.validation.findings import ErrorCode, FailureCatalog, Finding
from lracheck.validation.metadata import AnnotationMetadata

logger = logging.getLogger(__name__)


class LraRule(ABC):
    """Base class for LRA annotation rules."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule name for identification."""
        pass

    @abstractmethod
    def check(self, class_model: ClassModel, metadata: AnnotationMetadata) -> list[Finding]:
        """Execute the rule against one class.

        Args:
            class_model: Class under validation
            metadata: Marker lookup tables derived from class_model

        Returns:
            Findings for the class (empty when the rule is satisfied)
        """
        pass

    def _finding(self, code: ErrorCode, message: str, class_model: ClassModel,
                 method: MethodModel | None = None) -> Finding:
        return Finding(
            code=code,
            message=message,
            class_name=class_model.name,
            method_name=method.name if method else "",
        )


class RuleEngine:
    """Runs the LRA rule checklist against participant classes."""

    def __init__(self, rules: Iterable[LraRule] | None = None):
        self.rules: list[LraRule] = list(rules) if rules is not None else []
        if rules is None:
            self.create_default_rules()

    def add_rule(self, rule: LraRule) -> None:
        """Add a rule to the checklist."""
        self.rules.append(rule)

    def create_default_rules(self) -> None:
        """Register the standard LRA checklist."""
        from .rules import (
            AsyncHandlingRule,
            CallbackCardinalityRule,
            ComplementaryAttributesRule,
            ConflictingMarkersRule,
            PlainSignatureRule,
            TerminationCallbackRule,
        )

        self.add_rule(TerminationCallbackRule())
        self.add_rule(CallbackCardinalityRule())
        self.add_rule(ConflictingMarkersRule())
        self.add_rule(PlainSignatureRule())
        self.add_rule(ComplementaryAttributesRule())
        self.add_rule(AsyncHandlingRule())

    def check(self, class_model: ClassModel) -> list[Finding]:
        """Run all rules against one class without touching any catalog.

        Raises:
            ValueError: If class_model is None
        """
        if class_model is None:
            raise ValueError("class_model is required")

        metadata = AnnotationMetadata.load(class_model)
        findings: list[Finding] = []
        for rule in self.rules:
            rule_findings = rule.check(class_model, metadata)
            logger.debug(f"Rule {rule.name} on {class_model.name}: {len(rule_findings)} finding(s)")
            findings.extend(rule_findings)
        return findings

    def validate(self, class_model: ClassModel, catalog: FailureCatalog) -> list[Finding]:
        """Check one class and record its findings in the catalog."""
        findings = self.check(class_model)
        catalog.extend(findings)
        return findings

    def validate_all(self, class_models: Iterable[ClassModel], catalog: FailureCatalog,
                     workers: int = 1) -> FailureCatalog:
        """Validate a sequence of classes into one catalog.

        Args:
            class_models: Participant classes supplied by discovery
            catalog: Catalog of the current run
            workers: Number of threads; classes are validated one after
                another when this is 1 or less

        Returns:
            The catalog passed in
        """
        class_models = list(class_models)
        logger.info(f"Validating {len(class_models)} LRA participant class(es) with {len(self.rules)} rules")

        if workers <= 1:
            for class_model in class_models:
                self.validate(class_model, catalog)
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(self.validate, model, catalog) for model in class_models]
                for future in futures:
                    future.result()

        logger.info(f"Validation completed with {len(catalog)} finding(s)")
        return catalog
