"""Per-class lookup of LRA callback methods.

AnnotationMetadata answers two questions for every marker kind: which methods
of the class declare the marker, and which one of them is active once
override shadowing down the inheritance chain is taken into account.
"""

import logging

from lracheck.models.classmodel import ClassModel, MarkerKind, MethodModel, TypeRef

logger = logging.getLogger(__name__)


class AnnotationMetadata:
    """Read-only marker lookup tables derived from one ClassModel."""

    def __init__(self, class_model: ClassModel):
        if class_model is None:
            raise ValueError("class_model is required")
        self.class_model = class_model

        self._declared: dict[MarkerKind, tuple[MethodModel, ...]] = {
            kind: tuple(m for m in class_model.methods if m.has_marker(kind))
            for kind in MarkerKind
        }
        self._winning_types: dict[MarkerKind, TypeRef | None] = {
            kind: self._find_winning_type(kind) for kind in MarkerKind
        }
        self._candidates: dict[MarkerKind, tuple[MethodModel, ...]] = {
            kind: self._find_candidates(kind) for kind in MarkerKind
        }

    @classmethod
    def load(cls, class_model: ClassModel) -> "AnnotationMetadata":
        return cls(class_model)

    def declared_methods(self, kind: MarkerKind) -> tuple[MethodModel, ...]:
        """All flattened, override-resolved methods carrying the marker."""
        return self._declared[kind]

    def resource_methods(self, kind: MarkerKind) -> tuple[MethodModel, ...]:
        return tuple(m for m in self._declared[kind] if m.is_resource)

    def plain_methods(self, kind: MarkerKind) -> tuple[MethodModel, ...]:
        return tuple(m for m in self._declared[kind] if not m.is_resource)

    def winning_declaring_type(self, kind: MarkerKind) -> TypeRef | None:
        """The most derived type of the chain that declares the marker itself."""
        return self._winning_types[kind]

    def active_candidates(self, kind: MarkerKind) -> tuple[MethodModel, ...]:
        """Declared methods of the winning type; more than one is ambiguous."""
        return self._candidates[kind]

    def active_method(self, kind: MarkerKind) -> MethodModel | None:
        """The single authoritative method for the marker.

        Returns None when no type of the chain declares the marker, when the
        winning declaration is shadowed by an unmarked override, or when the
        winning type carries several methods of the marker (see is_ambiguous).
        """
        candidates = self._candidates[kind]
        if len(candidates) == 1:
            return candidates[0]
        return None

    def is_ambiguous(self, kind: MarkerKind) -> bool:
        return len(self._candidates[kind]) > 1

    def active_methods(self) -> dict[MarkerKind, MethodModel | None]:
        return {kind: self.active_method(kind) for kind in MarkerKind}

    def _find_winning_type(self, kind: MarkerKind) -> TypeRef | None:
        for type_ref in self.class_model.ancestor_chain:
            if any(m.has_marker(kind) for m in self.class_model.methods_declared_on(type_ref)):
                return type_ref
        return None

    def _find_candidates(self, kind: MarkerKind) -> tuple[MethodModel, ...]:
        winning = self._winning_types[kind]
        if winning is None:
            return ()
        candidates = tuple(m for m in self._declared[kind] if m.declaring_type == winning)
        if not candidates:
            logger.debug(
                f"{kind.value} declared on {winning} is shadowed by an unmarked override "
                f"in {self.class_model.name}"
            )
        return candidates
