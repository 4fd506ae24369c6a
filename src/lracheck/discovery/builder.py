"""Building ClassModel values from loaded type descriptors."""

import logging
from collections.abc import Iterable

from lracheck.constants import (
    PARAMETER_TYPE_NAMES,
    PATH_ANNOTATION,
    RETURN_TYPE_NAMES,
    SUSPENDED_ANNOTATION,
    simple_name,
)
from lracheck.models.classmodel import (
    ClassModel,
    HttpVerb,
    MarkerKind,
    MethodModel,
    ParameterModel,
    ReturnCategory,
    TypeCategory,
    TypeRef,
)
from lracheck.models.descriptor import MethodDescriptor, ParameterDescriptor, TypeDescriptor
from .paths import DiscoveryError

logger = logging.getLogger(__name__)

MARKER_ANNOTATIONS: dict[str, MarkerKind] = {kind.value: kind for kind in MarkerKind}
HTTP_VERB_ANNOTATIONS: dict[str, HttpVerb] = {verb.value: verb for verb in HttpVerb}


def to_parameter_model(parameter: ParameterDescriptor) -> ParameterModel:
    category = PARAMETER_TYPE_NAMES.get(simple_name(parameter.type), TypeCategory.OTHER.value)
    return ParameterModel(
        type_category=TypeCategory(category),
        is_suspended_async=parameter.has_annotation(SUSPENDED_ANNOTATION),
        type_name=parameter.type,
    )


def to_method_model(method: MethodDescriptor, declaring_type: TypeRef) -> MethodModel:
    annotations = method.annotation_names
    return_category = RETURN_TYPE_NAMES.get(simple_name(method.return_type), ReturnCategory.OTHER.value)
    return MethodModel(
        name=method.name,
        declaring_type=declaring_type,
        markers=frozenset(kind for name, kind in MARKER_ANNOTATIONS.items() if name in annotations),
        has_path_attribute=PATH_ANNOTATION in annotations,
        http_verbs=frozenset(verb for name, verb in HTTP_VERB_ANNOTATIONS.items() if name in annotations),
        parameters=tuple(to_parameter_model(p) for p in method.parameters),
        return_category=ReturnCategory(return_category),
        is_public=method.is_public,
    )


class ClassModelBuilder:
    """Resolves type hierarchies among descriptors and builds class models."""

    def __init__(self, descriptors: Iterable[TypeDescriptor]):
        self.types: dict[str, TypeDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self.types:
                logger.warning(
                    f"Duplicate descriptor for {descriptor.name} in {descriptor.source}, "
                    f"keeping {self.types[descriptor.name].source}"
                )
                continue
            self.types[descriptor.name] = descriptor

    def participants(self) -> list[TypeDescriptor]:
        """Instantiable types carrying the LRA marker, in load order."""
        selected = []
        for descriptor in self.types.values():
            if not descriptor.is_lra_annotated:
                continue
            if not descriptor.is_instantiable:
                logger.debug(f"Skipping {descriptor.name} as it's not a standard instantiable class")
                continue
            selected.append(descriptor)
        return selected

    def build_all(self) -> list[ClassModel]:
        return [self.build(descriptor) for descriptor in self.participants()]

    def build(self, descriptor: TypeDescriptor) -> ClassModel:
        """Build the model of one type.

        Raises:
            DiscoveryError: If the supertype chain is cyclic
        """
        chain = self.ancestor_chain(descriptor)

        declared: dict[TypeRef, tuple[MethodModel, ...]] = {}
        for type_ref in chain:
            type_descriptor = self.types.get(type_ref.name)
            methods = type_descriptor.methods if type_descriptor else []
            declared[type_ref] = tuple(to_method_model(m, type_ref) for m in methods)

        return ClassModel(
            ancestor_chain=chain,
            methods=self._flatten(chain, declared),
            declared_methods_by_type=declared,
        )

    def ancestor_chain(self, descriptor: TypeDescriptor) -> tuple[TypeRef, ...]:
        """Types from descriptor up to the root; an unknown supertype ends the chain."""
        chain = [TypeRef(descriptor.name)]
        seen = {descriptor.name}
        superclass = descriptor.superclass
        while superclass:
            if superclass in seen:
                raise DiscoveryError(f"Cyclic type hierarchy for {descriptor.name} at {superclass}")
            seen.add(superclass)
            chain.append(TypeRef(superclass))
            parent = self.types.get(superclass)
            superclass = parent.superclass if parent else None
        return tuple(chain)

    def _flatten(self, chain: tuple[TypeRef, ...],
                 declared: dict[TypeRef, tuple[MethodModel, ...]]) -> tuple[MethodModel, ...]:
        """Methods visible on the most derived type; descendants shadow ancestors."""
        visible: dict[tuple[str, tuple[str, ...]], MethodModel] = {}
        for index, type_ref in enumerate(chain):
            type_descriptor = self.types.get(type_ref.name)
            for method, method_descriptor in zip(declared[type_ref],
                                                 type_descriptor.methods if type_descriptor else []):
                # Private methods are not inherited
                if index > 0 and method_descriptor.is_private:
                    continue
                visible.setdefault(method.override_key, method)
        return tuple(visible.values())
