"""Structural models of LRA participant classes.

A ClassModel is the only input of the rule engine. It is built once by
discovery and never mutated afterwards.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from lracheck.constants import simple_name


class MarkerKind(str, Enum):
    """LRA lifecycle callback markers."""
    COMPENSATE = "Compensate"
    COMPLETE = "Complete"
    AFTER_LRA = "AfterLRA"
    FORGET = "Forget"
    STATUS = "Status"
    LEAVE = "Leave"


class TypeCategory(str, Enum):
    """Parameter type categories relevant to callback signatures."""
    URI = "URI"
    LRA_STATUS = "LRAStatus"
    OTHER = "Other"


class ReturnCategory(str, Enum):
    """Return type categories relevant to callback signatures."""
    VOID = "void"
    ASYNC_HANDLE = "CompletionStage"
    PARTICIPANT_STATUS = "ParticipantStatus"
    HTTP_RESPONSE = "Response"
    OTHER = "Other"


class HttpVerb(str, Enum):
    """HTTP method attributes of resource methods."""
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class TypeRef:
    """Reference to a type by its fully qualified name."""
    name: str

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ParameterModel:
    """A single method parameter."""
    type_category: TypeCategory = TypeCategory.OTHER
    is_suspended_async: bool = False
    type_name: str | None = None

    @property
    def display_type(self) -> str:
        return self.type_name or self.type_category.value

    @property
    def override_type(self) -> str:
        return simple_name(self.type_name) if self.type_name else self.type_category.value


@dataclass(frozen=True)
class MethodModel:
    """A method as seen on a participant class."""
    name: str
    declaring_type: TypeRef
    markers: frozenset[MarkerKind] = frozenset()
    has_path_attribute: bool = False
    http_verbs: frozenset[HttpVerb] = frozenset()
    parameters: tuple[ParameterModel, ...] = ()
    return_category: ReturnCategory = ReturnCategory.VOID
    is_public: bool = True

    def __post_init__(self) -> None:
        # Accept any iterable from callers; store hashable immutable collections
        object.__setattr__(self, "markers", frozenset(MarkerKind(m) for m in self.markers))
        object.__setattr__(self, "http_verbs", frozenset(HttpVerb(v) for v in self.http_verbs))
        object.__setattr__(self, "parameters", tuple(self.parameters))

    @property
    def is_resource(self) -> bool:
        """Resource methods are exposed as HTTP endpoints via a path attribute."""
        return self.has_path_attribute

    @property
    def override_key(self) -> tuple[str, tuple[str, ...]]:
        """Key under which a descendant declaration shadows this method.

        Parameter types compare on their simple names, so ``URI`` and
        ``java.net.URI`` select the same override.
        """
        return self.name, tuple(p.override_type for p in self.parameters)

    def has_marker(self, kind: MarkerKind) -> bool:
        return kind in self.markers

    def has_verb(self, verb: HttpVerb) -> bool:
        return verb in self.http_verbs

    def has_suspended_parameter(self) -> bool:
        return any(p.is_suspended_async for p in self.parameters)


@dataclass(frozen=True)
class ClassModel:
    """Structural description of one LRA participant type.

    Attributes:
        ancestor_chain: Types from the class itself (index 0) up to the root type
        methods: Flattened, override-resolved methods visible on the class
        declared_methods_by_type: Methods declared directly on each type of the
            chain, including ones shadowed in the flattened view
    """
    ancestor_chain: tuple[TypeRef, ...]
    methods: tuple[MethodModel, ...] = ()
    declared_methods_by_type: Mapping[TypeRef, tuple[MethodModel, ...]] = field(
        default_factory=dict, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "ancestor_chain", tuple(self.ancestor_chain))
        object.__setattr__(self, "methods", tuple(self.methods))
        if not self.ancestor_chain:
            raise ValueError("ancestor_chain must contain at least the class itself")

    @property
    def type_ref(self) -> TypeRef:
        return self.ancestor_chain[0]

    @property
    def name(self) -> str:
        return self.type_ref.name

    def methods_declared_on(self, type_ref: TypeRef) -> tuple[MethodModel, ...]:
        """Methods declared directly on one type of the ancestor chain.

        Falls back to the flattened view when no ancestor-scoped listing was
        provided for the type.
        """
        if type_ref in self.declared_methods_by_type:
            return tuple(self.declared_methods_by_type[type_ref])
        return tuple(m for m in self.methods if m.declaring_type == type_ref)

    @classmethod
    def single(cls, name: str, methods: Iterable[MethodModel] = ()) -> "ClassModel":
        """Model for a class without known supertypes."""
        return cls(ancestor_chain=(TypeRef(name),), methods=tuple(methods))
