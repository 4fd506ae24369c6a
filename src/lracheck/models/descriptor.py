"""Class descriptor documents read by discovery.

A descriptor captures what a compiler would record about a type: its kind,
supertype, modifiers and annotations, and the methods it declares directly.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from lracheck.constants import LRA_TYPE_ANNOTATION, simple_name


class TypeKind(str, Enum):
    """Kinds of declared types."""
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ANNOTATION = "annotation"


class ParameterDescriptor(BaseModel):
    """Parameter of a declared method."""
    name: str | None = None
    type: str
    annotations: list[str] = Field(default_factory=list)

    def has_annotation(self, annotation: str) -> bool:
        return any(simple_name(a) == annotation for a in self.annotations)


class MethodDescriptor(BaseModel):
    """Method declared directly on a type."""
    name: str
    parameters: list[ParameterDescriptor] = Field(default_factory=list)
    return_type: str = Field(alias="returnType", default="void")
    annotations: list[str] = Field(default_factory=list)
    modifiers: list[str] = Field(default_factory=lambda: ["public"])

    model_config = ConfigDict(populate_by_name=True)

    @property
    def annotation_names(self) -> set[str]:
        return {simple_name(a) for a in self.annotations}

    @property
    def is_public(self) -> bool:
        return "public" in self.modifiers

    @property
    def is_private(self) -> bool:
        return "private" in self.modifiers


class TypeDescriptor(BaseModel):
    """Descriptor of one declared type."""
    name: str
    kind: TypeKind = TypeKind.CLASS
    superclass: str | None = None
    modifiers: list[str] = Field(default_factory=lambda: ["public"])
    annotations: list[str] = Field(default_factory=list)
    methods: list[MethodDescriptor] = Field(default_factory=list)

    # Where the descriptor was read from, for diagnostics only
    source: str | None = Field(default=None, exclude=True)

    @property
    def is_abstract(self) -> bool:
        return "abstract" in self.modifiers

    @property
    def is_instantiable(self) -> bool:
        """Concrete classes only: no annotations, enums, interfaces or abstract types."""
        return self.kind == TypeKind.CLASS and not self.is_abstract

    @property
    def is_lra_annotated(self) -> bool:
        return any(simple_name(a) == LRA_TYPE_ANNOTATION for a in self.annotations)
