"""Data models for lracheck."""

from .classmodel import (
    ClassModel,
    HttpVerb,
    MarkerKind,
    MethodModel,
    ParameterModel,
    ReturnCategory,
    TypeCategory,
    TypeRef,
)
from .descriptor import MethodDescriptor, ParameterDescriptor, TypeDescriptor, TypeKind

__all__ = [
    "ClassModel",
    "HttpVerb",
    "MarkerKind",
    "MethodModel",
    "ParameterModel",
    "ReturnCategory",
    "TypeCategory",
    "TypeRef",
    "MethodDescriptor",
    "ParameterDescriptor",
    "TypeDescriptor",
    "TypeKind",
]
