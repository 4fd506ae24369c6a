"""Expected shapes of LRA callback methods.

Plain callbacks (no path attribute) are invoked programmatically and must
follow a fixed signature. Resource callbacks are HTTP endpoints and instead
need complementary HTTP attributes.
"""

from dataclasses import dataclass

from lracheck.constants import PATH_ANNOTATION
from lracheck.models.classmodel import HttpVerb, MarkerKind, MethodModel, ReturnCategory, TypeCategory

CALLBACK_RETURN_CATEGORIES: frozenset[ReturnCategory] = frozenset({
    ReturnCategory.VOID,
    ReturnCategory.ASYNC_HANDLE,
    ReturnCategory.PARTICIPANT_STATUS,
    ReturnCategory.HTTP_RESPONSE,
})

_PARAMETER_NAMES = {
    TypeCategory.URI: "URI",
    TypeCategory.LRA_STATUS: "LRAStatus",
}


@dataclass(frozen=True)
class CallbackShape:
    """Expected plain-method signature for one marker kind."""
    parameters: tuple[TypeCategory, ...]
    parameter_names: tuple[str, ...]
    returns: frozenset[ReturnCategory] = CALLBACK_RETURN_CATEGORIES

    def describe(self, kind: MarkerKind) -> str:
        """Human-readable signature, e.g. ``public void/... compensate(URI lraId, URI parentId)``."""
        returns = "/".join(r.value for r in ReturnCategory if r in self.returns)
        params = ", ".join(
            f"{_PARAMETER_NAMES.get(category, category.value)} {name}"
            for category, name in zip(self.parameters, self.parameter_names)
        )
        return f"public {returns} {kind.value.lower()}({params})"

    def mismatch(self, method: MethodModel) -> str | None:
        """Reason the method does not fit the shape, or None when it fits."""
        if not method.is_public:
            return "method is not public"
        if len(method.parameters) > len(self.parameters):
            return f"declares {len(method.parameters)} parameters, at most {len(self.parameters)} expected"
        if self.parameters and not method.parameters:
            return "declares no parameters, at least the LRA id is expected"
        # A shorter prefix is fine, declared parameters must match position by position
        for position, (parameter, expected) in enumerate(zip(method.parameters, self.parameters)):
            if parameter.type_category != expected:
                return f"parameter {position} is {parameter.display_type}, expected {_PARAMETER_NAMES[expected]}"
        if method.return_category not in self.returns:
            return f"return type {method.return_category.value} is not permitted"
        return None


_URI_URI = CallbackShape((TypeCategory.URI, TypeCategory.URI), ("lraId", "parentId"))

PLAIN_CALLBACK_SHAPES: dict[MarkerKind, CallbackShape] = {
    MarkerKind.COMPENSATE: _URI_URI,
    MarkerKind.COMPLETE: _URI_URI,
    MarkerKind.FORGET: _URI_URI,
    MarkerKind.STATUS: _URI_URI,
    MarkerKind.AFTER_LRA: CallbackShape((TypeCategory.URI, TypeCategory.LRA_STATUS), ("lraId", "status")),
    MarkerKind.LEAVE: _URI_URI,
}

# Attributes a resource callback must carry, in reporting order
COMPLEMENTARY_ATTRIBUTES: dict[MarkerKind, tuple[str, ...]] = {
    MarkerKind.COMPENSATE: (PATH_ANNOTATION, HttpVerb.PUT.value),
    MarkerKind.COMPLETE: (PATH_ANNOTATION, HttpVerb.PUT.value),
    MarkerKind.AFTER_LRA: (PATH_ANNOTATION, HttpVerb.PUT.value),
    MarkerKind.STATUS: (PATH_ANNOTATION, HttpVerb.GET.value),
    MarkerKind.LEAVE: (HttpVerb.PUT.value,),
    MarkerKind.FORGET: (HttpVerb.DELETE.value,),
}

# Resource callbacks that may complete asynchronously through a suspended parameter
ASYNC_CAPABLE_KINDS: tuple[MarkerKind, ...] = (MarkerKind.COMPENSATE, MarkerKind.COMPLETE)

# Callbacks an asynchronous participant needs to report and release its outcome
ASYNC_SUPPORT_KINDS: tuple[MarkerKind, ...] = (MarkerKind.STATUS, MarkerKind.FORGET)


def carries_attribute(method: MethodModel, attribute: str) -> bool:
    if attribute == PATH_ANNOTATION:
        return method.has_path_attribute
    return method.has_verb(HttpVerb(attribute))
