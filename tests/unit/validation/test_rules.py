"""Tests for LRA annotation rules."""

import pytest

from factories import LRA_STATUS, SUSPENDED, URI, method, participant, resource
from lracheck.models.classmodel import HttpVerb, MarkerKind, ParameterModel, ReturnCategory, TypeCategory
from lracheck.validation.findings import ErrorCode
from lracheck.validation.metadata import AnnotationMetadata
from lracheck.validation.rules import (
    AsyncHandlingRule,
    CallbackCardinalityRule,
    ComplementaryAttributesRule,
    ConflictingMarkersRule,
    PlainSignatureRule,
    TerminationCallbackRule,
)


def run(rule, model):
    return rule.check(model, AnnotationMetadata.load(model))


class TestTerminationCallbackRule:
    """Test the Compensate/AfterLRA presence rule."""

    def test_missing_termination_callback(self):
        findings = run(TerminationCallbackRule(), participant(method("complete", MarkerKind.COMPLETE)))

        assert len(findings) == 1
        assert findings[0].code == ErrorCode.MISSING_TERMINATION_CALLBACK
        assert "com.example.OrderParticipant" in findings[0].message

    def test_compensate_satisfies_rule(self, minimal_participant):
        assert run(TerminationCallbackRule(), minimal_participant) == []

    def test_after_lra_satisfies_rule(self):
        model = participant(method("afterLra", MarkerKind.AFTER_LRA, params=(URI, LRA_STATUS)))
        assert run(TerminationCallbackRule(), model) == []

    def test_class_without_methods(self):
        findings = run(TerminationCallbackRule(), participant())
        assert [f.code for f in findings] == [ErrorCode.MISSING_TERMINATION_CALLBACK]


class TestCallbackCardinalityRule:
    """Test the one-method-per-marker rule."""

    def test_duplicate_marker_lists_both_methods(self):
        model = participant(
            method("compensate", MarkerKind.COMPENSATE),
            method("compensateAgain", MarkerKind.COMPENSATE),
        )

        findings = run(CallbackCardinalityRule(), model)

        assert len(findings) == 1
        assert findings[0].code == ErrorCode.DUPLICATE_MARKER
        assert "'Compensate'" in findings[0].message
        assert "compensate" in findings[0].message
        assert "compensateAgain" in findings[0].message

    @pytest.mark.parametrize("kind", [MarkerKind.STATUS, MarkerKind.LEAVE])
    def test_status_and_leave_are_limited_too(self, kind):
        model = participant(method("first", kind), method("second", kind))

        findings = run(CallbackCardinalityRule(), model)

        assert [f.code for f in findings] == [ErrorCode.DUPLICATE_MARKER]

    def test_one_finding_per_duplicated_kind(self):
        model = participant(
            method("a", MarkerKind.COMPLETE),
            method("b", MarkerKind.COMPLETE),
            method("c", MarkerKind.FORGET),
            method("d", MarkerKind.FORGET),
        )

        assert len(run(CallbackCardinalityRule(), model)) == 2

    def test_single_methods_pass(self):
        model = participant(method("compensate", MarkerKind.COMPENSATE), method("complete", MarkerKind.COMPLETE))
        assert run(CallbackCardinalityRule(), model) == []


class TestConflictingMarkersRule:
    """Test the one-role-per-method rule."""

    def test_two_markers_on_one_method(self):
        model = participant(method("finish", MarkerKind.COMPENSATE, MarkerKind.COMPLETE))

        findings = run(ConflictingMarkersRule(), model)

        assert len(findings) == 1
        assert findings[0].code == ErrorCode.CONFLICTING_MARKERS
        assert "'Compensate'" in findings[0].message
        assert "'Complete'" in findings[0].message
        assert findings[0].method_name == "finish"

    def test_symmetric_in_marker_order(self):
        forward = participant(method("finish", MarkerKind.STATUS, MarkerKind.FORGET))
        backward = participant(method("finish", MarkerKind.FORGET, MarkerKind.STATUS))

        assert run(ConflictingMarkersRule(), forward) == run(ConflictingMarkersRule(), backward)

    def test_three_markers_give_one_finding_per_pair(self):
        model = participant(method("all", MarkerKind.COMPENSATE, MarkerKind.COMPLETE, MarkerKind.LEAVE))
        assert len(run(ConflictingMarkersRule(), model)) == 3

    def test_single_marker_methods_pass(self, minimal_participant):
        assert run(ConflictingMarkersRule(), minimal_participant) == []


class TestPlainSignatureRule:
    """Test plain callback signature checks."""

    def test_valid_plain_callbacks(self):
        model = participant(
            method("compensate", MarkerKind.COMPENSATE),
            method("complete", MarkerKind.COMPLETE, returns=ReturnCategory.ASYNC_HANDLE),
            method("status", MarkerKind.STATUS, returns=ReturnCategory.PARTICIPANT_STATUS),
            method("forget", MarkerKind.FORGET, returns=ReturnCategory.HTTP_RESPONSE),
            method("afterLra", MarkerKind.AFTER_LRA, params=(URI, LRA_STATUS)),
            method("leave", MarkerKind.LEAVE),
        )
        assert run(PlainSignatureRule(), model) == []

    def test_leading_parameter_only_allowed(self):
        model = participant(method("compensate", MarkerKind.COMPENSATE, params=(URI,)))
        assert run(PlainSignatureRule(), model) == []

    def test_no_parameters_rejected(self):
        model = participant(method("compensate", MarkerKind.COMPENSATE, params=()))

        findings = run(PlainSignatureRule(), model)

        assert [f.code for f in findings] == [ErrorCode.WRONG_PLAIN_SIGNATURE]
        assert "declares no parameters" in findings[0].message

    def test_non_public_method(self):
        model = participant(method("compensate", MarkerKind.COMPENSATE, public=False))

        findings = run(PlainSignatureRule(), model)

        assert [f.code for f in findings] == [ErrorCode.WRONG_PLAIN_SIGNATURE]
        assert "not public" in findings[0].message

    def test_too_many_parameters(self):
        model = participant(method("compensate", MarkerKind.COMPENSATE, params=(URI, URI, URI)))
        assert [f.code for f in run(PlainSignatureRule(), model)] == [ErrorCode.WRONG_PLAIN_SIGNATURE]

    def test_wrong_parameter_type(self):
        other = ParameterModel(TypeCategory.OTHER, type_name="java.lang.String")
        model = participant(method("complete", MarkerKind.COMPLETE, params=(other, URI)))

        findings = run(PlainSignatureRule(), model)

        assert len(findings) == 1
        assert "java.lang.String" in findings[0].message

    def test_after_lra_expects_lra_status(self):
        model = participant(method("afterLra", MarkerKind.AFTER_LRA, params=(URI, URI)))

        findings = run(PlainSignatureRule(), model)

        assert len(findings) == 1
        assert "public void/CompletionStage/ParticipantStatus/Response afterlra(URI lraId, LRAStatus status)" \
            in findings[0].message

    def test_wrong_return_type(self):
        model = participant(method("forget", MarkerKind.FORGET, returns=ReturnCategory.OTHER))
        assert [f.code for f in run(PlainSignatureRule(), model)] == [ErrorCode.WRONG_PLAIN_SIGNATURE]

    def test_leave_plain_signature_checked(self):
        model = participant(method("leave", MarkerKind.LEAVE, params=(LRA_STATUS,)))
        assert [f.code for f in run(PlainSignatureRule(), model)] == [ErrorCode.WRONG_PLAIN_SIGNATURE]

    def test_resource_methods_not_signature_checked(self):
        model = participant(resource("compensate", MarkerKind.COMPENSATE, params=(URI, URI, URI),
                                     returns=ReturnCategory.OTHER))
        assert run(PlainSignatureRule(), model) == []


class TestComplementaryAttributesRule:
    """Test HTTP attribute requirements for resource callbacks."""

    def test_compensate_without_put(self):
        model = participant(resource("compensate", MarkerKind.COMPENSATE, verbs=()))

        findings = run(ComplementaryAttributesRule(), model)

        assert len(findings) == 1
        assert findings[0].code == ErrorCode.MISSING_COMPLEMENTARY_ATTRIBUTE
        assert "'PUT'" in findings[0].message

    def test_status_requires_get(self):
        model = participant(resource("status", MarkerKind.STATUS, verbs=(HttpVerb.PUT,)))

        findings = run(ComplementaryAttributesRule(), model)

        assert len(findings) == 1
        assert "'GET'" in findings[0].message

    def test_forget_requires_delete(self):
        model = participant(resource("forget", MarkerKind.FORGET, verbs=(HttpVerb.GET,)))
        assert "'DELETE'" in run(ComplementaryAttributesRule(), model)[0].message

    @pytest.mark.parametrize("kind,verb", [
        (MarkerKind.COMPENSATE, HttpVerb.PUT),
        (MarkerKind.COMPLETE, HttpVerb.PUT),
        (MarkerKind.AFTER_LRA, HttpVerb.PUT),
        (MarkerKind.STATUS, HttpVerb.GET),
        (MarkerKind.LEAVE, HttpVerb.PUT),
        (MarkerKind.FORGET, HttpVerb.DELETE),
    ])
    def test_complete_resource_methods_pass(self, kind, verb):
        model = participant(resource("callback", kind, verbs=(verb,)))
        assert run(ComplementaryAttributesRule(), model) == []

    def test_only_first_resource_method_checked(self):
        model = participant(
            resource("first", MarkerKind.COMPLETE, verbs=(HttpVerb.PUT,)),
            resource("second", MarkerKind.COMPLETE, verbs=()),
        )
        assert run(ComplementaryAttributesRule(), model) == []

    def test_plain_methods_ignored(self, minimal_participant):
        assert run(ComplementaryAttributesRule(), minimal_participant) == []


class TestAsyncHandlingRule:
    """Test asynchronous completion requirements."""

    def test_suspended_complete_without_status_and_forget(self):
        model = participant(resource("complete", MarkerKind.COMPLETE, params=(SUSPENDED,)))

        findings = run(AsyncHandlingRule(), model)

        assert len(findings) == 1
        assert findings[0].code == ErrorCode.INCOMPLETE_ASYNC_HANDLING
        assert findings[0].method_name == "complete"

    def test_status_and_forget_satisfy_rule(self):
        model = participant(
            resource("complete", MarkerKind.COMPLETE, params=(SUSPENDED,)),
            method("status", MarkerKind.STATUS),
            method("forget", MarkerKind.FORGET),
        )
        assert run(AsyncHandlingRule(), model) == []

    def test_status_alone_is_not_enough(self):
        model = participant(
            resource("compensate", MarkerKind.COMPENSATE, params=(SUSPENDED,)),
            method("status", MarkerKind.STATUS),
        )
        assert [f.code for f in run(AsyncHandlingRule(), model)] == [ErrorCode.INCOMPLETE_ASYNC_HANDLING]

    def test_compensate_and_complete_both_reported(self):
        model = participant(
            resource("compensate", MarkerKind.COMPENSATE, params=(SUSPENDED,)),
            resource("complete", MarkerKind.COMPLETE, params=(SUSPENDED,)),
        )
        assert len(run(AsyncHandlingRule(), model)) == 2

    def test_synchronous_resource_method_passes(self):
        model = participant(resource("complete", MarkerKind.COMPLETE, params=(URI,)))
        assert run(AsyncHandlingRule(), model) == []

    def test_suspended_plain_method_ignored(self):
        model = participant(method("complete", MarkerKind.COMPLETE, params=(SUSPENDED,)))
        assert run(AsyncHandlingRule(), model) == []
