"""
Error taxonomy tests
"""

from admissions_portal.core import errors

KINDS = [
    errors.DuplicateApplication,
    errors.QuotaExceeded,
    errors.IneligibleStudent,
    errors.InvalidTransition,
    errors.AcceptanceConflict,
    errors.NotFound,
    errors.NotAdmitted,
    errors.StoreUnavailable,
    errors.Unauthorized,
]


def test_every_kind_has_distinct_code_and_message():
    codes = {k.code for k in KINDS}
    messages = {k.default_message for k in KINDS}
    assert len(codes) == len(KINDS)
    assert len(messages) == len(KINDS)


def test_only_store_unavailable_is_retryable():
    assert [k for k in KINDS if k.retryable] == [errors.StoreUnavailable]


def test_error_str_and_payload():
    err = errors.QuotaExceeded("Too many")
    assert str(err) == "[QUOTA_EXCEEDED] Too many"
    assert err.to_dict() == {"error": "QUOTA_EXCEEDED", "detail": "Too many"}
    assert errors.NotFound().message == "Resource not found"


def test_context_is_included_when_present():
    err = errors.IneligibleStudent(context={"missing": ["High School Transcript or Certificate"]})
    assert err.to_dict() == {
        "error": "INELIGIBLE_STUDENT",
        "detail": "You do not meet the requirements for this course",
        "context": {"missing": ["High School Transcript or Certificate"]},
    }
