"""
AuthGate Backend — Exception Hierarchy Tests
=============================================
"""

from authgate.exceptions import ConflictError, NotFoundError


def test_not_found_leaves_caller_context_untouched():
    shared = {"operation": "get_user"}

    exc = NotFoundError(resource="user", resource_id="42", context=shared)

    assert shared == {"operation": "get_user"}
    assert exc.context == {"operation": "get_user", "resource": "user", "resource_id": "42"}
    assert exc.status_code == 404


def test_conflict_names_the_field():
    exc = ConflictError(message="An account with this email already exists", field="email")

    assert [e.to_dict() for e in exc.errors] == [
        {"field": "email", "message": "An account with this email already exists"}
    ]
