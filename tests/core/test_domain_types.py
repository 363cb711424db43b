"""Domain Types — verifies identity wrappers and enum values."""

from uuid import uuid4

from jobtracker.core.domain_types import (
    ApplicationId, ApplicationStatus, AuthSessionId, AuthState, TaskId, UserId,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert UserId(uid) == uid
    assert ApplicationId(uid) == uid
    assert TaskId(uid) == uid
    assert AuthSessionId(uid) == uid


def test_application_status_is_the_fixed_enum():
    assert [s.value for s in ApplicationStatus] == [
        "applied", "interview", "offer", "rejected",
    ]


def test_auth_state_has_three_states():
    assert set(AuthState) == {
        AuthState.LOADING, AuthState.ANONYMOUS, AuthState.AUTHENTICATED,
    }


def test_str_enums_compare_to_raw_values():
    assert ApplicationStatus.INTERVIEW == "interview"
    assert ApplicationStatus("offer") is ApplicationStatus.OFFER
