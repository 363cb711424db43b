"""Record Schemas — field constraints shared by create and update.

Invariants:
    - parse_record_input raises FieldValidationError naming the first bad field
    - Text is trimmed before length checks; blank required text is rejected
    - Unknown fields (owner, id) are rejected
    - Update schemas accept partial input but not explicit nulls for required fields
"""

from datetime import date, datetime
from uuid import uuid4

import pytest

from jobtracker.core.domain_types import ApplicationStatus
from jobtracker.core.errors import FieldValidationError
from jobtracker.schemas.records import (
    ApplicationCreate, ApplicationUpdate, TaskCreate, TaskUpdate,
    parse_record_input,
)


# --- ApplicationCreate --------------------------------------------------------

def test_application_create_defaults_status_to_applied():
    data = parse_record_input(ApplicationCreate, {"company": "Acme", "position": "Engineer"})
    assert data.status is ApplicationStatus.APPLIED
    assert data.notes is None


def test_application_create_trims_text():
    data = parse_record_input(
        ApplicationCreate, {"company": "  Acme ", "position": " Engineer"},
    )
    assert data.company == "Acme"
    assert data.position == "Engineer"


@pytest.mark.parametrize("company", ["", "   "])
def test_blank_company_is_rejected(company):
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(ApplicationCreate, {"company": company, "position": "Engineer"})
    assert exc.value.field == "company"
    assert exc.value.message == "Company name is required"


def test_first_violated_field_wins():
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(ApplicationCreate, {"company": "", "position": ""})
    assert exc.value.field == "company"


def test_company_length_boundary():
    parse_record_input(ApplicationCreate, {"company": "a" * 100, "position": "p"})
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(ApplicationCreate, {"company": "a" * 101, "position": "p"})
    assert exc.value.field == "company"
    assert exc.value.message == "Company name must be at most 100 characters"


def test_notes_length_boundary():
    parse_record_input(
        ApplicationCreate, {"company": "c", "position": "p", "notes": "n" * 1000},
    )
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(
            ApplicationCreate, {"company": "c", "position": "p", "notes": "n" * 1001},
        )
    assert exc.value.field == "notes"
    assert exc.value.message == "Notes must be at most 1000 characters"


def test_blank_notes_become_none():
    data = parse_record_input(
        ApplicationCreate, {"company": "c", "position": "p", "notes": "   "},
    )
    assert data.notes is None


def test_unknown_status_is_rejected():
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(
            ApplicationCreate, {"company": "c", "position": "p", "status": "ghosted"},
        )
    assert exc.value.field == "status"


def test_owner_cannot_be_supplied():
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(
            ApplicationCreate,
            {"company": "c", "position": "p", "user_id": str(uuid4())},
        )
    assert exc.value.field == "user_id"


# --- ApplicationUpdate --------------------------------------------------------

def test_application_update_only_reports_set_fields():
    data = parse_record_input(ApplicationUpdate, {"status": "offer"})
    assert data.model_dump(exclude_unset=True) == {"status": ApplicationStatus.OFFER}


@pytest.mark.parametrize("field", ["company", "position", "status"])
def test_application_update_rejects_explicit_null_for_required_fields(field):
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(ApplicationUpdate, {field: None})
    assert exc.value.field == field


def test_application_update_allows_clearing_notes():
    data = parse_record_input(ApplicationUpdate, {"notes": None})
    assert data.model_dump(exclude_unset=True) == {"notes": None}


def test_application_update_rejects_id_change():
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(ApplicationUpdate, {"id": str(uuid4())})
    assert exc.value.field == "id"


# --- Task ---------------------------------------------------------------------

def test_task_create_parses_iso_date():
    data = parse_record_input(TaskCreate, {
        "application_id": uuid4(), "title": "Follow up", "due_date": "2026-03-01",
    })
    assert data.due_date == date(2026, 3, 1)


def test_task_create_rejects_datetime_due_date():
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(TaskCreate, {
            "application_id": uuid4(), "title": "Call",
            "due_date": datetime(2026, 3, 1, 9, 30),
        })
    assert exc.value.field == "due_date"


def test_task_title_length_boundary():
    app_id = uuid4()
    parse_record_input(TaskCreate, {"application_id": app_id, "title": "t" * 200})
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(TaskCreate, {"application_id": app_id, "title": "t" * 201})
    assert exc.value.field == "title"


def test_task_create_requires_application():
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(TaskCreate, {"title": "Call"})
    assert exc.value.field == "application_id"


def test_task_update_allows_clearing_due_date():
    data = parse_record_input(TaskUpdate, {"due_date": None})
    assert data.model_dump(exclude_unset=True) == {"due_date": None}


@pytest.mark.parametrize("field", ["application_id", "title", "completed"])
def test_task_update_rejects_explicit_null_for_required_fields(field):
    with pytest.raises(FieldValidationError) as exc:
        parse_record_input(TaskUpdate, {field: None})
    assert exc.value.field == field
