# Overview: Laboratory quality-control tests.

from __future__ import annotations

from ..extensions import db
from ..models import LabTest
from ..choices import LAB_RESULTS, ActivityType
from ..validation import ModelValidationPolicy, NotFoundError, clamp_limit, validate_payload
from . import activity_service

RESULT_FIELDS = ("microbiological_test", "chemical_test", "physical_test")

LAB_TEST_POLICY = ModelValidationPolicy(
    writable_fields={
        "batch_number",
        "sample_id",
        "test_date",
        "product_name",
        "ph_level",
        "tds_level",
        "chlorine_level",
        "turbidity",
        "conductivity",
        "temperature",
        "microbiological_test",
        "chemical_test",
        "physical_test",
        "notes",
    },
    required_on_create={"batch_number", "test_date", "product_name"},
    choices={field: LAB_RESULTS for field in RESULT_FIELDS},
)


def overall_status(results) -> str:
    """Fail if any Fail, else Pending if any Pending, else Pass."""
    results = list(results)
    if "Fail" in results:
        return "Fail"
    if "Pending" in results:
        return "Pending"
    return "Pass"


def create_lab_test(payload: dict, *, actor=None) -> LabTest:
    patch = validate_payload(model=LabTest, payload=payload, policy=LAB_TEST_POLICY, partial=False)
    for field in RESULT_FIELDS:
        patch.setdefault(field, "Pending")

    test = LabTest(**patch)
    test.overall_status = overall_status(patch[field] for field in RESULT_FIELDS)
    test.tested_by_user_id = actor.id if actor is not None else None
    test.tested_by = actor.username if actor is not None else None
    db.session.add(test)
    db.session.flush()

    activity_service.record_activity(
        actor,
        ActivityType.LAB_TEST,
        f"Lab test for batch {test.batch_number}: {test.overall_status}",
        {"lab_test_id": test.id},
    )
    db.session.commit()
    return test


def list_lab_tests(*, batch_number: str | None = None, status: str | None = None, limit=None) -> list[LabTest]:
    query = db.session.query(LabTest)
    if batch_number:
        query = query.filter(LabTest.batch_number == batch_number)
    if status:
        query = query.filter(LabTest.overall_status == status)
    return (
        query.order_by(LabTest.test_date.desc(), LabTest.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_lab_test(test_id: int) -> LabTest:
    test = db.session.get(LabTest, test_id)
    if test is None:
        raise NotFoundError("Lab test not found")
    return test
