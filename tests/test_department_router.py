"""Tests for department routing."""

import pytest

from civic_triage.core.errors import RoutingFailure
from civic_triage.services.activity_logger import ActivityLogger
from civic_triage.services.department_router import DepartmentRouter


@pytest.fixture
def router(store):
    return DepartmentRouter(store, ActivityLogger(store))


@pytest.mark.parametrize("category,department", [
    ("Infrastructure", "public_works"),
    ("Utilities", "utilities_dept"),
    ("Sanitation", "sanitation_dept"),
    ("Traffic", "traffic_dept"),
    ("Safety", "police_dept"),
    ("Other", "general_admin"),
    ("Parks", "general_admin"),
    (None, "general_admin"),
    ("", "general_admin"),
])
def test_department_mapping_is_total(category, department):
    assert DepartmentRouter.department_for(category) == department


def test_assign_persists_and_logs(router, store):
    store.set_report("r1", {"title": "Broken signal", "category": "Traffic"})

    assignment = router.assign("r1", "Traffic")

    assert assignment.department == "traffic_dept"
    report = store.get_report("r1")
    assert report["assigned_department"] == "traffic_dept"
    assert report["assigned_at"] is not None

    logs = store.logs_for("r1")
    assert [entry["action"] for entry in logs] == ["assigned"]
    assert logs[0]["metadata"] == {"message": "Report assigned to traffic_dept", "department": "traffic_dept"}
    assert logs[0]["created_by"] == "system"


def test_store_fault_is_routing_failure(router, store):
    with pytest.raises(RoutingFailure) as exc_info:
        router.assign("missing", "Safety")
    assert exc_info.value.code == "routing_failure"
    assert store.logs_for("missing") == []


def test_assigned_at_is_the_returned_timestamp(store, clock):
    router = DepartmentRouter(store, ActivityLogger(store), clock=clock)
    store.set_report("r2", {"title": "Overflowing bin", "category": "Sanitation"})

    assignment = router.assign("r2", "Sanitation")

    assert assignment.assigned_at == clock.now
    assert store.get_report("r2")["assigned_at"] == assignment.assigned_at
