"""Approval test suite — workflow gating, approver dashboards, decisions."""

from __future__ import annotations

import re

import pytest

from portal.approvals.workflow import actionable_for, can_act, next_approver
from portal.common.constants import ApprovalStatus, Role
from portal.leave.schemas import LeaveRequestOut
from tests.conftest import LEAVE_TYPES, make_leave_request, login_as


FORM_RE = re.compile(
    r'<form method="post" action="(?P<action>[^"]+)"[^>]*>(?P<body>.*?)</form>', re.S,
)
HIDDEN_RE = re.compile(r'<input type="hidden" name="(?P<name>[^"]+)" value="(?P<value>[^"]*)">')


def _posted_fields(html: str, action: str, label: str) -> dict[str, str]:
    """Hidden fields of the form at ``action`` whose submit button reads ``label``.

    Submit buttons are left out: the page disables them once a form is sent.
    """
    for match in FORM_RE.finditer(html):
        if match["action"] == action and f">{label}</button>" in match["body"]:
            return {m["name"]: m["value"] for m in HIDDEN_RE.finditer(match["body"])}
    raise AssertionError(f"no {label!r} form for {action}")


def _req(manager="Pending", hr="Pending", director="Pending", id=1) -> LeaveRequestOut:
    return LeaveRequestOut.model_validate(
        make_leave_request(id, manager=manager, hr=hr, director=director),
    )


# ═════════════════════════════════════════════════════════════════════
# Workflow (pure)
# ═════════════════════════════════════════════════════════════════════


class TestCanAct:

    @pytest.mark.parametrize(
        "manager, expected",
        [("Pending", True), ("Approved", False), ("Rejected", False)],
    )
    def test_manager_acts_only_while_pending(self, manager, expected):
        assert can_act(Role.manager, _req(manager=manager)) is expected

    @pytest.mark.parametrize(
        "manager, hr, expected",
        [
            ("Pending", "Pending", False),
            ("Approved", "Pending", True),
            ("Rejected", "Pending", True),
            ("NotRequired", "Pending", True),
            ("Approved", "Approved", False),
        ],
    )
    def test_hr_acts_after_manager_decided(self, manager, hr, expected):
        assert can_act(Role.hr, _req(manager=manager, hr=hr)) is expected

    @pytest.mark.parametrize(
        "hr, director, expected",
        [
            ("Approved", "Pending", True),
            ("Pending", "Pending", False),
            ("Rejected", "Pending", False),
            ("Approved", "Approved", False),
        ],
    )
    def test_director_acts_after_hr_approved(self, hr, director, expected):
        req = _req(manager="Approved", hr=hr, director=director)
        assert can_act(Role.director, req) is expected

    def test_employee_never_acts(self):
        assert can_act(Role.employee, _req()) is False

    def test_missing_approval_counts_as_pending(self):
        req = _req(manager=None)
        assert req.manager_approval is ApprovalStatus.pending
        assert can_act(Role.manager, req)


class TestQueueHelpers:

    def test_actionable_for_keeps_order(self):
        reqs = [
            _req(id=1, manager="Approved"),
            _req(id=2),
            _req(id=3, manager="Rejected"),
            _req(id=4),
        ]
        assert [r.id for r in actionable_for(Role.manager, reqs)] == ["2", "4"]

    def test_next_approver_follows_chain(self):
        assert next_approver(_req()) is Role.manager
        assert next_approver(_req(manager="Approved")) is Role.hr
        assert next_approver(_req(manager="Approved", hr="Approved")) is Role.director
        done = _req(manager="Approved", hr="Approved", director="Approved")
        assert next_approver(done) is None

    def test_hr_rejection_stops_chain(self):
        assert next_approver(_req(manager="Approved", hr="Rejected")) is None


# ═════════════════════════════════════════════════════════════════════
# Dashboards
# ═════════════════════════════════════════════════════════════════════


async def test_manager_dashboard_shows_only_pending_rows(client, fake_api):
    fake_api.on("GET", "/leaveRequests/approver", [
        make_leave_request(1, fullname="Asha Rao", manager="Pending"),
        make_leave_request(2, fullname="Vikram Shah", manager="Approved"),
    ])
    login_as(client, Role.manager)

    resp = await client.get("/")
    assert resp.status_code == 200
    assert 'action="/approvals/1"' in resp.text
    assert 'action="/approvals/2"' not in resp.text
    assert "Vikram Shah" not in resp.text


async def test_hr_dashboard_gating_and_embedded_employee_section(client, fake_api):
    fake_api.on("GET", "/leaveTypes", LEAVE_TYPES)
    fake_api.on("GET", "/leaveRequests/approver", [
        make_leave_request(1, manager="Pending", hr="Pending"),
        make_leave_request(2, manager="Approved", hr="Pending", hr_key="hr_approval"),
        make_leave_request(3, manager="Approved", hr="Approved"),
    ])
    login_as(client, Role.hr)

    resp = await client.get("/")
    assert "HR Dashboard" in resp.text
    assert 'action="/approvals/2"' in resp.text
    assert 'action="/approvals/1"' not in resp.text
    assert 'action="/approvals/3"' not in resp.text
    assert 'action="/leave-requests"' in resp.text


async def test_director_dashboard_gating(client, fake_api):
    fake_api.on("GET", "/leaveRequests/approver", [
        make_leave_request(1, manager="Approved", hr="Approved", director="Pending"),
        make_leave_request(2, manager="Approved", hr="Pending", director="Pending"),
        make_leave_request(3, manager="Approved", hr="Rejected", director="Pending"),
    ])
    login_as(client, Role.director)

    resp = await client.get("/")
    assert 'action="/approvals/1"' in resp.text
    assert 'action="/approvals/2"' not in resp.text
    assert 'action="/approvals/3"' not in resp.text


async def test_empty_queue_message(client, fake_api):
    fake_api.on("GET", "/leaveRequests/approver", [
        make_leave_request(1, manager="Approved"),
    ])
    login_as(client, Role.manager)
    resp = await client.get("/")
    assert "No leave requests awaiting your approval." in resp.text


async def test_queue_fetch_error_shown_inline(client, fake_api):
    fake_api.on("GET", "/leaveRequests/approver", {"error": "Database down"}, status=500)
    login_as(client, Role.manager)
    resp = await client.get("/")
    assert resp.status_code == 200
    assert "Database down" in resp.text


# ═════════════════════════════════════════════════════════════════════
# POST /approvals/{id}
# ═════════════════════════════════════════════════════════════════════


async def test_manager_approve_sends_patch_and_refetches(client, fake_api):
    """Approve → PATCH {id: "Manager", approved: true}, then the list is re-fetched."""
    fake_api.on("GET", "/leaveRequests/approver", [make_leave_request(7)])
    fake_api.on("PATCH", "/leaveRequest/7", {"message": "Updated"})
    login_as(client, Role.manager)

    await client.get("/")
    resp = await client.post(
        "/approvals/7", data={"decision": "approve"}, follow_redirects=True,
    )
    assert resp.status_code == 200
    patch = fake_api.calls("PATCH", "/leaveRequest/7")
    assert len(patch) == 1
    assert fake_api.json_of(patch[0]) == {"id": "Manager", "approved": True}
    assert len(fake_api.calls("GET", "/leaveRequests/approver")) == 2
    assert "Leave request approved successfully" in resp.text


@pytest.mark.parametrize(
    "role, approver_id",
    [(Role.hr, "Hr"), (Role.director, "Director")],
)
async def test_reject_uses_session_role_as_approver(client, fake_api, role, approver_id):
    fake_api.on("GET", "/leaveTypes", LEAVE_TYPES)
    fake_api.on("GET", "/leaveRequests/approver", [])
    fake_api.on("PATCH", "/leaveRequest/9", {"message": "Updated"})
    login_as(client, role)

    resp = await client.post(
        "/approvals/9", data={"decision": "reject"}, follow_redirects=True,
    )
    sent = fake_api.json_of(fake_api.calls("PATCH", "/leaveRequest/9")[0])
    assert sent == {"id": approver_id, "approved": False}
    assert "Leave request rejected successfully" in resp.text


async def test_decision_failure_flashes_server_error(client, fake_api):
    fake_api.on("GET", "/leaveRequests/approver", [make_leave_request(7)])
    fake_api.on("PATCH", "/leaveRequest/7", {"message": "Request already decided"}, status=409)
    login_as(client, Role.manager)

    resp = await client.post(
        "/approvals/7", data={"decision": "approve"}, follow_redirects=True,
    )
    assert "Request already decided" in resp.text


async def test_employee_cannot_decide(client, fake_api):
    login_as(client, Role.employee)
    resp = await client.post("/approvals/7", data={"decision": "approve"})
    assert resp.status_code == 403
    assert fake_api.calls("PATCH", "/leaveRequest/7") == []


async def test_unknown_decision_rejected(client, fake_api):
    login_as(client, Role.manager)
    resp = await client.post("/approvals/7", data={"decision": "maybe"})
    assert resp.status_code == 422
    assert resp.headers["content-type"].startswith("text/html")
    assert fake_api.calls("PATCH", "/leaveRequest/7") == []


@pytest.mark.parametrize(
    "label, approved, verb",
    [("Approve", True, "approved"), ("Reject", False, "rejected")],
)
async def test_rendered_decision_form_sends_patch(client, fake_api, label, approved, verb):
    """Posting exactly the fields a rendered row form carries reaches the API."""
    fake_api.on("GET", "/leaveRequests/approver", [make_leave_request(7)])
    fake_api.on("PATCH", "/leaveRequest/7", {"message": "Updated"})
    login_as(client, Role.manager)

    page = await client.get("/")
    fields = _posted_fields(page.text, "/approvals/7", label)
    assert fields == {"decision": label.lower()}

    resp = await client.post("/approvals/7", data=fields, follow_redirects=True)
    assert resp.status_code == 200
    patch = fake_api.calls("PATCH", "/leaveRequest/7")
    assert len(patch) == 1
    assert fake_api.json_of(patch[0]) == {"id": "Manager", "approved": approved}
    assert f"Leave request {verb} successfully" in resp.text


async def test_missing_decision_renders_error_page_for_browsers(client, fake_api):
    login_as(client, Role.manager)
    resp = await client.post("/approvals/7", data={}, headers={"accept": "text/html"})
    assert resp.status_code == 422
    assert resp.headers["content-type"].startswith("text/html")
    assert "Validation Error" in resp.text
    assert "decision" in resp.text
    assert fake_api.calls("PATCH", "/leaveRequest/7") == []


async def test_missing_decision_is_problem_json_for_json_callers(client, fake_api):
    login_as(client, Role.manager)
    resp = await client.post(
        "/approvals/7", data={}, headers={"accept": "application/json"},
    )
    assert resp.status_code == 422
    assert resp.headers["content-type"] == "application/problem+json"
    assert "decision" in resp.json()["errors"]
    assert fake_api.calls("PATCH", "/leaveRequest/7") == []


async def test_queue_row_with_null_reason_is_still_listed(client, fake_api):
    fake_api.on("GET", "/leaveRequests/approver", [
        make_leave_request(1, fullname="Asha Rao"),
        make_leave_request(2, fullname="Vikram Shah", reason=None),
    ])
    login_as(client, Role.manager)

    resp = await client.get("/")
    assert 'action="/approvals/1"' in resp.text
    assert 'action="/approvals/2"' in resp.text
    assert "Vikram Shah" in resp.text
    assert "could not read" not in resp.text


async def test_queue_shows_approval_stages(client, fake_api):
    fake_api.on("GET", "/leaveTypes", LEAVE_TYPES)
    fake_api.on("GET", "/leaveRequests/approver", [
        make_leave_request(2, manager="Rejected", hr="Pending"),
    ])
    fake_api.on("GET", "/leaveRequests", [])
    login_as(client, Role.hr)

    resp = await client.get("/")
    assert "<td>Rejected</td>" in resp.text
    assert "<th>Awaiting</th>" not in resp.text
