"""Employee management router — HR-only CRUD, soft delete/restore and bulk upload.

Every mutation redirects back to the list so the table is re-fetched.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import RedirectResponse, Response
from pydantic import ValidationError

from portal.api_client import LeaveApiClient
from portal.auth.dependencies import require_role
from portal.auth.session import PortalSession
from portal.common.constants import Role
from portal.common.exceptions import ApiResponseError, ApiUnavailableError
from portal.common.notices import flash
from portal.common.resource import Resource, load_resource
from portal.dependencies import get_api
from portal.employees.schemas import EmployeeCreate, EmployeeUpdate
from portal.employees.service import EmployeeService, search_employees
from portal.templating import render

router = APIRouter(prefix="/employees", tags=["employees"])

hr_only = require_role(Role.hr)

NO_FILE_MESSAGE = "Please select a file to upload."


def _errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "form"
        messages.append(f"{field}: {err.get('msg', 'Invalid value').removeprefix('Value error, ')}")
    return messages


def _render_form(
    request: Request,
    *,
    mode: str,
    values: dict[str, Any],
    errors: list[str],
    status_code: int = 200,
) -> Response:
    return render(
        request,
        "employees/form.html",
        {
            "mode": mode,
            "editing": mode == "edit",
            "values": values,
            "errors": errors,
            "roles": list(Role),
        },
        status_code=status_code,
    )


def _back_to_list(deleted: bool = False) -> RedirectResponse:
    return RedirectResponse("/employees?show=deleted" if deleted else "/employees", status_code=303)


# ── GET /employees ──────────────────────────────────────────────────

@router.get("")
async def list_employees(
    request: Request,
    q: Optional[str] = Query(None, max_length=200),
    show: Optional[str] = Query(None),
    session: PortalSession = Depends(hr_only),
    api: LeaveApiClient = Depends(get_api),
):
    """Active employees, or soft-deleted ones with ``?show=deleted``; ``q`` searches the snapshot."""
    show_deleted = show == "deleted"
    fetch = EmployeeService.list_deleted if show_deleted else EmployeeService.list_active
    employees = await load_resource(lambda: fetch(api))
    if employees.is_success:
        employees = Resource.ok(search_employees(employees.data or [], q))
    return render(
        request,
        "employees/list.html",
        {"employees": employees, "q": q or "", "show_deleted": show_deleted},
    )


# ── GET /employees/new ──────────────────────────────────────────────

@router.get("/new")
async def new_employee_form(
    request: Request,
    session: PortalSession = Depends(hr_only),
):
    return _render_form(request, mode="create", values={}, errors=[])


# ── POST /employees ─────────────────────────────────────────────────

@router.post("")
async def create_employee(
    request: Request,
    fullname: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    role: str = Form(""),
    managerEmail: str = Form(""),
    hrEmail: str = Form(""),
    directorEmail: str = Form(""),
    session: PortalSession = Depends(hr_only),
    api: LeaveApiClient = Depends(get_api),
):
    values = {
        "fullname": fullname, "email": email, "role": role,
        "managerEmail": managerEmail, "hrEmail": hrEmail, "directorEmail": directorEmail,
    }
    try:
        body = EmployeeCreate(
            fullname=fullname,
            email=email,
            password=password,
            role=role,
            manager_email=managerEmail,
            hr_email=hrEmail,
            director_email=directorEmail,
        )
    except ValidationError as exc:
        return _render_form(request, mode="create", values=values, errors=_errors(exc), status_code=422)

    try:
        await EmployeeService.create(api, body)
    except (ApiResponseError, ApiUnavailableError) as exc:
        return _render_form(
            request, mode="create", values=values,
            errors=[f"Failed: {exc.detail}"], status_code=exc.status_code,
        )

    flash(request, "Employee created successfully")
    return _back_to_list()


# ── POST /employees/bulk-upload ─────────────────────────────────────

@router.post("/bulk-upload")
async def bulk_upload_employees(
    request: Request,
    file: Optional[UploadFile] = File(None),
    session: PortalSession = Depends(hr_only),
    api: LeaveApiClient = Depends(get_api),
):
    """Forward the spreadsheet untouched; the API parses and validates rows."""
    if file is None or not file.filename:
        flash(request, NO_FILE_MESSAGE, "error")
        return _back_to_list()

    content = await file.read()
    try:
        result = await EmployeeService.bulk_upload(api, file.filename, content, file.content_type)
    except (ApiResponseError, ApiUnavailableError) as exc:
        flash(request, exc.detail, "error")
        return _back_to_list()

    noun = "employee" if result.added == 1 else "employees"
    flash(request, f"{result.added} {noun} added successfully")
    return _back_to_list()


# ── GET /employees/{id}/edit ────────────────────────────────────────

@router.get("/{employee_id}/edit")
async def edit_employee_form(
    request: Request,
    employee_id: str,
    session: PortalSession = Depends(hr_only),
    api: LeaveApiClient = Depends(get_api),
):
    employee = await EmployeeService.get_employee(api, employee_id)
    values = {
        "id": employee.id,
        "fullname": employee.fullname,
        "email": employee.email,
        "role": employee.role,
        "joinDate": employee.join_date.isoformat() if employee.join_date else "",
    }
    return _render_form(request, mode="edit", values=values, errors=[])


# ── POST /employees/{id} ────────────────────────────────────────────

@router.post("/{employee_id}")
async def update_employee(
    request: Request,
    employee_id: str,
    fullname: str = Form(""),
    email: str = Form(""),
    role: str = Form(""),
    joinDate: str = Form(""),
    session: PortalSession = Depends(hr_only),
    api: LeaveApiClient = Depends(get_api),
):
    values = {"id": employee_id, "fullname": fullname, "email": email, "role": role, "joinDate": joinDate}
    try:
        body = EmployeeUpdate(
            id=employee_id,
            fullname=fullname,
            email=email,
            role=role,
            join_date=joinDate or None,
        )
    except ValidationError as exc:
        return _render_form(request, mode="edit", values=values, errors=_errors(exc), status_code=422)

    try:
        await EmployeeService.update(api, body)
    except (ApiResponseError, ApiUnavailableError) as exc:
        return _render_form(
            request, mode="edit", values=values, errors=[exc.detail], status_code=exc.status_code,
        )

    flash(request, "Employee updated successfully")
    return _back_to_list()


# ── POST /employees/{id}/delete | /restore ──────────────────────────

@router.post("/{employee_id}/delete")
async def delete_employee(
    request: Request,
    employee_id: str,
    session: PortalSession = Depends(hr_only),
    api: LeaveApiClient = Depends(get_api),
):
    try:
        await EmployeeService.soft_delete(api, employee_id)
    except (ApiResponseError, ApiUnavailableError) as exc:
        flash(request, exc.detail, "error")
    else:
        flash(request, "Employee deleted successfully")
    return _back_to_list()


@router.post("/{employee_id}/restore")
async def restore_employee(
    request: Request,
    employee_id: str,
    session: PortalSession = Depends(hr_only),
    api: LeaveApiClient = Depends(get_api),
):
    try:
        await EmployeeService.restore(api, employee_id)
    except (ApiResponseError, ApiUnavailableError) as exc:
        flash(request, exc.detail, "error")
        return _back_to_list(deleted=True)
    flash(request, "Employee restored successfully")
    return _back_to_list()
