# =============================================================================
# Dashboard API Routes
# =============================================================================
#
# Endpoints:
#   POST /api/admin/register-employee - Admin creates a login + profile
#   GET  /api/team-members            - Every profile
#   POST /api/team-members            - Add a member (login created with it)
#   PUT  /api/team-members/{id}       - Edit a profile
#   GET  /api/tasks                   - Visible tasks
#   POST /api/tasks                   - Create a task
#   PUT  /api/tasks/{id}              - Edit a task
#   GET  /api/work-logs               - Visible work logs
#   POST /api/work-logs               - Log hours
#   GET  /api/analytics               - Dashboard figures
#
# =============================================================================

from __future__ import annotations

from fastapi import APIRouter, Depends

from qadash.auth.context import AuthContext
from qadash.auth.policies import require, require_admin, require_auth
from qadash.core.models import Availability, RequestModel, TaskPriority, TaskStatus
from qadash.services import Services, get_services

router = APIRouter(prefix="/api")


# =============================================================================
# Request Models
# =============================================================================


class ProfileFields(RequestModel):
    name: str | None = None
    email: str | None = None
    role: str | None = None
    availability: Availability | None = None
    phone: str | None = None
    emergency_contact: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    employee_id: str | None = None
    join_date: str | None = None
    department: str | None = None
    employment_type: str | None = None
    skills: str | None = None
    education: str | None = None
    experience: int | None = None
    certifications: str | None = None


class TeamMemberRequest(ProfileFields):
    team_id: int | None = None


class RegisterEmployeeRequest(ProfileFields):
    password: str | None = None
    position: str | None = None


class TaskRequest(RequestModel):
    title: str | None = None
    description: str | None = None
    assigned_to: int | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: str | None = None
    comments: str | None = None


class WorkLogRequest(RequestModel):
    member_id: int | None = None
    hours: float | None = None
    activity: str | None = None
    category: str | None = None
    date: str | None = None


# =============================================================================
# Admin
# =============================================================================


@router.post("/admin/register-employee", tags=["admin"])
async def register_employee(
    data: RegisterEmployeeRequest,
    ctx: AuthContext = Depends(require_admin("Only admins can register employees")),
    services: Services = Depends(get_services),
):
    user, member, tier = await services.directory.register_employee(ctx.user, data.changes())
    return {
        "success": True,
        "message": "Employee registered successfully",
        "employee": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "position": tier.value,
            "employeeId": member.employee_id,
        },
    }


# =============================================================================
# Team Members
# =============================================================================


@router.get("/team-members", tags=["team"])
async def list_team_members(
    ctx: AuthContext = Depends(require_auth()),
    services: Services = Depends(get_services),
):
    return [m.to_record() for m in await services.directory.list_members(ctx.user)]


@router.post("/team-members", tags=["team"])
async def create_team_member(
    data: TeamMemberRequest,
    ctx: AuthContext = Depends(require(lambda c: c.can_manage_team, "Insufficient permissions")),
    services: Services = Depends(get_services),
):
    member = await services.directory.create_member(ctx.user, data.changes())
    return member.to_record()


@router.put("/team-members/{member_id}", tags=["team"])
async def update_team_member(
    member_id: int,
    data: TeamMemberRequest,
    ctx: AuthContext = Depends(require_auth()),
    services: Services = Depends(get_services),
):
    member = await services.directory.update_member(ctx.user, member_id, data.changes())
    return member.to_record()


# =============================================================================
# Tasks
# =============================================================================


@router.get("/tasks", tags=["tasks"])
async def list_tasks(
    ctx: AuthContext = Depends(require_auth()),
    services: Services = Depends(get_services),
):
    return [t.to_record() for t in await services.tasks.list_tasks(ctx.user)]


@router.post("/tasks", tags=["tasks"])
async def create_task(
    data: TaskRequest,
    ctx: AuthContext = Depends(require(lambda c: c.can_assign_tasks, "Insufficient permissions")),
    services: Services = Depends(get_services),
):
    task = await services.tasks.create_task(ctx.user, data.changes())
    return task.to_record()


@router.put("/tasks/{task_id}", tags=["tasks"])
async def update_task(
    task_id: int,
    data: TaskRequest,
    ctx: AuthContext = Depends(require_auth()),
    services: Services = Depends(get_services),
):
    task = await services.tasks.update_task(ctx.user, task_id, data.changes())
    return task.to_record()


# =============================================================================
# Work Logs
# =============================================================================


@router.get("/work-logs", tags=["work-logs"])
async def list_work_logs(
    ctx: AuthContext = Depends(require_auth()),
    services: Services = Depends(get_services),
):
    return await services.work_logs.list_logs(ctx.user)


@router.post("/work-logs", tags=["work-logs"])
async def create_work_log(
    data: WorkLogRequest,
    ctx: AuthContext = Depends(require_auth()),
    services: Services = Depends(get_services),
):
    log = await services.work_logs.create_log(ctx.user, data.changes())
    return log.to_record()


# =============================================================================
# Analytics
# =============================================================================


@router.get("/analytics", tags=["analytics"])
async def analytics(
    ctx: AuthContext = Depends(require_auth()),
    services: Services = Depends(get_services),
):
    return await services.analytics.summary(ctx.user)
