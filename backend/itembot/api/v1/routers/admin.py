# itembot/api/v1/routers/admin.py
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status

from itembot.api.v1.deps import get_store_dep, require_admin, user_to_dict
from itembot.core.activity import get_activity_logs
from itembot.core.db import Store
from itembot.core.notifications import clear_admin_notifications, get_admin_notification_counts
from itembot.repositories import content
from itembot.repositories.users import add_user, delete_user, get_all_users, get_user_by_id
from itembot.schemas.admin import AddUserIn, BroadcastIn, ContentIn, ScenarioIn

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _require_user(store: Store, user_id: int):
    user = get_user_by_id(store, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="NOT_FOUND")
    return user


# ==============================================================================
# I. User Management
#     Prefix: /api/v1/admin/users
# ==============================================================================
@router.get("/users")
def list_users(store: Store = Depends(get_store_dep)):
    """
    List every non-admin user (admin only).

    Returns:
        dict: {"success": True, "data": {"items": [...], "total": n}}
    """
    items = [user_to_dict(u) for u in get_all_users(store)]
    return {"success": True, "data": {"items": items, "total": len(items)}}


@router.get("/users/{user_id}")
def get_user_detail(user_id: int, store: Store = Depends(get_store_dep)):
    user = _require_user(store, user_id)
    return {"success": True, "data": {"user": user_to_dict(user), "accessCode": user.access_code}}


@router.post("/users")
def create_user(body: AddUserIn, store: Store = Depends(get_store_dep)):
    """
    Create a verified user with an access code.

    A duplicate access code is not an HTTP error: the structured result is
    returned with success=False and a message for the operator.
    """
    result = add_user(store, body.fullName, body.accessCode)
    return result.model_dump()


@router.delete("/users/{user_id}")
def remove_user(user_id: int, store: Store = Depends(get_store_dep)):
    """
    Delete a user and all of their records (cascade).

    The admin account itself cannot be deleted.
    """
    if not delete_user(store, user_id):
        return {"success": False, "error": {"code": "NOT_DELETED", "message": "User not found or protected"}}
    return {"success": True, "data": {"ok": True}}


# ==============================================================================
# II. Per-user content publishing
# ==============================================================================
@router.post("/users/{user_id}/scenarios")
def add_scenario(user_id: int, body: ScenarioIn, store: Store = Depends(get_store_dep)):
    _require_user(store, user_id)
    scenario = content.add_scenario_for_user(store, user_id, body.scenarioNumber, body.content)
    return {"success": True, "data": scenario.model_dump(mode="json")}


@router.put("/users/{user_id}/plan")
def save_plan(user_id: int, body: ContentIn, store: Store = Depends(get_store_dep)):
    _require_user(store, user_id)
    plan = content.save_plan_for_user(store, user_id, body.content)
    return {"success": True, "data": plan.model_dump(mode="json")}


@router.delete("/users/{user_id}/plan")
def delete_plan(user_id: int, store: Store = Depends(get_store_dep)):
    content.delete_plan_for_user(store, user_id)
    return {"success": True, "data": {"ok": True}}


@router.post("/users/{user_id}/reports")
def add_report(user_id: int, body: ContentIn, store: Store = Depends(get_store_dep)):
    _require_user(store, user_id)
    report = content.add_report_for_user(store, user_id, body.content)
    return {"success": True, "data": report.model_dump(mode="json")}


@router.delete("/users/{user_id}/reports")
def delete_reports(user_id: int, store: Store = Depends(get_store_dep)):
    content.delete_reports_for_user(store, user_id)
    return {"success": True, "data": {"ok": True}}


# ==============================================================================
# III. Ideas, broadcasts, activity
# ==============================================================================
@router.get("/ideas")
def list_ideas(store: Store = Depends(get_store_dep)):
    items = [i.model_dump(mode="json") for i in content.get_all_ideas(store)]
    return {"success": True, "data": {"items": items, "total": len(items)}}


@router.delete("/ideas/{idea_id}")
def remove_idea(idea_id: int, store: Store = Depends(get_store_dep)):
    content.delete_idea(store, idea_id)
    return {"success": True, "data": {"ok": True}}


@router.post("/broadcasts")
def create_broadcast(body: BroadcastIn, store: Store = Depends(get_store_dep)):
    broadcast = content.add_broadcast(store, body.message)
    return {"success": True, "data": broadcast.model_dump(mode="json")}


@router.get("/activity-logs")
def list_activity_logs(store: Store = Depends(get_store_dep)):
    """Activity log, newest first (at most 100 entries)."""
    items = [e.model_dump(mode="json") for e in get_activity_logs(store)]
    return {"success": True, "data": {"items": items, "total": len(items)}}


@router.get("/notifications")
def admin_notifications(store: Store = Depends(get_store_dep)):
    return {"success": True, "data": get_admin_notification_counts(store)}


@router.post("/notifications/{section}/clear")
def clear_notifications(section: Literal["ideas", "logs"], store: Store = Depends(get_store_dep)):
    clear_admin_notifications(store, section)
    return {"success": True, "data": get_admin_notification_counts(store)}
