# itembot/api/v1/routers/content.py
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status

from itembot.api.v1.deps import get_current_user, get_store_dep
from itembot.core.db import Store
from itembot.core.notifications import clear_user_notifications, get_notification_counts
from itembot.core.usage import get_usage
from itembot.models import User
from itembot.repositories import content, history
from itembot.schemas.content import IdeaIn

router = APIRouter(tags=["content"])


def _dump(records) -> list:
    return [r.model_dump(mode="json") for r in records]


# ===== Scenarios / plan / reports / captions =====
@router.get("/me/scenarios")
def list_scenarios(user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    """Outstanding scenarios, ascending by scenario number."""
    return {"success": True, "data": {"items": _dump(content.get_scenarios_for_user(store, user.user_id))}}


@router.get("/me/scenarios/{scenario_id}")
def get_scenario(scenario_id: int, user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    scenario = content.get_scenario_by_id(store, scenario_id)
    if scenario is None or scenario.user_id != user.user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="NOT_FOUND")
    return {"success": True, "data": scenario.model_dump(mode="json")}


@router.get("/me/plan")
def get_plan(user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    plan = content.get_plan_for_user(store, user.user_id)
    return {"success": True, "data": plan.model_dump(mode="json") if plan else None}


@router.get("/me/reports")
def list_reports(user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    """Report history, newest first."""
    return {"success": True, "data": {"items": _dump(content.get_reports_for_user(store, user.user_id))}}


@router.get("/me/captions")
def list_captions(user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    return {"success": True, "data": {"items": _dump(content.get_captions_for_user(store, user.user_id))}}


@router.delete("/me/captions/{caption_id}")
def delete_caption(caption_id: int, user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    owned = any(c.id == caption_id for c in content.get_captions_for_user(store, user.user_id))
    if not owned:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="NOT_FOUND")
    content.delete_caption(store, caption_id)
    return {"success": True, "data": {"ok": True}}


# ===== Ideas =====
@router.get("/me/ideas")
def list_ideas(user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    return {"success": True, "data": {"items": _dump(content.get_ideas_for_user(store, user.user_id))}}


@router.post("/me/ideas")
def submit_idea(body: IdeaIn, user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    idea = content.add_idea_for_user(store, user.user_id, body.ideaText)
    return {"success": True, "data": idea.model_dump(mode="json")}


# ===== Usage / histories =====
@router.get("/me/usage")
def usage(user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    """Today's counters with their display limits."""
    return {"success": True, "data": get_usage(store, user.user_id)}


@router.get("/me/history/{kind}")
def get_history(
    kind: Literal["chat", "story", "image"],
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store_dep),
):
    if kind == "chat":
        items = history.get_chat_history(store, user.user_id)
    elif kind == "story":
        items = history.get_story_history(store, user.user_id)
    else:
        items = history.get_image_history(store, user.user_id)
    return {"success": True, "data": {"items": _dump(items)}}


# ===== Notifications =====
@router.get("/me/notifications")
def notifications(user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    return {"success": True, "data": get_notification_counts(store, user.user_id)}


@router.post("/me/notifications/{section}/clear")
def clear_notifications(
    section: Literal["scenarios", "plans", "reports"],
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store_dep),
):
    clear_user_notifications(store, section, user.user_id)
    return {"success": True, "data": get_notification_counts(store, user.user_id)}


# ===== Broadcasts =====
@router.get("/broadcasts/latest")
def latest_broadcast(store: Store = Depends(get_store_dep)):
    broadcast = content.get_latest_broadcast(store)
    return {"success": True, "data": broadcast.model_dump(mode="json") if broadcast else None}
