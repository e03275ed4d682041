# itembot/core/notifications.py
"""
Badge ("unread") counts for users and the admin.

Two bookkeeping mechanisms live side by side, both stored as side keys next
to the state blob and never inside the content collections:

- Timestamp based (plans, reports, admin logs): `lastView_<section>_<userId>`
  and `lastView_admin_<section>` hold the epoch-ms time the section was last
  viewed. An item is unread if it is strictly newer than that time, or if the
  section was never viewed.
- Dismissed-set based: `dismissedNews_<userId>` holds a JSON list of
  `"{type}_{id}"` identifiers. Clearing a section dismisses only its single
  most recent item.

The scenarios and ideas badges are raw pending counts: they measure work
still outstanding, not read-state, and drop only when items are consumed or
deleted.
"""
import json
import logging
from typing import Dict, List, Literal, Optional

from itembot.models import to_ms
from .db import Store

logger = logging.getLogger("uvicorn.error")

UserSection = Literal["scenarios", "plans", "reports"]
AdminSection = Literal["ideas", "logs"]
NewsItemType = Literal["plan", "report", "scenarios"]

USER_SECTIONS = ("scenarios", "plans", "reports")
ADMIN_SECTIONS = ("ideas", "logs")


def last_view_key(section: str, user_id: int) -> str:
    return f"lastView_{section}_{user_id}"


def admin_last_view_key(section: str) -> str:
    return f"lastView_admin_{section}"


def dismissed_key(user_id: int) -> str:
    return f"dismissedNews_{user_id}"


def _read_last_view(store: Store, key: str) -> Optional[int]:
    raw = store.get_item(key)
    if raw is None:
        return None
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        logger.warning("[notifications] Ignoring corrupt last-view value under %r.", key)
        return None


def get_dismissed_items(store: Store, user_id: int) -> List[str]:
    """Return the user's dismissed item identifiers (corrupt data reads as empty)."""
    raw = store.get_item(dismissed_key(user_id))
    if raw is None:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        parsed = None
    if not isinstance(parsed, list):
        logger.warning("[notifications] Ignoring corrupt dismissed set for user %s.", user_id)
        return []
    return [item for item in parsed if isinstance(item, str)]


def is_item_unread(store: Store, user_id: int, item_type: NewsItemType, item_id: int) -> bool:
    """True if `"{item_type}_{item_id}"` has not been dismissed by the user."""
    return f"{item_type}_{item_id}" not in get_dismissed_items(store, user_id)


def dismiss_news_item(store: Store, user_id: int, item_type: NewsItemType) -> Optional[str]:
    """
    Dismiss the single most recent item of `item_type` for a user.

    - plan: the user's plan
    - report: the newest report by timestamp
    - scenarios: the newest outstanding scenario by id

    Returns:
        The dismissed identifier, or None if there was nothing to dismiss
    """
    state = store.load()
    item_id: Optional[int] = None
    if item_type == "plan":
        plan = next((p for p in state.plans if p.user_id == user_id), None)
        if plan is not None:
            item_id = plan.id
    elif item_type == "report":
        reports = [r for r in state.reports if r.user_id == user_id]
        if reports:
            item_id = max(reports, key=lambda r: r.timestamp).id
    elif item_type == "scenarios":
        scenarios = [s for s in state.post_scenarios if s.user_id == user_id]
        if scenarios:
            item_id = max(s.id for s in scenarios)
    else:
        raise ValueError(f"Unknown news item type: {item_type!r}")

    if item_id is None:
        return None
    identifier = f"{item_type}_{item_id}"
    dismissed = get_dismissed_items(store, user_id)
    if identifier not in dismissed:
        dismissed.append(identifier)
        store.set_item(dismissed_key(user_id), json.dumps(dismissed))
    return identifier


def get_notification_counts(store: Store, user_id: int) -> Dict[str, int]:
    """
    Compute a user's badge counts.

    Returns:
        {"scenarios": outstanding scenario count,
         "plans": 1 if the plan is newer than the last plans view else 0,
         "reports": number of reports newer than the last reports view}
    """
    state = store.load()

    scenarios = sum(1 for s in state.post_scenarios if s.user_id == user_id)

    last_plan_view = _read_last_view(store, last_view_key("plans", user_id))
    plan = next((p for p in state.plans if p.user_id == user_id), None)
    plans = 1 if plan is not None and (last_plan_view is None or to_ms(plan.timestamp) > last_plan_view) else 0

    last_report_view = _read_last_view(store, last_view_key("reports", user_id))
    reports = sum(
        1
        for r in state.reports
        if r.user_id == user_id and (last_report_view is None or to_ms(r.timestamp) > last_report_view)
    )

    return {"scenarios": scenarios, "plans": plans, "reports": reports}


def get_admin_notification_counts(store: Store) -> Dict[str, int]:
    """
    Compute the admin's badge counts.

    Returns:
        {"ideas": pending idea count, "logs": log entries newer than the last logs view}
    """
    state = store.load()
    ideas = len(state.post_ideas)
    last_log_view = _read_last_view(store, admin_last_view_key("logs")) or 0
    logs = sum(1 for entry in state.activity_logs if to_ms(entry.timestamp) > last_log_view)
    return {"ideas": ideas, "logs": logs}


def clear_user_notifications(store: Store, section: UserSection, user_id: int) -> None:
    """
    Mark a user section as viewed.

    scenarios: dismiss the newest scenario (the pending count is unaffected).
    plans/reports: record now as last viewed and dismiss the newest item.
    """
    if section == "scenarios":
        dismiss_news_item(store, user_id, "scenarios")
    elif section == "plans":
        store.set_item(last_view_key(section, user_id), str(store.now_ms()))
        dismiss_news_item(store, user_id, "plan")
    elif section == "reports":
        store.set_item(last_view_key(section, user_id), str(store.now_ms()))
        dismiss_news_item(store, user_id, "report")
    else:
        raise ValueError(f"Unknown user notification section: {section!r}")


def clear_admin_notifications(store: Store, section: AdminSection) -> None:
    """Mark an admin section as viewed. Ideas are cleared only by deletion."""
    if section == "ideas":
        return
    if section == "logs":
        store.set_item(admin_last_view_key(section), str(store.now_ms()))
        return
    raise ValueError(f"Unknown admin notification section: {section!r}")


def forget_user(store: Store, user_id: int) -> None:
    """Remove every bookkeeping key belonging to a user."""
    for section in USER_SECTIONS:
        store.remove_item(last_view_key(section, user_id))
    store.remove_item(dismissed_key(user_id))
