# itembot/repositories/content.py
"""
Content repositories: scenarios, plans, reports, captions, ideas, broadcasts.

Every mutating function is one complete load -> mutate -> save cycle.
New records get ids from `Store.next_id`, so ids grow with creation time.
"""
from typing import List, Optional

from itembot.core.activity import log_activity
from itembot.core.db import Store
from itembot.models import BroadcastMessage, Caption, Plan, PostIdea, PostScenario, Report


# ---------------- Scenarios ----------------
def get_scenarios_for_user(store: Store, user_id: int) -> List[PostScenario]:
    """Outstanding scenarios for a user, ascending by scenario number."""
    scenarios = [s for s in store.load().post_scenarios if s.user_id == user_id]
    return sorted(scenarios, key=lambda s: s.scenario_number)


def get_scenario_by_id(store: Store, scenario_id: int) -> Optional[PostScenario]:
    return next((s for s in store.load().post_scenarios if s.id == scenario_id), None)


def add_scenario_for_user(store: Store, user_id: int, scenario_number: int, content: str) -> PostScenario:
    state = store.load()
    scenario = PostScenario(
        id=store.next_id(state.post_scenarios),
        user_id=user_id,
        scenario_number=scenario_number,
        content=content,
    )
    state.post_scenarios.append(scenario)
    store.save(state)
    return scenario


def delete_scenario(store: Store, scenario_id: int) -> None:
    state = store.load()
    state.post_scenarios = [s for s in state.post_scenarios if s.id != scenario_id]
    store.save(state)


# ---------------- Plans (one per user) ----------------
def get_plan_for_user(store: Store, user_id: int) -> Optional[Plan]:
    return next((p for p in store.load().plans if p.user_id == user_id), None)


def save_plan_for_user(store: Store, user_id: int, content: str) -> Plan:
    """Upsert the user's plan; the timestamp moves to now on every save."""
    state = store.load()
    plan = next((p for p in state.plans if p.user_id == user_id), None)
    if plan is not None:
        plan.content = content
        plan.timestamp = store.now()
    else:
        plan = Plan(id=store.next_id(state.plans), user_id=user_id, content=content, timestamp=store.now())
        state.plans.append(plan)
    store.save(state)
    return plan


def delete_plan_for_user(store: Store, user_id: int) -> None:
    state = store.load()
    state.plans = [p for p in state.plans if p.user_id != user_id]
    store.save(state)


# ---------------- Reports ----------------
def get_reports_for_user(store: Store, user_id: int) -> List[Report]:
    """Report history for a user, newest first by timestamp."""
    reports = [r for r in store.load().reports if r.user_id == user_id]
    return sorted(reports, key=lambda r: r.timestamp, reverse=True)


def add_report_for_user(store: Store, user_id: int, content: str) -> Report:
    # Always a new report; existing ones are never updated
    state = store.load()
    report = Report(id=store.next_id(state.reports), user_id=user_id, content=content, timestamp=store.now())
    state.reports.append(report)
    store.save(state)
    return report


def delete_report(store: Store, report_id: int) -> None:
    state = store.load()
    state.reports = [r for r in state.reports if r.id != report_id]
    store.save(state)


def delete_reports_for_user(store: Store, user_id: int) -> None:
    state = store.load()
    state.reports = [r for r in state.reports if r.user_id != user_id]
    store.save(state)


# ---------------- Captions ----------------
def get_captions_for_user(store: Store, user_id: int) -> List[Caption]:
    """Captions for a user, newest first by id."""
    captions = [c for c in store.load().captions if c.user_id == user_id]
    return sorted(captions, key=lambda c: c.id, reverse=True)


def add_caption(store: Store, user_id: int, title: str, content: str, original_scenario_content: str) -> Caption:
    state = store.load()
    caption = Caption(
        id=store.next_id(state.captions),
        user_id=user_id,
        title=title,
        content=content,
        original_scenario_content=original_scenario_content,
    )
    state.captions.append(caption)
    store.save(state)
    return caption


def delete_caption(store: Store, caption_id: int) -> None:
    state = store.load()
    state.captions = [c for c in state.captions if c.id != caption_id]
    store.save(state)


# ---------------- Ideas ----------------
def get_ideas_for_user(store: Store, user_id: int) -> List[PostIdea]:
    return [i for i in store.load().post_ideas if i.user_id == user_id]


def get_all_ideas(store: Store) -> List[PostIdea]:
    """Every pending idea (admin queue), in submission order."""
    return store.load().post_ideas


def add_idea_for_user(store: Store, user_id: int, idea_text: str) -> PostIdea:
    state = store.load()
    idea = PostIdea(id=store.next_id(state.post_ideas), user_id=user_id, idea_text=idea_text)
    state.post_ideas.append(idea)
    store.save(state)
    log_activity(store, user_id, "Submitted a new post idea.")
    return idea


def delete_idea(store: Store, idea_id: int) -> None:
    state = store.load()
    state.post_ideas = [i for i in state.post_ideas if i.id != idea_id]
    store.save(state)


# ---------------- Broadcasts ----------------
def get_latest_broadcast(store: Store) -> Optional[BroadcastMessage]:
    broadcasts = store.load().broadcasts
    if not broadcasts:
        return None
    return max(broadcasts, key=lambda b: b.timestamp)


def add_broadcast(store: Store, message: str) -> BroadcastMessage:
    state = store.load()
    broadcast = BroadcastMessage(id=store.next_id(state.broadcasts), message=message, timestamp=store.now())
    state.broadcasts.append(broadcast)
    store.save(state)
    return broadcast
