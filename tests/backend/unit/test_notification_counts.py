"""
Unit tests for core.notifications module.
Tests unread badge counts, last-view bookkeeping and dismissed items.
"""
import json

import pytest

from itembot.core.activity import log_activity
from itembot.core.notifications import (
    admin_last_view_key,
    clear_admin_notifications,
    clear_user_notifications,
    dismiss_news_item,
    dismissed_key,
    forget_user,
    get_admin_notification_counts,
    get_dismissed_items,
    get_notification_counts,
    is_item_unread,
    last_view_key,
)
from itembot.models import StoreState, User
from itembot.repositories import content


@pytest.fixture
def user_store(store):
    store.save(StoreState(users=[User.fresh(10, "Sara", "S1", store.today())]))
    return store


class TestUserCounts:
    """Tests for get_notification_counts / clear_user_notifications."""

    def test_empty(self, user_store):
        assert get_notification_counts(user_store, 10) == {"scenarios": 0, "plans": 0, "reports": 0}

    def test_plan_unread_until_viewed_then_unread_again_after_update(self, user_store, clock):
        """A plan viewed after saving reads 0; re-saving it later reads 1 again."""
        content.save_plan_for_user(user_store, 10, "v1")
        assert get_notification_counts(user_store, 10)["plans"] == 1

        clock.advance(seconds=1)
        clear_user_notifications(user_store, "plans", 10)
        assert get_notification_counts(user_store, 10)["plans"] == 0

        clock.advance(seconds=1)
        content.save_plan_for_user(user_store, 10, "v2")
        assert get_notification_counts(user_store, 10)["plans"] == 1

    def test_plan_saved_at_view_instant_is_read(self, user_store):
        """Unread requires the timestamp to be strictly newer than the last view."""
        content.save_plan_for_user(user_store, 10, "v1")
        clear_user_notifications(user_store, "plans", 10)
        assert get_notification_counts(user_store, 10)["plans"] == 0

    def test_reports_count_only_newer_than_view(self, user_store, clock):
        content.add_report_for_user(user_store, 10, "r1")
        clock.advance(seconds=1)
        content.add_report_for_user(user_store, 10, "r2")
        assert get_notification_counts(user_store, 10)["reports"] == 2

        clock.advance(seconds=1)
        clear_user_notifications(user_store, "reports", 10)
        clock.advance(seconds=1)
        content.add_report_for_user(user_store, 10, "r3")
        assert get_notification_counts(user_store, 10)["reports"] == 1

    def test_scenarios_badge_is_pending_count(self, user_store):
        """Clearing scenarios does not reduce the pending count."""
        content.add_scenario_for_user(user_store, 10, 1, "a")
        content.add_scenario_for_user(user_store, 10, 2, "b")
        clear_user_notifications(user_store, "scenarios", 10)
        assert get_notification_counts(user_store, 10)["scenarios"] == 2

    def test_other_users_items_are_not_counted(self, user_store):
        content.add_report_for_user(user_store, 11, "not yours")
        content.add_scenario_for_user(user_store, 11, 1, "not yours")
        assert get_notification_counts(user_store, 10) == {"scenarios": 0, "plans": 0, "reports": 0}

    def test_corrupt_last_view_counts_as_never_viewed(self, user_store, storage):
        content.save_plan_for_user(user_store, 10, "v1")
        storage.set_item(last_view_key("plans", 10), "yesterday")
        assert get_notification_counts(user_store, 10)["plans"] == 1

    def test_unknown_section_raises(self, user_store):
        with pytest.raises(ValueError):
            clear_user_notifications(user_store, "captions", 10)


class TestAdminCounts:
    """Tests for get_admin_notification_counts / clear_admin_notifications."""

    def test_ideas_are_raw_count(self, user_store):
        content.add_idea_for_user(user_store, 10, "idea")
        clear_admin_notifications(user_store, "ideas")
        assert get_admin_notification_counts(user_store)["ideas"] == 1

    def test_logs_newer_than_last_view(self, user_store, clock):
        log_activity(user_store, 10, "a")
        log_activity(user_store, 10, "b")
        assert get_admin_notification_counts(user_store)["logs"] == 2

        clock.advance(seconds=1)
        clear_admin_notifications(user_store, "logs")
        assert get_admin_notification_counts(user_store)["logs"] == 0

        clock.advance(seconds=1)
        log_activity(user_store, 10, "c")
        assert get_admin_notification_counts(user_store)["logs"] == 1

    def test_admin_view_key_is_stored_as_epoch_ms(self, user_store, storage):
        clear_admin_notifications(user_store, "logs")
        assert storage.get_item(admin_last_view_key("logs")) == str(user_store.now_ms())

    def test_unknown_section_raises(self, user_store):
        with pytest.raises(ValueError):
            clear_admin_notifications(user_store, "users")


class TestDismissedItems:
    """Tests for the dismissed-item bookkeeping."""

    def test_dismiss_newest_report(self, user_store, clock):
        content.add_report_for_user(user_store, 10, "old")
        clock.advance(seconds=1)
        newest = content.add_report_for_user(user_store, 10, "new")
        assert dismiss_news_item(user_store, 10, "report") == f"report_{newest.id}"
        assert is_item_unread(user_store, 10, "report", newest.id) is False

    def test_dismiss_newest_scenario_by_id(self, user_store, clock):
        content.add_scenario_for_user(user_store, 10, 5, "a")
        clock.advance(seconds=1)
        latest = content.add_scenario_for_user(user_store, 10, 1, "b")
        assert dismiss_news_item(user_store, 10, "scenarios") == f"scenarios_{latest.id}"

    def test_dismiss_nothing(self, user_store):
        assert dismiss_news_item(user_store, 10, "plan") is None
        assert get_dismissed_items(user_store, 10) == []

    def test_dismiss_is_not_duplicated(self, user_store, storage):
        content.save_plan_for_user(user_store, 10, "p")
        dismiss_news_item(user_store, 10, "plan")
        dismiss_news_item(user_store, 10, "plan")
        assert len(json.loads(storage.get_item(dismissed_key(10)))) == 1

    def test_clear_plans_dismisses_plan(self, user_store):
        plan = content.save_plan_for_user(user_store, 10, "p")
        clear_user_notifications(user_store, "plans", 10)
        assert f"plan_{plan.id}" in get_dismissed_items(user_store, 10)

    @pytest.mark.parametrize("raw", ["not json", '{"a": 1}', "3"])
    def test_corrupt_dismissed_set_reads_empty(self, user_store, storage, raw):
        storage.set_item(dismissed_key(10), raw)
        assert get_dismissed_items(user_store, 10) == []

    def test_forget_user_removes_keys(self, user_store, storage):
        content.save_plan_for_user(user_store, 10, "p")
        clear_user_notifications(user_store, "plans", 10)
        forget_user(user_store, 10)
        assert storage.get_item(last_view_key("plans", 10)) is None
        assert storage.get_item(dismissed_key(10)) is None
