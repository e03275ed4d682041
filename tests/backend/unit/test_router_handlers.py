"""
Unit tests for the API routers.
Store-only endpoints must be plain functions so FastAPI runs their blocking
store I/O in the threadpool instead of on the event loop.
"""
import inspect

import pytest

from itembot.api.v1 import deps
from itembot.api.v1.routers import admin, auth, content, generation


@pytest.mark.parametrize("module", [auth, admin, content], ids=["auth", "admin", "content"])
def test_store_only_handlers_are_sync(module):
    async_handlers = [
        route.endpoint.__name__
        for route in module.router.routes
        if inspect.iscoroutinefunction(route.endpoint)
    ]
    assert async_handlers == []


def test_session_dependencies_are_sync():
    assert not inspect.iscoroutinefunction(deps.get_current_user)
    assert not inspect.iscoroutinefunction(deps.require_admin)


def test_generation_handlers_stay_async():
    assert all(inspect.iscoroutinefunction(route.endpoint) for route in generation.router.routes)
