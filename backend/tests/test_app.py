import inspect

import pytest

from portfolio.config import settings
from portfolio.main import create_app
from portfolio.services.tokens import TokenService


def test_app_refuses_to_start_without_secret(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET", "")

    with pytest.raises(RuntimeError, match="JWT_SECRET is required"):
        create_app()


def test_app_state_is_wired():
    app = create_app()

    assert isinstance(app.state.token_service, TokenService)
    assert app.state.rate_limiter.sweep_interval == settings.RATE_LIMIT_SWEEP_SECONDS
    assert app.state.rate_limiter.sweeper_running is False


def test_media_base_url_has_no_trailing_slash():
    assert not settings.MEDIA_BASE_URL.endswith("/")


def test_blocking_handlers_run_in_thread_pool():
    app = create_app()
    blocking_paths = {"/api/auth/login", "/api/contact", "/api/projects", "/api/skills"}

    endpoints = [route.endpoint for route in app.routes if getattr(route, "path", None) in blocking_paths]

    assert len(endpoints) == 10
    assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)
