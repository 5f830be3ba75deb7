"""Browser-based user administration screens."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from .client import UsersAPIClient
from .config import Settings, load_settings
from .models import FieldUpdate
from .navigation import LIST_PATH, detail_path
from .sessions import ViewSession, ViewSessionManager
from .views import UserListView


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

SESSION_COOKIE_NAME = "useradmin_session"
_VIEW_TOKEN_KEY = "view_token"


logger = logging.getLogger("useradmin.web")


class InvalidFormError(ValueError):
    """Raised when a submitted modal form carries an unknown field."""


def create_app(
    *,
    settings: Optional[Settings] = None,
    client: Optional[UsersAPIClient] = None,
    session_manager: Optional[ViewSessionManager] = None,
) -> FastAPI:
    """Create the user administration web application."""

    if settings is None:
        settings = load_settings()
    settings = settings.with_session_secret()

    owns_client = client is None
    if client is None:
        client = UsersAPIClient(settings.api_base_url, timeout=settings.request_timeout)

    if session_manager is None:
        session_manager = ViewSessionManager(
            client,
            ttl=timedelta(hours=settings.session_ttl_hours),
        )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info("Serving user administration for %s", client.base_url)
        try:
            yield
        finally:
            if owns_client:
                await client.aclose()

    app = FastAPI(
        title="User Administration",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.users_client = client
    app.state.view_sessions = session_manager

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=SESSION_COOKIE_NAME,
        https_only=settings.secure_cookies,
        same_site="lax",
        max_age=int(session_manager.ttl.total_seconds()),
    )

    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
    templates.env.globals["detail_path"] = detail_path

    @app.exception_handler(InvalidFormError)
    async def invalid_form(_request: Request, exc: InvalidFormError):
        return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)

    def _view_session(request: Request) -> ViewSession:
        token, session = session_manager.resolve_or_create(request.session.get(_VIEW_TOKEN_KEY))
        request.session[_VIEW_TOKEN_KEY] = token
        return session

    def _list_view(request: Request) -> UserListView:
        return _view_session(request).list_view

    def _redirect_to_list(request: Request) -> RedirectResponse:
        return RedirectResponse(
            request.url_for("list_users"),
            status_code=status.HTTP_303_SEE_OTHER,
        )

    async def _apply_form(request: Request, view: UserListView) -> None:
        form = await request.form()
        for name, value in form.multi_items():
            try:
                update = FieldUpdate.from_form(name, str(value))
            except ValueError as exc:
                raise InvalidFormError(str(exc)) from exc
            view.handle_input_change(update)

    @app.get("/", response_class=HTMLResponse, name="list_users")
    async def list_users(request: Request):
        session = _view_session(request)
        view = session.list_view
        if view.loading or view.error:
            await view.load()
        session.history.visit(LIST_PATH)
        return templates.TemplateResponse(
            request,
            "users.html",
            {"view": view},
        )

    @app.get("/user/{user_id}", response_class=HTMLResponse, name="user_detail")
    async def user_detail(request: Request, user_id: str):
        session = _view_session(request)
        session.history.visit(detail_path(user_id))
        user = await session.detail_view.load(user_id)
        return templates.TemplateResponse(
            request,
            "user_detail.html",
            {"user": user},
        )

    @app.post("/back", name="navigate_back")
    async def navigate_back(request: Request):
        target = _view_session(request).history.back()
        return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)

    @app.post("/users/new", name="open_create_modal")
    async def open_create_modal(request: Request):
        _list_view(request).open_create_modal()
        return _redirect_to_list(request)

    @app.post("/users/create", name="create_user")
    async def create_user(request: Request):
        view = _list_view(request)
        if view.show_create_modal:
            await _apply_form(request, view)
            await view.create_user()
        return _redirect_to_list(request)

    @app.post("/users/update", name="update_user")
    async def update_user(request: Request):
        view = _list_view(request)
        if view.show_edit_modal:
            await _apply_form(request, view)
            await view.update_user()
        return _redirect_to_list(request)

    @app.post("/users/modal/close", name="close_modal")
    async def close_modal(request: Request):
        _list_view(request).close_modal()
        return _redirect_to_list(request)

    @app.post("/users/delete/confirm", name="delete_user")
    async def delete_user(request: Request):
        view = _list_view(request)
        target = view.pending_delete
        if target is not None:
            await view.delete_user(target.id)
        return _redirect_to_list(request)

    @app.post("/users/delete/cancel", name="cancel_delete")
    async def cancel_delete(request: Request):
        _list_view(request).cancel_delete()
        return _redirect_to_list(request)

    @app.post("/users/{user_id}/edit", name="open_edit_modal")
    async def open_edit_modal(request: Request, user_id: int):
        view = _list_view(request)
        user = view.find_user(user_id)
        if user is not None:
            view.open_edit_modal(user)
        return _redirect_to_list(request)

    @app.post("/users/{user_id}/delete", name="confirm_delete")
    async def confirm_delete(request: Request, user_id: int):
        view = _list_view(request)
        user = view.find_user(user_id)
        if user is not None:
            view.confirm_delete(user)
        return _redirect_to_list(request)

    @app.get("/healthz", name="healthz")
    async def healthz():
        return JSONResponse({"status": "ok"})

    return app


__all__ = ["SESSION_COOKIE_NAME", "create_app"]
