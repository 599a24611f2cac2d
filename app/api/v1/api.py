"""Action-multiplexed JSON API.

A single path serves every operation; the ``action`` query parameter and the
HTTP method select the handler. The auth guard runs before dispatch. Only the
body read happens on the event loop; guard and handler run in the threadpool.
"""

import json
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.v1.actions import ActionCall
from app.api.v1.endpoints import assets, audit, auth
from app.auth import get_session_manager, guard_action
from app.core.errors import ValidationError
from app.db.session import get_db
from app.services.session_service import SessionManager

ActionHandler = Callable[[ActionCall], Any]

ACTIONS: dict[str, dict[str, ActionHandler]] = {
    "GET": {
        "": assets.get_assets,
        "asset": assets.get_assets,
        "stats": assets.stats,
        "asset_history": assets.asset_history,
        "audit_log": audit.audit_log,
        "audit_detail": audit.audit_detail,
        "logout": auth.logout,
        "check_auth": auth.check_auth,
    },
    "POST": {
        "": assets.create_asset,
        "create_asset": assets.create_asset,
        "change_status": assets.change_status,
        "login": auth.login,
        "logout": auth.logout,
    },
    "PUT": {
        "": assets.update_asset,
        "update_asset": assets.update_asset,
    },
    "DELETE": {
        "": assets.delete_asset,
        "delete_asset": assets.delete_asset,
    },
}

api_router: APIRouter = APIRouter()


async def _json_payload(request: Request) -> dict[str, Any]:
    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise ValidationError("Request body is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


@api_router.api_route("", methods=list(ACTIONS))
async def dispatch(
    request: Request,
    response: Response,
    action: str = "",
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> Any:
    auth_context = await run_in_threadpool(guard_action, action, request, sessions)

    handler = ACTIONS.get(request.method, {}).get(action)
    if handler is None:
        raise ValidationError(f"Unsupported action '{action}' for {request.method}")

    payload = await _json_payload(request) if request.method in {"POST", "PUT"} else {}
    call = ActionCall(
        request=request,
        response=response,
        db=db,
        sessions=sessions,
        auth=auth_context,
        params=request.query_params,
        payload=payload,
    )
    return await run_in_threadpool(handler, call)
