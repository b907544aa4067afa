import logging
import os
from functools import lru_cache

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Header, Request
from pydantic import ValidationError
from typing import AsyncIterator, Dict, Optional

import actions
from config import Secrets, load_secrets
from device import COLORS, DEVICES, ActionRequest, ActionResult
from errors import InvalidRequest, NotAuthenticated, NotPermitted, register_exception_handlers, result_response
from govee import GoveeClient
from permissions import Grant, authorize, load_permissions

log = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
ACTIONS = ("plug_on", "daughter_signal", "all_off")


@lru_cache
def get_secrets() -> Secrets:
    return load_secrets()


def get_permissions(secrets: Secrets = Depends(get_secrets)) -> Dict[str, Grant]:
    return load_permissions(secrets)


async def get_grant(
    authorization: Optional[str] = Header(None),
    permissions: Dict[str, Grant] = Depends(get_permissions),
) -> Grant:
    """Resolve the bearer token in the Authorization header to its grant."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise NotAuthenticated("Missing or invalid authorization")

    grant = permissions.get(authorization[len(BEARER_PREFIX):])
    if grant is None:
        raise NotAuthenticated("Invalid token")
    return grant


# Govee client bound to a per-request HTTP connection
async def get_client(secrets: Secrets = Depends(get_secrets)) -> AsyncIterator[GoveeClient]:
    http = httpx.AsyncClient(timeout=secrets.govee_timeout)
    try:
        yield GoveeClient(http, secrets.govee_api_key, secrets.govee_api_url)
    finally:
        await http.aclose()


async def parse_action_request(request: Request) -> ActionRequest:
    try:
        data = await request.json()
    except ValueError:
        raise InvalidRequest("Invalid JSON body")
    if not isinstance(data, dict):
        raise InvalidRequest("Invalid JSON body")

    try:
        return ActionRequest.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(x) for x in error["loc"]) for error in e.errors())
        raise InvalidRequest(f"Invalid fields: {fields}")


def validate_action_request(body: ActionRequest) -> None:
    """Check the action and the fields it needs, before any permission check."""
    if not body.action:
        raise InvalidRequest("Missing action field")

    if body.action == "plug_on":
        if not body.target:
            raise InvalidRequest("Missing target field for plug_on")
        if body.target not in DEVICES:
            raise InvalidRequest(f"Unknown target: {body.target}")
    elif body.action == "daughter_signal":
        if not body.color:
            raise InvalidRequest("Missing color field for daughter_signal")
        if body.color not in COLORS:
            raise InvalidRequest(f"Invalid color: {body.color}. Must be 'red' or 'blue'.")
    elif body.action not in ACTIONS:
        raise InvalidRequest(f"Unknown action: {body.action}")


async def run_action(client: GoveeClient, body: ActionRequest) -> ActionResult:
    if body.action == "plug_on":
        return await actions.plug_on(client, body.target)
    if body.action == "daughter_signal":
        return await actions.daughter_signal(client, body.color)
    return await actions.all_off(client)


def create_app(docs_enabled: bool = False) -> FastAPI:
    """Build the relay app. Docs are off by default so only /signal answers."""
    # Bad configuration fails here rather than on the first request
    get_secrets()

    app = FastAPI(
        title="Friendship Lights",
        description="Authenticated relay from shortcuts to Govee devices",
        redirect_slashes=False,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    register_exception_handlers(app)

    @app.post("/signal", response_model=ActionResult, response_model_exclude_none=True)
    async def signal(
        request: Request,
        grant: Grant = Depends(get_grant),
        client: GoveeClient = Depends(get_client),
    ):
        body = await parse_action_request(request)
        validate_action_request(body)

        if not authorize(grant, body):
            raise NotPermitted()

        log.info(f"Running {body.action} (target={body.target}, color={body.color})")
        result = await run_action(client, body)
        if result.ok:
            log.info(f"{body.action} succeeded")
            return result_response(result, 200)

        log.warning(f"{body.action} failed: {result.error}")
        return result_response(result, 500)

    return app


app = create_app()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or os.environ.get("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    configure_logging()
    uvicorn.run(app, host=os.environ.get("HOST", "0.0.0.0"), port=int(os.environ.get("PORT", "8000")))
