# This project was developed with assistance from AI tools.
"""Route access resolution for the web client. Works without a session."""

from fastapi import APIRouter, Query

from ..middleware.auth import OptionalUser
from ..schemas.navigation import RouteAccessResponse
from ..services.navigation import resolve_route_access

router = APIRouter()


@router.get("/resolve", response_model=RouteAccessResponse)
async def resolve(
    user: OptionalUser,
    path: str = Query(default="/", max_length=2048),
) -> RouteAccessResponse:
    decision = resolve_route_access(path, user)
    return RouteAccessResponse(
        path=path,
        action=decision.action.value,
        target=decision.target,
        authenticated=user is not None,
    )
