# This project was developed with assistance from AI tools.
"""Route access decision schema."""

from . import SuccessResponse


class RouteAccessResponse(SuccessResponse):
    path: str
    action: str
    target: str
    authenticated: bool
