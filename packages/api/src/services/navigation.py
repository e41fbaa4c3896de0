# This project was developed with assistance from AI tools.
"""Role-gated route access decisions for the web client.

``resolve_route_access`` is the server-side twin of the client's route
guards. Rules apply in this order:

1. protected route and nobody logged in -> redirect to login;
2. founder whose verification is not approved, heading anywhere outside
   the auth/onboarding flow -> redirect to onboarding;
3. route restricted to roles the user does not have -> redirect to the
   user's default landing page;
4. otherwise render.

``/founder`` counts as part of the onboarding flow: its dashboard is itself
gated and shows only the restricted screen until verification is approved.
Onboarding routes are matched exactly; a deeper path such as
``/founder/products`` is not part of the flow. Role restrictions still
cover every path below a route.
"""

from dataclasses import dataclass
from enum import Enum

from db.enums import UserRole, VerificationStatus

from ..schemas.auth import UserContext

LOGIN_PATH = "/auth"


class RouteAction(str, Enum):
    RENDER = "render"
    REDIRECT_LOGIN = "redirect-login"
    REDIRECT_ONBOARDING = "redirect-onboarding"
    REDIRECT_DEFAULT = "redirect-default"


@dataclass(frozen=True)
class RouteRule:
    path: str
    protected: bool = True
    roles: frozenset[UserRole] | None = None
    onboarding: bool = False


ROUTE_TABLE: tuple[RouteRule, ...] = (
    RouteRule("/", protected=False),
    RouteRule(LOGIN_PATH, protected=False, onboarding=True),
    RouteRule("/founder-upload-success", protected=False, onboarding=True),
    RouteRule("/founder-onboarding", roles=frozenset({UserRole.FOUNDER}), onboarding=True),
    RouteRule("/founder-upload-docs", roles=frozenset({UserRole.FOUNDER}), onboarding=True),
    RouteRule("/founder", roles=frozenset({UserRole.FOUNDER}), onboarding=True),
    RouteRule("/investor", roles=frozenset({UserRole.INVESTOR})),
    RouteRule("/mentor", roles=frozenset({UserRole.MENTOR})),
    RouteRule("/admin", roles=frozenset({UserRole.ADMIN, UserRole.SUPERADMIN})),
    RouteRule("/superadmin", roles=frozenset({UserRole.SUPERADMIN})),
    RouteRule("/dashboard", roles=frozenset({UserRole.ORGANIZATION, UserRole.OTHER})),
)

DEFAULT_LANDING: dict[UserRole, str] = {
    UserRole.SUPERADMIN: "/superadmin",
    UserRole.ADMIN: "/admin",
    UserRole.FOUNDER: "/founder",
    UserRole.INVESTOR: "/investor",
    UserRole.MENTOR: "/mentor",
    UserRole.ORGANIZATION: "/dashboard",
    UserRole.OTHER: "/dashboard",
}


@dataclass(frozen=True)
class RouteDecision:
    action: RouteAction
    target: str


def _normalize(path: str) -> str:
    path = path.split("?", 1)[0].split("#", 1)[0].strip() or "/"
    if not path.startswith("/"):
        path = f"/{path}"
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def match_route(path: str) -> RouteRule | None:
    """Longest route whose path equals ``path`` or is a segment prefix of it."""
    path = _normalize(path)
    best: RouteRule | None = None
    for rule in ROUTE_TABLE:
        if rule.path == "/":
            hit = path == "/"
        else:
            hit = path == rule.path or path.startswith(f"{rule.path}/")
        if hit and (best is None or len(rule.path) > len(best.path)):
            best = rule
    return best


def onboarding_path(status: VerificationStatus | None) -> str:
    """Where an unverified founder is sent: upload first, then the gated dashboard."""
    if status in (None, VerificationStatus.NOT_SUBMITTED):
        return "/founder-upload-docs"
    return "/founder"


def resolve_route_access(path: str, user: UserContext | None) -> RouteDecision:
    """Decide whether ``user`` may render ``path`` or where to send them."""
    path = _normalize(path)
    rule = match_route(path)

    # Unknown paths render the client's not-found page
    if rule is None or not rule.protected:
        return RouteDecision(RouteAction.RENDER, path)

    if user is None:
        return RouteDecision(RouteAction.REDIRECT_LOGIN, LOGIN_PATH)

    if (
        user.role == UserRole.FOUNDER
        and user.verification_status != VerificationStatus.APPROVED
        and not (rule.onboarding and path == rule.path)
    ):
        return RouteDecision(RouteAction.REDIRECT_ONBOARDING, onboarding_path(user.verification_status))

    if rule.roles is not None and user.role not in rule.roles:
        return RouteDecision(RouteAction.REDIRECT_DEFAULT, DEFAULT_LANDING.get(user.role, "/"))

    return RouteDecision(RouteAction.RENDER, path)
