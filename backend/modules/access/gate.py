"""
Access gate.

Pure decision functions consumed by route guards before a role-guarded
view is shown. Nothing here performs I/O or mutates its inputs: the same
arguments always give the same Decision.
"""

from typing import Callable, Iterable, Optional

from shared.models import AccountStatus, Identity, Role

from .models import DEFAULT_PATHS, Decision, RoutePaths

# Portal chosen for an anonymous visitor when several roles are accepted
ROLE_PRIORITY = (Role.ADMIN, Role.INSTITUTE, Role.USER)

Predicate = Callable[[Identity], bool]


def _has_prefix(path: Optional[str], prefix: str) -> bool:
    if not path:
        return False
    return path == prefix or path.startswith(prefix + "/")


def is_admin_path(path: Optional[str]) -> bool:
    return _has_prefix(path, "/admin")


def is_institute_path(path: Optional[str]) -> bool:
    return _has_prefix(path, "/institute")


def login_path_for(
    required_roles: Iterable[Role] = (),
    requested_path: Optional[str] = None,
    paths: RoutePaths = DEFAULT_PATHS,
) -> str:
    """
    Pick the login portal for an anonymous visitor.

    The first recognized role in admin > institute > user order wins.
    Without required roles the portal is inferred from the path prefix.
    """
    roles = set(required_roles)
    for role in ROLE_PRIORITY:
        if role in roles:
            if role == Role.ADMIN:
                return paths.admin_login
            if role == Role.INSTITUTE:
                return paths.institute_login
            return paths.login

    if is_admin_path(requested_path):
        return paths.admin_login
    if is_institute_path(requested_path):
        return paths.institute_login
    return paths.login


def status_path(
    status: Optional[AccountStatus],
    paths: RoutePaths = DEFAULT_PATHS,
    role: Role = Role.INSTITUTE,
) -> str:
    """
    Page matching an account's approval status.

    Students have a single status page for every state short of approved.
    """
    if role == Role.USER:
        if status == AccountStatus.APPROVED:
            return paths.user_home
        return paths.user_pending_approval
    if status == AccountStatus.PENDING:
        return paths.pending_approval
    if status == AccountStatus.REJECTED:
        return paths.rejected
    return paths.institute_home


def landing_path_for(identity: Identity, paths: RoutePaths = DEFAULT_PATHS) -> str:
    """Where an authenticated identity belongs when it has no destination."""
    if identity.role == Role.ADMIN:
        return paths.admin_home
    return status_path(identity.status, paths, identity.role)


def decide(
    identity: Optional[Identity],
    required_roles: Iterable[Role] = (),
    require_approval: bool = False,
    requested_path: Optional[str] = None,
    paths: RoutePaths = DEFAULT_PATHS,
    predicate: Optional[Predicate] = None,
) -> Decision:
    """
    Decide whether the identity may see the requested view.

    Args:
        identity: Active session identity, or None when logged out
        required_roles: Roles allowed on the view; empty means any role
        require_approval: Whether institutes and users must be approved
            to enter
        requested_path: Path being navigated to
        paths: Redirect targets
        predicate: Extra check run after the role check; returning False
            denies access outright

    Returns:
        Allow, Redirect(target) or Deny
    """
    roles = frozenset(required_roles)

    if identity is None:
        return Decision.redirect(
            login_path_for(roles, requested_path, paths),
            reason="not_authenticated",
            return_to=requested_path,
        )

    if roles and identity.role not in roles:
        return Decision.redirect(paths.unauthorized, reason="role_not_allowed")

    if predicate is not None and not predicate(identity):
        return Decision.deny(reason="predicate_failed")

    if (
        require_approval
        and identity.role != Role.ADMIN
        and identity.status != AccountStatus.APPROVED
    ):
        return Decision.redirect(
            status_path(identity.status, paths, identity.role),
            reason=f"status_{identity.status.value}" if identity.status else "status_unknown",
        )

    if identity.role == Role.INSTITUTE and is_admin_path(requested_path):
        return Decision.redirect(paths.institute_home, reason="admin_path")

    return Decision.allow()


def decide_public(
    identity: Optional[Identity],
    requested_path: Optional[str],
    paths: RoutePaths = DEFAULT_PATHS,
) -> Decision:
    """
    Decide access to a public page.

    Authenticated identities are sent away from the login and
    registration pages; everything else is allowed.
    """
    if identity is not None and requested_path in paths.public_entry_paths:
        return Decision.redirect(landing_path_for(identity, paths), reason="already_authenticated")
    return Decision.allow()
