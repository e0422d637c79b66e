"""
Directory module exceptions.
"""

from shared.exceptions import AuthorizationError, NotFoundError, ValidationError


class InstituteNotFoundError(NotFoundError):
    def __init__(self, institute_id: str):
        super().__init__(
            f"Institute not found: {institute_id}",
            code="INSTITUTE_NOT_FOUND",
            details={"institute_id": institute_id},
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class InstituteNotApprovedError(AuthorizationError):
    """Raised when an institute that is not approved is acted on."""

    def __init__(self, institute_id: str):
        super().__init__(
            "Institute is not approved",
            code="INSTITUTE_NOT_APPROVED",
            details={"institute_id": institute_id},
        )


class UserNotApprovedError(AuthorizationError):
    def __init__(self, user_id: str):
        super().__init__(
            "User account is not approved",
            code="USER_NOT_APPROVED",
            details={"user_id": user_id},
        )


class PermissionRequiredError(AuthorizationError):
    """Raised when an approved account lacks the permission for an action."""

    def __init__(self, account_id: str, permission: str):
        super().__init__(
            f"Permission required: {permission}",
            code="PERMISSION_REQUIRED",
            details={"account_id": account_id, "permission": permission},
        )


class DirectoryValidationError(ValidationError):
    def __init__(self, message: str, field: str):
        super().__init__(message, code="DIRECTORY_INVALID", details={"field": field})
