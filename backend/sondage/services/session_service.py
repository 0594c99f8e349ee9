"""Service for managing the administrator session."""

from fastapi import HTTPException, Request, status

from sondage.core.config import settings


def is_admin(request: Request) -> bool:
    """Check whether the session belongs to a logged-in administrator.

    Args:
        request: The FastAPI request object.

    Returns:
        bool: True if the admin flag is set in the session.
    """
    return bool(request.session.get("is_admin"))


def login_admin(request: Request, password: str) -> bool:
    """Set the admin flag when the password matches.

    Args:
        request: The FastAPI request object.
        password: Password submitted by the user.

    Returns:
        bool: True if the login succeeded.
    """
    if password != settings.ADMIN_PASSWORD:
        return False
    request.session["is_admin"] = True
    return True


def logout_admin(request: Request) -> None:
    """Clear the session."""
    request.session.clear()


def require_admin(request: Request) -> None:
    """Dependency rejecting requests without an admin session.

    Args:
        request: The FastAPI request object.

    Raises:
        HTTPException: 401 if the caller is not logged in.
    """
    if not is_admin(request):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Non autorisé")
