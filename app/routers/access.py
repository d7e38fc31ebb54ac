# app/routers/access.py
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.auth import get_auth_session
from app.core.route_guard import VIEW_ROLES, GuardDecision, evaluate_view
from app.core.session import AuthSession

router = APIRouter(prefix="/access", tags=["Access"])


@router.get("/{view}", response_model=GuardDecision)
def check_view_access(
    view: str,
    auth: AuthSession = Depends(get_auth_session),
):
    """
    Tell the client whether the caller may open a protected view.

    Never fails for a denied caller: the decision carries the guard state
    and the fallback view to render instead (sign-in, loading,
    access-denied or pending-approval).

    Views: cart, orders, profile, consumer-dashboard, vendor-dashboard, admin.
    """
    if view not in VIEW_ROLES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown view: {view}",
        )
    return evaluate_view(auth.user_id, auth.profile, view)
