"""
Administrative endpoints for managing user roles.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from liftlog.api.dependencies import get_policy_engine, get_requester, store_unavailable
from liftlog.api.schemas import RoleUpdateRequest, RoleUpdateResponse
from liftlog.errors import AuthorizationDenied, StoreError
from liftlog.policy import PolicyEngine, Requester, Role

router = APIRouter()


@router.put("/admin/users/{user_id}/role", response_model=RoleUpdateResponse, status_code=status.HTTP_200_OK)
def update_user_role(
    user_id: str,
    payload: RoleUpdateRequest,
    requester: Requester = Depends(get_requester),
    policy: PolicyEngine = Depends(get_policy_engine),
) -> RoleUpdateResponse:
    """
    Grant or revoke the admin role for a user.

    Requires an authenticated admin.
    """

    try:
        role = policy.assign_role(requester, user_id, Role(payload.role))
    except AuthorizationDenied as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required") from exc
    except StoreError as exc:
        raise store_unavailable(exc) from exc

    return RoleUpdateResponse(user_id=user_id, role=role.value)
