from fastapi import APIRouter, Depends, status

from src.api.routes.auth import UserData, UserResponse
from src.app.use_cases.auth import CurrentUser
from src.depends import get_current_user

router = APIRouter(tags=["User"])


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserResponse)
async def get_me(current_user: CurrentUser = Depends(get_current_user)):
    """
    Current User

    Returns the user identified by the bearer token.

    Raises:
        - 401 Unauthorized: Missing, invalid, expired or stale token
    """
    return UserResponse(status="success", data=UserData(user=current_user.user))
