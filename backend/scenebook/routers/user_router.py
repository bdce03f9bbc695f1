from fastapi import APIRouter, Depends

from scenebook.auth.dependencies import get_current_user
from scenebook.models.user import User
from scenebook.schemas.user import UserResponse

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "User not found"}}
)

@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    current_user: User = Depends(get_current_user)
):
    """
    Get the acting user's id, name and email.
    """
    return current_user
