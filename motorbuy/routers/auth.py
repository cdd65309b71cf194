from fastapi import APIRouter, Depends

from ..dependencies import get_current_user
from ..schemas.auth import AuthUser, RoleOut

# Sign-in and sign-up happen against Supabase Auth directly; this API only
# resolves the bearer token it is handed.
router = APIRouter(tags=["auth"])


@router.get("/auth/me", response_model=AuthUser)
def me(user=Depends(get_current_user)):
    return user


@router.get("/roles", response_model=RoleOut)
def get_role(user=Depends(get_current_user)):
    return {"role": user["role"]}
