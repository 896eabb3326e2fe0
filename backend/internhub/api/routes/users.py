from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from internhub.api.deps import get_current_user, get_db, is_staff, require_admin, require_staff
from internhub.api.serializers import serialize_user
from internhub.models.entities import UserAccount
from internhub.schemas.api import UserOut, UserRoleIn

router = APIRouter(prefix="/users")


@router.get("/me", response_model=UserOut)
def get_me(user: UserAccount = Depends(get_current_user)):
    return serialize_user(user)


@router.get("", response_model=list[UserOut])
def list_users(
    _: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    users = db.query(UserAccount).order_by(UserAccount.created_at.desc()).all()
    return [serialize_user(user) for user in users]


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: UUID,
    current: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if current.id != user_id and not is_staff(current):
        raise HTTPException(status_code=403, detail="Not allowed")
    user = db.get(UserAccount, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return serialize_user(user)


@router.put("/{user_id}/role", response_model=UserOut, dependencies=[Depends(require_admin)])
def set_user_role(
    user_id: UUID,
    payload: UserRoleIn,
    db: Session = Depends(get_db),
):
    user = db.get(UserAccount, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    user.role = payload.role
    db.commit()
    db.refresh(user)
    return serialize_user(user)
