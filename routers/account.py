from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import Principal, get_principal
from schemas.account import AccountDeletedOut, AccountOut
from services.account_service import AccountService

router = APIRouter(prefix="/account", tags=["Account"])


@router.post("", response_model=AccountOut, status_code=201)
async def register_account(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    user = AccountService(db, principal).register()
    return AccountOut(user_id=user.id)


@router.delete("", response_model=AccountDeletedOut)
async def delete_account(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    return AccountDeletedOut(**AccountService(db, principal).delete_account())
