import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from mockhire.core.rate_limit import login_rate_limit
from mockhire.core.security import hash_password, verify_password, create_user_token, normalize_email
from mockhire.db.models.user import User, UserRole
from mockhire.db.session import atomic, get_db
from mockhire.schemas.auth import SignupRequest, SignupResponse, TokenResponse
from mockhire.services.user_block_service import ensure_not_blocked

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(request: SignupRequest, db: Session = Depends(get_db)):
    email = normalize_email(request.email)
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(
        full_name=request.full_name,
        email=email,
        password_hash=hash_password(request.password),
        role=UserRole(request.role),
    )
    with atomic(db):
        db.add(user)

    logger.info(f"User registered: id={user.id}, role={user.role.value}")
    return SignupResponse(message="User created successfully", user_id=user.id, role=user.role.value)


@router.post("/login", response_model=TokenResponse, dependencies=[Depends(login_rate_limit)])
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # OAuth2 form field "username" carries the email
    user = db.query(User).filter(User.email == normalize_email(form_data.username)).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    ensure_not_blocked(db, user.id)

    return TokenResponse(access_token=create_user_token(user.id, UserRole(user.role).value))
