# jobify/api/v1/auth.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pymongo.errors import DuplicateKeyError

from jobify.api.v1.schemas import LoginIn, RegisterIn, UserUpdate, dump_user, normalize_email
from jobify.core.config import settings
from jobify.core.permissions import check_role, ensure_owner
from jobify.db.documents import Role, User, as_object_id
from jobify.services.auth import create_access_token, decode_access_token, hash_password, verify_password
from jobify.services.storage import ResumeStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["users"])

COOKIE_NAME = "jwt"

# auto_error=False so a missing header is a 401, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message, headers={"WWW-Authenticate": "Bearer"})


async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> User:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Please login to access this resource.")
    try:
        td = decode_access_token(credentials.credentials)
    except JWTError:
        raise _unauthorized("Invalid or expired token.")
    user_id = as_object_id(td.sub)
    if user_id is None:
        raise _unauthorized("Invalid or expired token.")
    user = await User.get(user_id)
    if not user:
        raise _unauthorized("User not found.")
    return user


def require_role(operation: str):
    """Dependency factory: authenticate, then apply ROLE_POLICY[operation]."""

    async def _dependency(user: User = Depends(get_current_user)) -> User:
        check_role(user, operation)
        return user

    return _dependency


def check_skillset(role: Role, skillset: list[str]) -> None:
    if role == Role.EMPLOYER and skillset:
        raise HTTPException(status_code=400, detail="Employers should not provide a skillset.")
    if role == Role.JOB_SEEKER and not skillset:
        raise HTTPException(status_code=400, detail="Job Seekers must provide at least one skill.")


@router.post("/register", status_code=201)
async def register(payload: RegisterIn):
    if payload.missing_fields():
        raise HTTPException(status_code=400, detail="Please provide all required fields.")
    email = normalize_email(payload.email)
    check_skillset(payload.role, payload.skillset)

    existing = await User.find_one(User.email == email)
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        name=payload.name,
        email=email,
        phone=payload.phone,
        password_hash=hash_password(payload.password),
        role=payload.role,
        skillset=payload.skillset if payload.role == Role.JOB_SEEKER else [],
    )
    try:
        await user.insert()
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email already registered")

    logger.info("Registered %s user %s", payload.role.value, user.id)
    return {"success": True, "message": "Registration successful.", "user": dump_user(user)}


@router.post("/login")
async def login(payload: LoginIn, response: Response, storage: ResumeStorage = Depends(get_storage)):
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Please provide email, password.")

    user = await User.find_one(User.email == payload.email.strip().lower())
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid Email or Password.")

    token = create_access_token(str(user.id))
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=settings.ACCESS_COOKIE_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    return {"success": True, "token": token, "user": dump_user(user, storage)}


@router.get("/logout")
async def logout(response: Response):
    response.delete_cookie(COOKIE_NAME, httponly=True, secure=settings.COOKIE_SECURE, samesite="lax")
    return {"success": True, "message": "Logged Out Successfully."}


@router.get("/me")
async def me(current_user: User = Depends(get_current_user), storage: ResumeStorage = Depends(get_storage)):
    return {"success": True, "user": dump_user(current_user, storage)}


@router.patch("/update/{user_id}")
async def update_user(
    user_id: str,
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    storage: ResumeStorage = Depends(get_storage),
):
    oid = as_object_id(user_id)
    target = await User.get(oid) if oid else None
    if not target:
        raise HTTPException(status_code=404, detail="User not found")
    ensure_owner(current_user, target.id)

    updates = payload.model_dump(exclude_unset=True)
    for key in ("name", "email", "phone"):
        if key in updates and updates[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be empty.")

    if "skillset" in updates:
        updates["skillset"] = updates["skillset"] or []
        check_skillset(target.role, updates["skillset"])

    if "email" in updates and updates["email"] != target.email:
        if await User.find_one(User.email == updates["email"]):
            raise HTTPException(status_code=400, detail="Email already registered")

    for key, value in updates.items():
        setattr(target, key, value)
    await target.save()

    return {"success": True, "user": dump_user(target, storage)}
