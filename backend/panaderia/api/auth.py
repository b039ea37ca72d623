"""
Authentication API endpoints
- Registration and login (bcrypt password hashes)
- Logout and profile for the logged-in user
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from passlib.context import CryptContext

from panaderia.core.auth import (
    TokenUser,
    create_access_token,
    get_current_user,
    get_current_user_optional,
)
from panaderia.core.database import Database, get_database
from panaderia.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Authentication"])

# Password hashing context (bcrypt, cost 10 to match existing accounts)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

MIN_PASSWORD_LENGTH = 6


# =============================================================================
# Pydantic Models
# =============================================================================

class Credentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


def get_user_repository(db: Database = Depends(get_database)) -> UserRepository:
    return UserRepository(db)


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/registro")
def register(data: Credentials, repo: UserRepository = Depends(get_user_repository)):
    """Register a new (non-admin) user"""
    if not data.username or not data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Usuario y contraseña son requeridos"
        )

    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres"
        )

    if repo.find_by_username(data.username):
        logger.info(f"[REGISTRO] Usuario ya existe: {data.username}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El usuario ya existe")

    user_id = repo.create(data.username, pwd_context.hash(data.password), is_admin=False)
    if user_id is None:
        # Lost a race with a concurrent registration of the same name
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El usuario ya existe")

    logger.info(f"[REGISTRO] Usuario registrado: {data.username} (ID: {user_id})")
    return {
        "success": True,
        "mensaje": "Usuario registrado correctamente. Ya puedes iniciar sesión."
    }


@router.post("/login")
def login(data: Credentials, repo: UserRepository = Depends(get_user_repository)):
    """Verify credentials and return a bearer token"""
    user = repo.find_by_username(data.username) if data.username else None

    if not user or not data.password or not pwd_context.verify(data.password, user['password']):
        logger.info(f"[LOGIN] Credenciales incorrectas para: {data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario o contraseña incorrecta"
        )

    is_admin = bool(user['admin'])
    token = create_access_token(user['id'], user['username'], is_admin)

    logger.info(f"[LOGIN] Login exitoso - Usuario: {user['username']}, Admin: {is_admin}")
    return {
        "mensaje": "Has iniciado sesión correctamente",
        "redirect": "/index2.html",
        "isAdmin": is_admin,
        "access_token": token,
        "token_type": "bearer",
    }


@router.post("/logout")
async def logout(user: Optional[TokenUser] = Depends(get_current_user_optional)):
    """Tokens are stateless: the client just drops it"""
    logger.info(f"[LOGOUT] Usuario: {user.username if user else None}")
    return {"mensaje": "Has cerrado sesión"}


@router.get("/perfil")
async def profile(user: TokenUser = Depends(get_current_user)):
    """Profile of the logged-in user"""
    return {
        "id": user.id,
        "usuario": user.username,
        "isAdmin": user.is_admin,
    }
