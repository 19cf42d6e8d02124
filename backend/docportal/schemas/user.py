"""Esquemas Pydantic de autenticação e administração de usuários."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from docportal.schemas.common import RoleLiteral


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class MeOut(BaseModel):
    id: str
    email: str
    role: Optional[RoleLiteral] = None
    permissions: Dict[str, bool]


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: MeOut


class AdminUserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6)
    role: RoleLiteral


class RoleUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: RoleLiteral


class AdminUserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Optional[EmailStr] = None
    role: Optional[RoleLiteral] = None


class AdminUserOut(BaseModel):
    id: str
    email: str
    role: Optional[RoleLiteral] = None
    role_id: Optional[str] = None
    created_at: Optional[datetime] = None


class AdminUserList(BaseModel):
    users: List[AdminUserOut]


class AdminUserCreated(BaseModel):
    id: str


class SuccessOut(BaseModel):
    success: bool = True


class UserImportRow(BaseModel):
    # Validada linha a linha no serviço, para que uma linha ruim não derrube o lote.
    email: str = ""
    password: str = ""
    role: str = ""


class UserImportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    users: List[UserImportRow] = Field(min_length=1, max_length=500)


class UserImportResult(BaseModel):
    success: int
    failed: int
    errors: List[str]
