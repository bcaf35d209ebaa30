from pydantic import BaseModel, EmailStr, Field, field_validator

# bcrypt only hashes the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


class UserRegister(BaseModel):
    name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class UserProfile(BaseModel):
    id: int
    name: str
    last_name: str
    email: str
    role: str

    class Config:
        from_attributes = True


class AuthResponse(UserProfile):
    token: str


class Token(BaseModel):
    access_token: str
    token_type: str
