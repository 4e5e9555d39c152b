from pydantic import BaseModel, EmailStr, Field

class PasswordResetMailIn(BaseModel):
    email: EmailStr
    name: str = Field(default="", max_length=200)

class PasswordResetMailOut(BaseModel):
    delivered: bool
