from pydantic import BaseModel
from typing import Optional


class ContactRequest(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    interest: str = ""
    message: str = ""


class ContactResponse(BaseModel):
    success: bool
    id: Optional[int] = None
    error: Optional[str] = None


class NewsletterRequest(BaseModel):
    email: str = ""


class NewsletterResponse(BaseModel):
    success: bool
    message: str
