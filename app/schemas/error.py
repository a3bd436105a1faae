from pydantic import BaseModel


class ErrorResponse(BaseModel):
    message: str


class MessageResponse(BaseModel):
    message: str
