from pydantic import BaseModel


class StreamingLoginIn(BaseModel):
    # Optional here so a missing login is reported by the domain as a 400
    login: str | None = None
