from pydantic import BaseModel


class BinaryData(BaseModel):
    """Content and MIME type of a media resource."""

    data: bytes | None = None
    mime_type: str | None = None
