import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """An uploaded file; `content` holds the extracted text when there is any."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    size: int
    upload_date: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        alias="uploadDate",
    )
    filename: str
    content: str = ""
