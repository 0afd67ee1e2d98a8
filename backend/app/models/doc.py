import uuid

from pydantic import BaseModel, ConfigDict, Field

from app.core.clock import now_ms


class Doc(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    content: str
    category: str
    # public docs are class-wide, private ones belong to user_id
    is_public: bool = Field(default=False, alias="isPublic")
    user_id: str | None = Field(default=None, alias="userId")
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
    updated_at: int = Field(default_factory=now_ms, alias="updatedAt")
