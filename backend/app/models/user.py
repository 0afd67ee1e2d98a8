import uuid

from pydantic import BaseModel, ConfigDict, Field

from app.core.clock import now_ms

CURRICULUM_TRACKS: tuple[str, ...] = (
    "Réseaux",
    "Cybersécurité",
    "Programmation",
    "Systèmes Linux",
    "Électronique",
    "Autre",
)

ADMIN_CATEGORY = "Administration"


class ScoreRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    score: int | float = Field(ge=0)
    date: int = Field(default_factory=now_ms)


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str
    password: str
    name: str
    category: str
    validated: bool = False
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
    scores: list[ScoreRecord] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return self.category == ADMIN_CATEGORY

    def public(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"password"})
