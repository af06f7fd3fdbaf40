from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class LimitsRules(BaseModel):
    name_max_length: int = Field(default=100, gt=0)
    description_max_length: int = Field(default=500, gt=0)
    comment_max_length: int = Field(default=500, gt=0)
    item_title_max_length: int = Field(default=200, gt=0)
    search_max_length: int = Field(default=100, gt=0)


class PaginationRules(BaseModel):
    default_limit: int = Field(default=20, gt=0)
    max_limit: int = Field(default=100, gt=0)


class AccessRules(BaseModel):
    # role -> allowed actions; the owner is implicit and holds every action
    roles: dict[str, list[str]]
    # actions any actor may take on a public collection
    public_permissions: list[str]
    owner_only: list[str] = Field(default_factory=lambda: ["collection:update", "collection:delete"])


class StorageRules(BaseModel):
    busy_timeout_seconds: float = Field(default=5.0, gt=0)


class Rules(BaseModel):
    project: ProjectRules
    limits: LimitsRules = Field(default_factory=LimitsRules)
    pagination: PaginationRules = Field(default_factory=PaginationRules)
    access: AccessRules
    storage: StorageRules = Field(default_factory=StorageRules)
