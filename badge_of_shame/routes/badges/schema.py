"""Schema definitions for Travis CI and GitHub payloads and the badge cache.

Only the fields the badge needs are modelled. Both the nested Travis v2 shape
and the older flattened shape are accepted, as are GitHub commits whose
``author`` is a bare login string.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

SUCCESS_STATE = "success"
PASSED_STATE = "passed"
PUSH_EVENT = "push"


class BuildSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repo_slug: Optional[str] = Field(default=None, validation_alias=AliasChoices("slug", "repo_slug"))
    last_build_id: int
    last_build_state: str

    @model_validator(mode="before")
    @classmethod
    def unwrap_repo(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("repo"), dict):
            return data["repo"]
        return data

    @property
    def is_success(self) -> bool:
        return self.last_build_state == SUCCESS_STATE


class Build(BaseModel):
    id: Optional[int] = None
    commit_id: Optional[int] = None
    event_type: Optional[str] = None
    state: Optional[str] = Field(default=None, validation_alias=AliasChoices("state", "status"))


class Commit(BaseModel):
    id: int
    sha: str


class BuildList(BaseModel):
    builds: list[Build]
    commits: list[Commit]


class Author(BaseModel):
    login: str
    html_url: str

    @model_validator(mode="before")
    @classmethod
    def flatten_author(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "login" in data:
            return data
        author = data.get("author")
        login = author.get("login") if isinstance(author, dict) else author
        return {"login": login, "html_url": data.get("html_url")}


class CacheEntry(BaseModel):
    last_build_id: int
    last_build_success: bool
    last_login: Optional[str] = None
    last_url: Optional[str] = None

    @model_validator(mode="after")
    def require_author_for_failures(self) -> "CacheEntry":
        if not self.last_build_success and (self.last_login is None or self.last_url is None):
            raise ValueError("A failed build entry needs last_login and last_url")
        return self
