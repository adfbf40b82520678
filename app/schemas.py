from pydantic import BaseModel, Field, field_validator
from typing import List

from app.fetch.base import FetchFailure, FetchResult

class FetchRequest(BaseModel):
    urls: List[str] = Field(default_factory=list, description="URLs to fetch concurrently")

    @field_validator("urls", mode="before")
    @classmethod
    def null_is_empty(cls, v):
        return [] if v is None else v

class FetchResultItem(BaseModel):
    url: str
    data: str = Field(default="", description="Response body, empty on failure")
    error: str = Field(default="", description="Failure description, empty on success")

    @classmethod
    def from_result(cls, result: FetchResult) -> "FetchResultItem":
        if isinstance(result, FetchFailure):
            return cls(url=result.url, error=result.error)
        return cls(url=result.url, data=result.data)
