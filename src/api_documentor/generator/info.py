"""General API information shown in rendered documentation."""

from pydantic import BaseModel, ConfigDict, Field


class ApiInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = "API Documentation"
    description: str = "Generated API documentation"
    version: str = "1.0.0"
    base_url: str | None = Field(default=None, alias="baseUrl")
