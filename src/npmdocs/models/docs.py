from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class PackageDocumentation(BaseModel):
    """Normalised documentation record for a single npm package.

    Attributes are snake_case; the serialised form (cache rows and tool
    output) uses the camelCase names, e.g. ``devDependencies``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    version: str = "unknown"
    description: str = ""
    homepage: str | None = None
    repository: str | None = None
    author: str | None = None
    license: str | None = None
    keywords: list[str] | None = None
    dependencies: dict[str, str] | None = None
    dev_dependencies: dict[str, str] | None = None
    readme: str | None = None  # Marker only; the text lives in readme_content
    readme_content: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("package name must not be empty")
        return v

    def to_json(self) -> str:
        """Serialise for storage, omitting absent optional fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def to_output(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
