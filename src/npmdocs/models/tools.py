from __future__ import annotations

from pydantic import BaseModel, field_validator

# npm refuses package names longer than this
MAX_PACKAGE_NAME_LENGTH = 214


def _validate_package_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("package_name must not be empty")
    if len(v) > MAX_PACKAGE_NAME_LENGTH:
        raise ValueError(f"package_name must be at most {MAX_PACKAGE_NAME_LENGTH} characters")
    return v


class GetPackageDocsInput(BaseModel):
    package_name: str
    force_fresh: bool = False

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        return _validate_package_name(v)


class CheckCacheInput(BaseModel):
    package_name: str

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        return _validate_package_name(v)


class CheckCacheOutput(BaseModel):
    package_name: str
    cached: bool


class ClearCacheInput(BaseModel):
    package_name: str | None = None

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _validate_package_name(v)


class ClearCacheOutput(BaseModel):
    package_name: str | None  # None when the whole cache was cleared
    cleared: int
