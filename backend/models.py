"""Detection result models shared by the service and the HTTP layer."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ChildTheme(BaseModel):
    name: str
    parent: str


class ThemeInfo(BaseModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    author: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    uri: Optional[str] = None
    theme_url: Optional[str] = None
    detection_method: Optional[str] = None
    plugins: list[str] = Field(default_factory=list)
    child_theme: Optional[ChildTheme] = None
    wordpress_version: Optional[str] = None
    is_wordpress: bool


class DetectionResult(BaseModel):
    success: bool
    data: Optional[ThemeInfo] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_variant(self) -> "DetectionResult":
        if self.success:
            if self.data is None or self.error is not None:
                raise ValueError("a successful result carries data and no error")
            if not self.data.is_wordpress:
                raise ValueError("a successful result must be flagged is_wordpress")
        elif self.data is not None or not self.error:
            raise ValueError("a failed result carries an error message and no data")
        return self

    @classmethod
    def ok(cls, info: ThemeInfo) -> "DetectionResult":
        return cls(success=True, data=info)

    @classmethod
    def fail(cls, message: str) -> "DetectionResult":
        return cls(success=False, error=message)
