"""
Frontmatter models

Pydantic schemas for the metadata blocks that head source and output
documents, and for the payload of <macro> blocks.
"""

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ValidationInfo, field_validator, model_validator

from .document import Platform


# Maximum number of topics accepted in a source document
MAX_TOPICS = 5


class Frontmatter(BaseModel):
    """
    Source document metadata

    Attributes:
        title: Article title
        emoji: Eye-catch emoji (Zenn)
        type: Article type, conventionally "tech" or "idea"
        topics: Topic tags, at most MAX_TOPICS (checked by the Parser)
        published: Whether the article is public
        only: Restrict compilation to one platform; None compiles both
    """
    title: str
    emoji: str
    type: str
    topics: List[str]
    published: bool
    only: Optional[Platform] = None

    @field_validator("only", mode="before")
    @classmethod
    def platform_normalize(cls, value: Any) -> Any:
        """Accept platform names case-insensitively (Zenn, zenn, ZENN)"""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @classmethod
    def default(cls) -> "Frontmatter":
        """Empty metadata used when the source block cannot be read"""
        return cls.model_construct(
            title="", emoji="", type="", topics=[], published=False, only=None
        )

    def platforms(self) -> List[Platform]:
        """Platforms this document compiles for, in build order"""
        if self.only is not None:
            return [self.only]
        return [Platform.QIITA, Platform.ZENN]


class QiitaFrontmatter(BaseModel):
    """
    Qiita article metadata

    Field order is the order written to the output file. Fields other than
    title, tags and ignorePublish are assigned by Qiita and preserved from
    the previously published file when one exists.
    """
    title: str = ""
    tags: List[str] = []
    private: bool = False
    updated_at: str = ""
    id: Optional[str] = None
    organization_url_name: Optional[str] = None
    slide: bool = False
    ignorePublish: bool = False

    @field_validator("updated_at", "id", "organization_url_name", mode="before")
    @classmethod
    def scalar_stringify(cls, value: Any, info: ValidationInfo) -> Any:
        """YAML may load timestamps and numeric ids as non-strings"""
        if value is None and info.field_name == "updated_at":
            return ""
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class ZennFrontmatter(BaseModel):
    """Zenn article metadata, copied field by field from the source"""
    title: str
    emoji: str
    type: str
    topics: List[str]
    published: bool


class MacroSource(BaseModel):
    """
    Payload of a <macro> block before tokenization

    Keys are matched case-insensitively; a missing platform means that
    platform renders nothing for the macro.
    """
    zenn: Optional[str] = None
    qiita: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def keys_normalize(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {str(key).lower(): value for key, value in data.items()}
        return data
