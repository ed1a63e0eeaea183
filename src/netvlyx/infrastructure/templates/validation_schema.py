"""Pydantic validation models for template YAML files."""

from __future__ import annotations

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from netvlyx.domain.templates import METADATA_FIELDS

TEMPLATE_NAME_RE = r"^[a-z0-9-]+$"
SEMVER_RE = r"^\d+\.\d+\.\d+$"


def _strip_all(values: List[str]) -> List[str]:
    cleaned = [v.strip() for v in values]
    if any(not v for v in cleaned):
        raise ValueError("selector/marker lists must not contain empty entries")
    return cleaned


class FetchRulesModel(BaseModel):
    external: Literal["fallback", "first", "only", "never"] = "fallback"
    external_first_hosts: List[str] = Field(default_factory=list)
    min_html_length: int = 0
    trailing_slash: bool = False

    @field_validator("min_html_length")
    @classmethod
    def _validate_min_length(cls, v: int) -> int:
        if v < 0:
            raise ValueError("fetch.min_html_length must be >= 0")
        return v


class LabelRuleModel(BaseModel):
    """One metadata label; ``label`` is a regular-expression fragment."""

    label: str
    field: str

    @field_validator("field")
    @classmethod
    def _validate_field(cls, v: str) -> str:
        if v not in METADATA_FIELDS:
            raise ValueError(
                f"unknown metadata field '{v}' (expected one of {', '.join(METADATA_FIELDS)})"
            )
        return v

    @field_validator("label")
    @classmethod
    def _validate_label(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"label is not a valid pattern: {e}") from e
        return v


class LinkLabelRuleModel(BaseModel):
    selector: str
    label: str


class ScreenshotRulesModel(BaseModel):
    selectors: List[str] = Field(default_factory=list)
    trusted_hosts: List[str] = Field(
        default_factory=lambda: ["blogger.googleusercontent.com"]
    )
    other_markers: List[str] = Field(default_factory=list)
    exclude_markers: List[str] = Field(default_factory=list)
    scan_synopsis_block: bool = False
    keep_all: bool = False

    @model_validator(mode="after")
    def _validate_keep_all(self) -> "ScreenshotRulesModel":
        if self.keep_all and not self.selectors:
            raise ValueError("screenshots.keep_all requires 'selectors'")
        return self


class FieldRulesModel(BaseModel):
    content_scope: List[str] = Field(default_factory=list)
    title: Optional[List[str]] = None
    poster: List[str] = Field(default_factory=list)
    poster_exclude: List[str] = Field(default_factory=list)
    labels: List[LabelRuleModel] = Field(default_factory=list)
    synopsis_markers: List[str] = Field(default_factory=list)
    synopsis_stops: List[str] = Field(default_factory=list)
    screenshots: ScreenshotRulesModel = Field(default_factory=ScreenshotRulesModel)
    watch_online: List[str] = Field(default_factory=list)

    @field_validator("content_scope", "poster", "watch_online", "synopsis_markers")
    @classmethod
    def _validate_lists(cls, v: List[str]) -> List[str]:
        return _strip_all(v)


class SectionRulesModel(BaseModel):
    heading_selector: str = "h3, h4, h5"
    stop_selector: str = "h3, h4, h5, hr"
    backward_hops: int = 10
    button_selector: Optional[str] = None
    anchor_markers: List[str] = Field(default_factory=list)
    link_labels: List[LinkLabelRuleModel] = Field(default_factory=list)
    fallback_flat: bool = True

    @field_validator("backward_hops")
    @classmethod
    def _validate_hops(cls, v: int) -> int:
        if v < 1:
            raise ValueError("sections.backward_hops must be >= 1")
        return v


class EpisodeRulesModel(BaseModel):
    enabled: bool = False
    section_markers: Optional[List[str]] = None
    max_section_siblings: int = 20
    follow_siblings: int = 3

    @field_validator("section_markers")
    @classmethod
    def _lowercase_markers(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [m.lower() for m in _strip_all(v)]


class DriveRulesModel(BaseModel):
    episode_heading: str = "h4"
    sibling_window: int = 5
    content_links: Optional[List[str]] = None
    alternative_links: Optional[List[str]] = None


class LinkPageRulesModel(BaseModel):
    heading_selector: Optional[str] = None
    buttons_selector: Optional[str] = None
    vcloud_url_markers: Optional[List[str]] = None
    vcloud_name_markers: Optional[List[str]] = None
    hubcloud_url_markers: Optional[List[str]] = None
    hubcloud_name_markers: Optional[List[str]] = None

    @field_validator("vcloud_name_markers", "hubcloud_name_markers")
    @classmethod
    def _lowercase_names(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [m.lower() for m in _strip_all(v)]


class LinkTypeRuleModel(BaseModel):
    name: str = Field(pattern=r"^[a-z0-9]+$")
    markers: List[str] = Field(min_length=1)

    @field_validator("markers")
    @classmethod
    def _validate_markers(cls, v: List[str]) -> List[str]:
        return _strip_all(v)


class VlyxRulesModel(BaseModel):
    quality_heading: str = "h3, h5"
    link_types: Optional[List[LinkTypeRuleModel]] = None

    @field_validator("link_types")
    @classmethod
    def _unique_types(
        cls, v: Optional[List[LinkTypeRuleModel]]
    ) -> Optional[List[LinkTypeRuleModel]]:
        if v is None:
            return None
        if not v:
            raise ValueError("vlyx.link_types must not be empty")
        names = [rule.name for rule in v]
        if len(names) != len(set(names)):
            raise ValueError("vlyx.link_types names must be unique")
        return v


# === Main Template Definition ===


class TemplateDefinitionPydantic(BaseModel):
    """
    Pydantic validation model for YAML templates.

    After validation, this is converted to domain.templates.TemplateDefinition.
    """

    name: str = Field(pattern=TEMPLATE_NAME_RE)
    version: str = Field(pattern=SEMVER_RE)
    family: Literal["page", "drive", "links", "vlyx"] = "page"
    description: str = ""
    hosts: List[str] = Field(default_factory=list)
    allowed_domains: List[str] = Field(default_factory=list)

    fetch: FetchRulesModel = Field(default_factory=FetchRulesModel)
    fields: FieldRulesModel = Field(default_factory=FieldRulesModel)
    sections: SectionRulesModel = Field(default_factory=SectionRulesModel)
    episodes: EpisodeRulesModel = Field(default_factory=EpisodeRulesModel)
    drive: DriveRulesModel = Field(default_factory=DriveRulesModel)
    links: LinkPageRulesModel = Field(default_factory=LinkPageRulesModel)
    vlyx: VlyxRulesModel = Field(default_factory=VlyxRulesModel)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("hosts")
    @classmethod
    def _lowercase_hosts(cls, v: List[str]) -> List[str]:
        return [h.lower() for h in _strip_all(v)]

    @model_validator(mode="after")
    def _validate_family(self) -> "TemplateDefinitionPydantic":
        if self.family != "page" and self.episodes.enabled:
            raise ValueError(
                f"{self.family} templates use '{self.family}' rules, not 'episodes'"
            )
        return self
