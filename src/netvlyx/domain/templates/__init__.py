from .template_schema import (
    METADATA_FIELDS,
    DriveRules,
    EpisodeRules,
    ExternalPlacement,
    FetchRules,
    FieldRules,
    LabelRule,
    LinkLabelRule,
    LinkPageRules,
    LinkTypeRule,
    ScreenshotRules,
    SectionRules,
    TemplateDefinition,
    TemplateFamily,
    VlyxRules,
)

__all__ = [
    "METADATA_FIELDS",
    "DriveRules",
    "EpisodeRules",
    "ExternalPlacement",
    "FetchRules",
    "FieldRules",
    "LabelRule",
    "LinkLabelRule",
    "LinkPageRules",
    "LinkTypeRule",
    "ScreenshotRules",
    "SectionRules",
    "TemplateDefinition",
    "TemplateFamily",
    "VlyxRules",
]
