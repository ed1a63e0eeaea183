"""Adapters to convert Pydantic validation models to domain models."""

from __future__ import annotations

from netvlyx.domain.templates import template_schema as domain
from netvlyx.infrastructure.templates import validation_schema as infra


def to_domain_fetch_rules(pydantic: infra.FetchRulesModel) -> domain.FetchRules:
    return domain.FetchRules(
        external=pydantic.external,
        external_first_hosts=tuple(pydantic.external_first_hosts),
        min_html_length=pydantic.min_html_length,
        trailing_slash=pydantic.trailing_slash,
    )


def to_domain_screenshot_rules(
    pydantic: infra.ScreenshotRulesModel,
) -> domain.ScreenshotRules:
    return domain.ScreenshotRules(
        selectors=tuple(pydantic.selectors),
        trusted_hosts=tuple(pydantic.trusted_hosts),
        other_markers=tuple(pydantic.other_markers),
        exclude_markers=tuple(pydantic.exclude_markers),
        scan_synopsis_block=pydantic.scan_synopsis_block,
        keep_all=pydantic.keep_all,
    )


def to_domain_field_rules(pydantic: infra.FieldRulesModel) -> domain.FieldRules:
    """Convert Pydantic FieldRulesModel; an omitted title list keeps the default."""
    extra = {} if pydantic.title is None else {"title": tuple(pydantic.title)}
    return domain.FieldRules(
        content_scope=tuple(pydantic.content_scope),
        poster=tuple(pydantic.poster),
        poster_exclude=tuple(pydantic.poster_exclude),
        labels=tuple(
            domain.LabelRule(label=rule.label, field=rule.field) for rule in pydantic.labels
        ),
        synopsis_markers=tuple(pydantic.synopsis_markers),
        synopsis_stops=tuple(pydantic.synopsis_stops),
        screenshots=to_domain_screenshot_rules(pydantic.screenshots),
        watch_online=tuple(pydantic.watch_online),
        **extra,
    )


def to_domain_section_rules(pydantic: infra.SectionRulesModel) -> domain.SectionRules:
    return domain.SectionRules(
        heading_selector=pydantic.heading_selector,
        stop_selector=pydantic.stop_selector,
        backward_hops=pydantic.backward_hops,
        button_selector=pydantic.button_selector,
        anchor_markers=tuple(pydantic.anchor_markers),
        link_labels=tuple(
            domain.LinkLabelRule(selector=rule.selector, label=rule.label)
            for rule in pydantic.link_labels
        ),
        fallback_flat=pydantic.fallback_flat,
    )


def to_domain_episode_rules(pydantic: infra.EpisodeRulesModel) -> domain.EpisodeRules:
    extra = (
        {}
        if pydantic.section_markers is None
        else {"section_markers": tuple(pydantic.section_markers)}
    )
    return domain.EpisodeRules(
        enabled=pydantic.enabled,
        max_section_siblings=pydantic.max_section_siblings,
        follow_siblings=pydantic.follow_siblings,
        **extra,
    )


def to_domain_drive_rules(pydantic: infra.DriveRulesModel) -> domain.DriveRules:
    extra: dict[str, tuple[str, ...]] = {}
    if pydantic.content_links is not None:
        extra["content_links"] = tuple(pydantic.content_links)
    if pydantic.alternative_links is not None:
        extra["alternative_links"] = tuple(pydantic.alternative_links)
    return domain.DriveRules(
        episode_heading=pydantic.episode_heading,
        sibling_window=pydantic.sibling_window,
        **extra,
    )


def to_domain_link_page_rules(
    pydantic: infra.LinkPageRulesModel,
) -> domain.LinkPageRules:
    extra: dict[str, object] = {}
    for key in ("heading_selector", "buttons_selector"):
        value = getattr(pydantic, key)
        if value is not None:
            extra[key] = value
    for key in (
        "vcloud_url_markers",
        "vcloud_name_markers",
        "hubcloud_url_markers",
        "hubcloud_name_markers",
    ):
        value = getattr(pydantic, key)
        if value is not None:
            extra[key] = tuple(value)
    return domain.LinkPageRules(**extra)  # type: ignore[arg-type]


def to_domain_vlyx_rules(pydantic: infra.VlyxRulesModel) -> domain.VlyxRules:
    """Convert Pydantic VlyxRulesModel; omitted link types keep the default order."""
    if pydantic.link_types is None:
        return domain.VlyxRules(quality_heading=pydantic.quality_heading)
    return domain.VlyxRules(
        quality_heading=pydantic.quality_heading,
        link_types=tuple(
            domain.LinkTypeRule(name=rule.name, markers=tuple(rule.markers))
            for rule in pydantic.link_types
        ),
    )


def to_domain_template_definition(
    pydantic: infra.TemplateDefinitionPydantic,
) -> domain.TemplateDefinition:
    """Convert Pydantic TemplateDefinitionPydantic to domain model."""
    return domain.TemplateDefinition(
        name=pydantic.name,
        version=pydantic.version,
        family=pydantic.family,
        description=pydantic.description,
        hosts=tuple(pydantic.hosts),
        allowed_domains=tuple(pydantic.allowed_domains),
        fetch=to_domain_fetch_rules(pydantic.fetch),
        fields=to_domain_field_rules(pydantic.fields),
        sections=to_domain_section_rules(pydantic.sections),
        episodes=to_domain_episode_rules(pydantic.episodes),
        drive=to_domain_drive_rules(pydantic.drive),
        links=to_domain_link_page_rules(pydantic.links),
        vlyx=to_domain_vlyx_rules(pydantic.vlyx),
    )
