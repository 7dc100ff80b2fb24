"""Conversions between METS header/TYPE attributes and model values."""

import logging

from schemas import codes
from schemas.mets import MetsAgent, MetsHeader
from schemas.package import Agent
from schemas.report import ValidationReport
from schemas.vocabulary import ContentCategory, ContentType, CreatorType, IPRole

from . import registry
from .constants import METS_TYPE_SEPARATOR, REPRESENTATION_TYPE_PREFIX
from .profiles import Profile

logger = logging.getLogger(__name__)


def agents_from_header(header: MetsHeader) -> list[Agent]:
    agents = []
    for agent in header.agents:
        creator_type, other_type = registry.parse_creator_type(agent.type)
        agents.append(
            Agent(
                name=agent.name,
                role=agent.role or "CREATOR",
                other_role=agent.other_role,
                type=creator_type,
                other_type=agent.other_type or other_type,
                note=agent.notes[0] if agent.notes else None,
            )
        )
    return agents


def agents_to_header(agents: list[Agent]) -> list[MetsAgent]:
    return [
        MetsAgent(
            role=agent.role,
            other_role=agent.other_role,
            type=agent.type.value,
            other_type=agent.other_type if agent.type is CreatorType.OTHER else None,
            name=agent.name,
            notes=[agent.note] if agent.note else [],
        )
        for agent in agents
    ]


def parse_package_type(
    raw: str | None,
    profile: Profile,
    report: ValidationReport,
) -> tuple[IPRole, ContentType]:
    """Split a package METS TYPE into role and content type.

    The common profile expects ``<role>:<content type>`` (e.g. ``SIP:MIXED``).
    Legacy packages declare a template URN whose last segment names the
    content type; they are always SIPs.
    """
    source = f"mets[TYPE={raw!r}]"
    if profile.classify_metadata:
        segment = (raw or "").rsplit(METS_TYPE_SEPARATOR, 1)[-1]
        content_type, recognized = registry.parse_content_type(
            segment, default=profile.default_content_type
        )
        if not recognized:
            report.warn(
                codes.UNKNOWN_CONTENT_TYPE,
                f"Content type {segment!r} not recognized; using "
                f"{profile.default_content_type.value}",
                source=source,
            )
        return IPRole.SIP, content_type

    role_part, _, content_part = (raw or "").partition(METS_TYPE_SEPARATOR)
    role = registry.parse_role(role_part)
    if role is None or not content_part:
        report.error(codes.MAIN_METS_INVALID_TYPE, source=source)
        if role is None:
            role = IPRole.SIP
        if not content_part:
            return role, ContentType(category=ContentCategory.OTHER, other_value=raw or None)

    content_type, recognized = registry.parse_content_type(content_part)
    if not recognized:
        report.warn(
            codes.UNKNOWN_CONTENT_TYPE,
            f"Content type {content_part!r} not recognized",
            source=source,
        )
    return role, content_type


def parse_representation_type(
    raw: str | None,
    report: ValidationReport,
    require_parts: bool = False,
) -> ContentType:
    """Content type from a representation METS TYPE (``representation:<type>``)."""
    source = f"mets[TYPE={raw!r}]"
    prefix, _, content_part = (raw or "").partition(METS_TYPE_SEPARATOR)
    if prefix.strip().lower() != REPRESENTATION_TYPE_PREFIX:
        report.error(codes.REPRESENTATION_METS_INVALID_TYPE, source=source)
        return ContentType(category=ContentCategory.OTHER, other_value=raw or None)
    if not content_part:
        if require_parts:
            report.error(codes.REPRESENTATION_METS_INVALID_TYPE, source=source)
        return ContentType(category=ContentCategory.OTHER)

    content_type, recognized = registry.parse_content_type(content_part)
    if not recognized:
        report.warn(
            codes.UNKNOWN_CONTENT_TYPE,
            f"Content type {content_part!r} not recognized",
            source=source,
        )
    return content_type


def package_type(role: IPRole, content_type: ContentType) -> str:
    return f"{role.value}{METS_TYPE_SEPARATOR}{content_type.as_string()}"


def representation_type(content_type: ContentType) -> str:
    return f"{REPRESENTATION_TYPE_PREFIX}{METS_TYPE_SEPARATOR}{content_type.as_string()}"
