"""
Typed content blocks.

A page translation stores its body as an ordered list of plain JSON objects,
each carrying a ``type`` discriminant. The models below describe the known
variants; anything else is kept as a ``GenericBlock`` so content written by a
newer schema still round-trips through the service untouched.

Stored keys are camelCase (``serviceId``, ``ctaPrimary`` ...); the models
expose snake_case attributes through aliases.
"""
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

NonEmptyStr = Annotated[str, Field(min_length=1)]


class _Item(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class Link(_Item):
    text: NonEmptyStr
    href: NonEmptyStr


class BaseBlock(_Item):
    """Parent of every block variant. ``type`` is the discriminant."""

    type: str


class GenericBlock(BaseBlock):
    """Block whose discriminant this version does not know about."""


# ── hero / intro / about ───────────────────────────────────────────────────


class HeroBlock(BaseBlock):
    type: Literal["hero"] = "hero"
    tagline: NonEmptyStr
    subtagline: Optional[str] = None
    cta_primary: Optional[Link] = None
    cta_secondary: Optional[Link] = None
    quick_links: Optional[List[Link]] = None


class IntroBlock(BaseBlock):
    type: Literal["intro"] = "intro"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    headline_accent: Optional[str] = None
    text: Optional[str] = None
    image: Optional[str] = None


class Pillar(_Item):
    title: NonEmptyStr
    description: NonEmptyStr
    icon: Optional[str] = None


class AboutBlock(BaseBlock):
    type: Literal["about"] = "about"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    headline_accent: Optional[str] = None
    mission: NonEmptyStr
    pillars: Optional[List[Pillar]] = None


class StoryBlock(BaseBlock):
    type: Literal["story"] = "story"
    title: Optional[str] = None
    paragraphs: List[str] = Field(..., min_length=1)


class StorylineBeat(_Item):
    id: str
    kicker: Optional[str] = None
    title: NonEmptyStr
    description: NonEmptyStr
    year: Optional[str] = None


class StorylineBlock(BaseBlock):
    type: Literal["storyline"] = "storyline"
    eyebrow: Optional[str] = None
    title: NonEmptyStr
    text: Optional[str] = None
    beats: List[StorylineBeat] = Field(..., min_length=1)
    cta: Optional[Link] = None


class Milestone(_Item):
    year: NonEmptyStr
    event: NonEmptyStr


class MilestonesBlock(BaseBlock):
    type: Literal["milestones"] = "milestones"
    milestones: List[Milestone] = Field(..., min_length=1)


class TitledItem(_Item):
    title: NonEmptyStr
    description: NonEmptyStr
    icon: Optional[str] = None


class ValuesBlock(BaseBlock):
    type: Literal["values"] = "values"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    values: List[TitledItem] = Field(..., min_length=1)


class TeamMember(_Item):
    name: NonEmptyStr
    role: NonEmptyStr
    bio: Optional[str] = None
    image: Optional[str] = None


class TeamBlock(BaseBlock):
    type: Literal["team"] = "team"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    members: List[TeamMember] = Field(..., min_length=1)


# ── services ───────────────────────────────────────────────────────────────


class ServiceFeature(_Item):
    title: NonEmptyStr
    description: NonEmptyStr
    features: Optional[List[str]] = None
    cta: Optional[Link] = None


class ServicesBlock(BaseBlock):
    type: Literal["services"] = "services"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    services: List[ServiceFeature] = Field(..., min_length=1)


class ServiceDetail(_Item):
    title: NonEmptyStr
    description: NonEmptyStr
    tags: Optional[List[str]] = None


class ServiceDetailsBlock(BaseBlock):
    type: Literal["serviceDetails"] = "serviceDetails"
    service_id: NonEmptyStr
    title: NonEmptyStr
    description: NonEmptyStr
    features: List[str] = Field(default_factory=list)
    cta_text: Optional[str] = None
    cta_href: Optional[str] = None
    details: Optional[List[ServiceDetail]] = None
    image: Optional[str] = None


class InteractiveService(_Item):
    id: NonEmptyStr
    title: NonEmptyStr
    short_title: Optional[str] = None
    description: NonEmptyStr
    features: Optional[List[str]] = None
    icon: Optional[str] = None


class InteractiveServicesBlock(BaseBlock):
    type: Literal["interactiveServices"] = "interactiveServices"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    description: Optional[str] = None
    services: List[InteractiveService] = Field(..., min_length=1)
    cta_text: Optional[str] = None
    cta_href: Optional[str] = None


class ProcessBlock(BaseBlock):
    type: Literal["process"] = "process"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    steps: List[TitledItem] = Field(..., min_length=1)


class HowItWorksBlock(BaseBlock):
    type: Literal["howItWorks"] = "howItWorks"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    description: Optional[str] = None
    steps: List[TitledItem] = Field(..., min_length=2, max_length=5)


class WhyUsBlock(BaseBlock):
    type: Literal["whyUs"] = "whyUs"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    description: Optional[str] = None
    items: List[TitledItem] = Field(..., min_length=1, max_length=5)


class Area(_Item):
    name: NonEmptyStr
    description: Optional[str] = None
    image: Optional[str] = None


class AreasBlock(BaseBlock):
    type: Literal["areas"] = "areas"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    description: Optional[str] = None
    areas: List[Area] = Field(..., min_length=1)


class PackageCard(_Item):
    title: str
    duration: str
    price: str
    includes: List[str]
    itinerary: Optional[List[str]] = None


class PackagesBlock(BaseBlock):
    type: Literal["packages"] = "packages"
    eyebrow: Optional[str] = None
    headline: str
    packages: List[PackageCard]


# ── stats / insights ───────────────────────────────────────────────────────


class StatItem(_Item):
    label: NonEmptyStr
    value: NonEmptyStr
    note: Optional[str] = None


class InsightsBlock(BaseBlock):
    type: Literal["insights"] = "insights"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    subheadline: Optional[str] = None
    stats: Optional[List[StatItem]] = None
    cta_text: Optional[str] = None
    cta_href: Optional[str] = None


class StatsRowBlock(BaseBlock):
    type: Literal["statsRow"] = "statsRow"
    stats: List[StatItem] = Field(..., min_length=1)


class InsightItem(_Item):
    title: NonEmptyStr
    excerpt: NonEmptyStr
    date: Optional[str] = None
    image: Optional[str] = None
    href: Optional[str] = None


class InsightsListBlock(BaseBlock):
    type: Literal["insightsList"] = "insightsList"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    items: List[InsightItem] = Field(..., min_length=1)
    view_all_href: Optional[str] = None


# ── social proof ───────────────────────────────────────────────────────────


class Testimonial(_Item):
    quote: NonEmptyStr
    author: NonEmptyStr
    role: Optional[str] = None
    company: Optional[str] = None
    image: Optional[str] = None


class TestimonialsBlock(BaseBlock):
    type: Literal["testimonials"] = "testimonials"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    testimonials: List[Testimonial] = Field(..., min_length=1)


class LogoItem(_Item):
    name: NonEmptyStr
    logo: NonEmptyStr
    href: Optional[str] = None


class LogoGridBlock(BaseBlock):
    type: Literal["logoGrid"] = "logoGrid"
    eyebrow: Optional[str] = None
    headline: Optional[str] = None
    logos: List[LogoItem] = Field(..., min_length=1)


class PartnerEntry(_Item):
    name: NonEmptyStr
    location: Optional[str] = None
    specialty: Optional[str] = None
    region: Optional[str] = None
    logo: Optional[str] = None


class PartnersBlock(BaseBlock):
    type: Literal["partners"] = "partners"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    description: Optional[str] = None
    partners: Optional[List[PartnerEntry]] = None
    cta_text: Optional[str] = None
    cta_href: Optional[str] = None


class PartnersEmptyBlock(BaseBlock):
    type: Literal["partnersEmpty"] = "partnersEmpty"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    description: NonEmptyStr
    cta_text: Optional[str] = None
    cta_href: Optional[str] = None


# ── conversion ─────────────────────────────────────────────────────────────


class ContactBlock(BaseBlock):
    type: Literal["contact"] = "contact"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    description: Optional[str] = None
    show_form: bool = True
    show_map: bool = True


class CtaBlock(BaseBlock):
    type: Literal["cta"] = "cta"
    headline: NonEmptyStr
    description: Optional[str] = None
    primary_button: Optional[Link] = None
    secondary_button: Optional[Link] = None


class FaqItem(_Item):
    question: NonEmptyStr
    answer: NonEmptyStr


class FaqBlock(BaseBlock):
    type: Literal["faq"] = "faq"
    eyebrow: Optional[str] = None
    headline: NonEmptyStr
    description: Optional[str] = None
    items: List[FaqItem] = Field(..., min_length=1)


# ── media ──────────────────────────────────────────────────────────────────


class GalleryImage(_Item):
    url: str
    alt: str = ""
    caption: Optional[str] = None


class GalleryBlock(BaseBlock):
    type: Literal["gallery"] = "gallery"
    group_key: str
    headline: Optional[str] = None
    layout: Literal["grid", "carousel", "masonry"] = "grid"
    images: Optional[List[GalleryImage]] = None


class ImageBlock(BaseBlock):
    type: Literal["image"] = "image"
    src: NonEmptyStr
    alt: NonEmptyStr
    caption: Optional[str] = None


BLOCK_TYPES: Dict[str, Type[BaseBlock]] = {
    model.model_fields["type"].default: model
    for model in (
        HeroBlock,
        IntroBlock,
        AboutBlock,
        StoryBlock,
        StorylineBlock,
        MilestonesBlock,
        ValuesBlock,
        TeamBlock,
        ServicesBlock,
        ServiceDetailsBlock,
        InteractiveServicesBlock,
        ProcessBlock,
        HowItWorksBlock,
        WhyUsBlock,
        AreasBlock,
        PackagesBlock,
        InsightsBlock,
        StatsRowBlock,
        InsightsListBlock,
        TestimonialsBlock,
        LogoGridBlock,
        PartnersBlock,
        PartnersEmptyBlock,
        ContactBlock,
        CtaBlock,
        FaqBlock,
        GalleryBlock,
        ImageBlock,
    )
}


def _strip_markers(raw: Mapping[str, Any]) -> Dict[str, Any]:
    # editor-only flags such as ``_isHidden`` are not part of any variant
    return {k: v for k, v in raw.items() if not str(k).startswith("_")}


def parse_block(raw: Mapping[str, Any]) -> BaseBlock:
    """Validate one stored block against its variant, or wrap it generically."""
    data = _strip_markers(raw)
    block_type = data.get("type")
    model = BLOCK_TYPES.get(block_type) if isinstance(block_type, str) else None
    if model is None:
        data.setdefault("type", "unknown")
        return GenericBlock.model_validate(data)
    return model.model_validate(data)


def validate_blocks(raw_blocks: List[Mapping[str, Any]]) -> List[BaseBlock]:
    """Parse every block, raising ``pydantic.ValidationError`` on the first bad one."""
    return [parse_block(raw) for raw in raw_blocks]


def validation_messages(raw_blocks: List[Any]) -> List[str]:
    """Collect ``path: message`` strings for every invalid block."""
    messages: List[str] = []
    for index, raw in enumerate(raw_blocks):
        if not isinstance(raw, Mapping):
            messages.append(f"{index}: block must be an object")
            continue
        try:
            parse_block(raw)
        except ValidationError as exc:
            for err in exc.errors():
                path = ".".join(str(part) for part in (index, *err["loc"]))
                messages.append(f"{path}: {err['msg']}")
    return messages
