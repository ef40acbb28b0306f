"""Static preset libraries for on-model generation.

Every creative choice the user can make is backed by one of the read-only
tables in this module:

- ``SHOT_PRESETS`` — camera framing and pose, each with a native aspect ratio.
- ``MODEL_PRESETS`` — the model casting description.
- ``VIBE_PRESETS`` — lighting / set style, with its own negative fragment.
- ``TARGET_PROFILES`` — customer narrative woven into the prompt.
- ``PRICE_POINTS`` — positioning narrative woven into the prompt.
- ``ASPECT_DIMENSIONS`` — aspect ratio → pixel dimensions sent to the provider.

The tables are :class:`types.MappingProxyType` views built once at import
time, keyed by preset identifier in display order.  Lookups never fail: the
``resolve_*`` helpers return a designated default when the key is unknown,
which keeps the prompt compiler total.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, TypeVar


@dataclass(frozen=True)
class ShotPreset:
    id: str
    label: str
    description: str
    prompt: str
    aspect_ratio: str


@dataclass(frozen=True)
class ModelPreset:
    id: str
    label: str
    prompt: str
    notes: str


@dataclass(frozen=True)
class VibePreset:
    id: str
    label: str
    prompt: str
    negative: str


@dataclass(frozen=True)
class TargetProfile:
    id: str
    label: str
    description: str
    narrative: str


@dataclass(frozen=True)
class PricePoint:
    id: str
    label: str
    description: str
    narrative: str


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int


_T = TypeVar("_T")


def _freeze(entries: list[_T]) -> Mapping[str, _T]:
    """Index preset records by ``id`` behind a read-only mapping."""
    return MappingProxyType({entry.id: entry for entry in entries})  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Shot presets.
# ---------------------------------------------------------------------------

SHOT_PRESETS: Mapping[str, ShotPreset] = _freeze(
    [
        ShotPreset(
            id="front-hero",
            label="Front Hero",
            description="Clean ecommerce hero shot, full body, neutral pose.",
            prompt=(
                "front-facing full body hero shot, garment perfectly fitted, subtle pose "
                "showcasing silhouette, crisp seamless background, soft edge lighting"
            ),
            aspect_ratio="3:4",
        ),
        ShotPreset(
            id="three-quarter",
            label="3/4 Look",
            description="Dynamic 3/4 angle for a more editorial feel.",
            prompt=(
                "three-quarter angle, model looking slightly past camera, gentle movement "
                "in fabric, editorial pose, subtle shadow play"
            ),
            aspect_ratio="3:4",
        ),
        ShotPreset(
            id="detail",
            label="Detail Close-up",
            description="Focus on craftsmanship and fabric texture.",
            prompt=(
                "tight crop highlighting garment craftsmanship, macro lens depth of field, "
                "fine fabric texture, hands softly interacting with garment"
            ),
            aspect_ratio="1:1",
        ),
        ShotPreset(
            id="movement",
            label="Motion Shot",
            description="Adds energy with walking or spinning movement.",
            prompt=(
                "dynamic walking movement, flowing fabric captured mid motion, cinematic "
                "streaked lighting, runway-inspired energy"
            ),
            aspect_ratio="9:16",
        ),
    ]
)

# ---------------------------------------------------------------------------
# Model presets.
# ---------------------------------------------------------------------------

MODEL_PRESETS: Mapping[str, ModelPreset] = _freeze(
    [
        ModelPreset(
            id="editorial",
            label="Editorial Muse",
            prompt=(
                "tall editorial runway model, sharp cheekbones, confident expression, "
                "poised posture"
            ),
            notes="Runway-ready aesthetic for high-fashion positioning.",
        ),
        ModelPreset(
            id="inclusive",
            label="Inclusive Fit",
            prompt=(
                "curvy plus-size model with glowing skin, natural curls, warm and inviting "
                "smile, inclusive beauty standards"
            ),
            notes="Shows size diversity with an aspirational tone.",
        ),
        ModelPreset(
            id="street",
            label="Streetstyle Creative",
            prompt=(
                "streetwear model, short natural curls, expressive pose, energetic "
                "attitude, contemporary vibe"
            ),
            notes="Ideal for Gen Z and fashion-forward positioning.",
        ),
        ModelPreset(
            id="masculine",
            label="Menswear Icon",
            prompt=(
                "masculine model with athletic build, clean grooming, charismatic gaze, "
                "relaxed confidence"
            ),
            notes="Use for tailored fits or gender-neutral garments.",
        ),
    ]
)

# ---------------------------------------------------------------------------
# Vibe presets.
# ---------------------------------------------------------------------------

DEFAULT_VIBE = "luxury"

VIBE_PRESETS: Mapping[str, VibePreset] = _freeze(
    [
        VibePreset(
            id="luxury",
            label="Luxury Studio",
            prompt=(
                "flagship fashion campaign lighting, sculpted softbox highlights, charcoal "
                "seamless, medium format depth, cinematic grading"
            ),
            negative="flat lighting, amateur, poor contrast, cluttered background, noisy texture",
        ),
        VibePreset(
            id="lifestyle",
            label="Lifestyle Loft",
            prompt=(
                "sun-drenched loft, warm bounce lighting, lifestyle storytelling, designer "
                "interior details, candid energy"
            ),
            negative=(
                "overexposed, underexposed, messy background, chaotic composition, motion blur"
            ),
        ),
        VibePreset(
            id="street",
            label="Street Style",
            prompt=(
                "urban editorial backdrop, shallow depth of field, dusk neon accents, "
                "energetic street pose, cinematic crop"
            ),
            negative="busy traffic, harsh flash, caricature, cartoon, fisheye distortion",
        ),
        VibePreset(
            id="catalog",
            label="Catalog Ready",
            prompt=(
                "calibrated ecommerce lighting, seamless light gray backdrop, precise color "
                "accuracy, symmetrical pose, crisp detailing"
            ),
            negative=(
                "dramatic lighting, harsh shadows, tilted horizon, inconsistent color temperature"
            ),
        ),
    ]
)

# ---------------------------------------------------------------------------
# Target customer and price point narratives.
# ---------------------------------------------------------------------------

DEFAULT_TARGET_NARRATIVE = "Designed for aspirational fashion consumers."
DEFAULT_PRICE_NARRATIVE = "Highlight refined craftsmanship and premium finishing."

TARGET_PROFILES: Mapping[str, TargetProfile] = _freeze(
    [
        TargetProfile(
            id="premium-millennial",
            label="Premium Millennial",
            description="Urban professionals investing in quality wardrobe essentials.",
            narrative=(
                "Designed for premium millennial tastemakers who value elevated daily style."
            ),
        ),
        TargetProfile(
            id="genz-trend",
            label="Gen Z Trendsetter",
            description="Statement making looks for content creators and trend leaders.",
            narrative=(
                "Tailored to Gen Z trendsetters looking for bold, content-ready statement looks."
            ),
        ),
        TargetProfile(
            id="bridal-edit",
            label="Modern Bridal",
            description="Elegant occasionwear with refined, timeless styling.",
            narrative=(
                "Crafted for modern bridal and occasionwear moments with editorial romance."
            ),
        ),
        TargetProfile(
            id="mens-classic",
            label="Menswear Classic",
            description="Tailored fits designed for sharp, clean styling.",
            narrative="Geared towards sharp menswear stylings and refined silhouettes.",
        ),
    ]
)

PRICE_POINTS: Mapping[str, PricePoint] = _freeze(
    [
        PricePoint(
            id="accessible",
            label="Accessible Luxury",
            description="Attainable sophistication with value-driven craftsmanship.",
            narrative=(
                "Positioned as accessible luxury, celebrate premium details with "
                "approachable polish."
            ),
        ),
        PricePoint(
            id="premium",
            label="Premium Designer",
            description="Artisanal details, premium materials and finishings.",
            narrative=(
                "Positioned as premium designer, highlight construction, fabric pedigree "
                "and elevated finishing."
            ),
        ),
        PricePoint(
            id="couture",
            label="Couture Tier",
            description="High-fashion drama, couture tailoring and exclusivity.",
            narrative=(
                "Positioned as couture tier, dramatise tailoring mastery and exclusive "
                "craftsmanship."
            ),
        ),
    ]
)

# ---------------------------------------------------------------------------
# Aspect ratio → pixel dimensions.
# ---------------------------------------------------------------------------

DEFAULT_ASPECT_RATIO = "3:4"

ASPECT_DIMENSIONS: Mapping[str, Dimensions] = MappingProxyType(
    {
        "3:4": Dimensions(width=768, height=1024),
        "4:3": Dimensions(width=1024, height=768),
        "1:1": Dimensions(width=896, height=896),
        "9:16": Dimensions(width=768, height=1365),
    }
)


# ---------------------------------------------------------------------------
# Lookups with fallback.
# ---------------------------------------------------------------------------


def resolve_vibe(key: str | None) -> VibePreset:
    """Return the vibe for *key*, or the Luxury Studio vibe if unknown."""
    return VIBE_PRESETS.get(key or "", VIBE_PRESETS[DEFAULT_VIBE])


def resolve_target_narrative(key: str | None) -> str:
    """Return the target customer narrative for *key*, or the generic one."""
    profile = TARGET_PROFILES.get(key or "")
    return profile.narrative if profile else DEFAULT_TARGET_NARRATIVE


def resolve_price_narrative(key: str | None) -> str:
    """Return the price point narrative for *key*, or the generic one."""
    price = PRICE_POINTS.get(key or "")
    return price.narrative if price else DEFAULT_PRICE_NARRATIVE


def resolve_dimensions(aspect_ratio: str | None) -> Dimensions:
    """Return pixel dimensions for *aspect_ratio*, defaulting to 3:4."""
    return ASPECT_DIMENSIONS.get(aspect_ratio or "", ASPECT_DIMENSIONS[DEFAULT_ASPECT_RATIO])
