"""Dynamic type sizes and the curated accessibility test matrices."""

from __future__ import annotations

from enum import Enum


class TypeSize(str, Enum):
    X_SMALL = "x_small"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    X_LARGE = "x_large"
    XX_LARGE = "xx_large"
    XXX_LARGE = "xxx_large"
    ACCESSIBILITY1 = "accessibility1"
    ACCESSIBILITY2 = "accessibility2"
    ACCESSIBILITY3 = "accessibility3"
    ACCESSIBILITY4 = "accessibility4"
    ACCESSIBILITY5 = "accessibility5"


_LABELS: dict[TypeSize, str] = {
    TypeSize.X_SMALL: "xSmall",
    TypeSize.SMALL: "small",
    TypeSize.MEDIUM: "medium",
    TypeSize.LARGE: "default",
    TypeSize.X_LARGE: "xLarge",
    TypeSize.XX_LARGE: "xxLarge",
    TypeSize.XXX_LARGE: "xxxLarge",
    TypeSize.ACCESSIBILITY1: "accessibility1",
    TypeSize.ACCESSIBILITY2: "accessibility2",
    TypeSize.ACCESSIBILITY3: "accessibility3",
    TypeSize.ACCESSIBILITY4: "accessibility4",
    TypeSize.ACCESSIBILITY5: "accessibility5",
}

UNKNOWN_LABEL = "unknown"

# Smallest, default, largest standard and largest accessibility size
STANDARD_SIZES: tuple[TypeSize, ...] = (
    TypeSize.X_SMALL,
    TypeSize.LARGE,
    TypeSize.XXX_LARGE,
    TypeSize.ACCESSIBILITY5,
)

MINIMAL_SIZES: tuple[TypeSize, ...] = (
    TypeSize.LARGE,
    TypeSize.ACCESSIBILITY5,
)


def label_of(size: object) -> str:
    """Return the display label for a type size.

    Values this version does not know about (a newer platform variant, a raw
    string) get the label ``"unknown"`` instead of raising.
    """
    if isinstance(size, TypeSize):
        return _LABELS.get(size, UNKNOWN_LABEL)
    try:
        return _LABELS.get(TypeSize(size), UNKNOWN_LABEL)
    except ValueError:
        return UNKNOWN_LABEL


def parse_type_size(value: str) -> TypeSize:
    """Resolve an enum value ("xxx_large") or a display label ("xxxLarge")."""
    for size, label in _LABELS.items():
        if value in (size.value, label):
            return size
    raise ValueError(f"Unknown type size: {value}")
