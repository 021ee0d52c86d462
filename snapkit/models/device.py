"""Simulated device/viewport configurations used for each snapshot run."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ColorScheme = Literal["light", "dark"]


class Traits(BaseModel):
    model_config = ConfigDict(frozen=True)

    color_scheme: Optional[ColorScheme] = None
    reduced_motion: Optional[bool] = None

    @property
    def resolved_color_scheme(self) -> ColorScheme:
        return self.color_scheme or "light"

    @classmethod
    def merged(cls, *layers: "Traits") -> "Traits":
        """Compose trait layers; later layers win, unset fields never override."""
        values: dict = {}
        for layer in layers:
            values.update(layer.model_dump(exclude_none=True))
        return cls(**values)


class DeviceConfig(BaseModel):
    """A named viewport plus trait preset simulating one screen."""

    model_config = ConfigDict(frozen=True)

    name: str
    width: Optional[int] = None
    height: Optional[int] = None
    scale: float = 1.0  # device pixel ratio
    traits: Traits = Field(default_factory=Traits)

    @property
    def size(self) -> tuple[int, int] | None:
        if self.width is None or self.height is None:
            return None
        return (self.width, self.height)

    @property
    def is_dark(self) -> bool:
        return self.traits.resolved_color_scheme == "dark"

    def dark_variant(self) -> "DeviceConfig":
        """Copy of this config with the color scheme forced to dark.

        The name is kept: naming treats both variants as the same device and
        distinguishes them by trait.
        """
        traits = Traits.merged(self.traits, Traits(color_scheme="dark"))
        return self.model_copy(update={"traits": traits})


CANVAS = DeviceConfig(name="Canvas", width=768, height=768)
CANVAS_DARK = CANVAS.dark_variant()
IPHONE = DeviceConfig(name="iPhone", width=428, height=926, scale=3.0)
IPAD = DeviceConfig(name="iPad", width=1024, height=1366, scale=2.0)

PRESETS: dict[str, DeviceConfig] = {
    "canvas": CANVAS,
    "canvas-dark": CANVAS_DARK,
    "iphone": IPHONE,
    "iphone-dark": IPHONE.dark_variant(),
    "ipad": IPAD,
    "ipad-dark": IPAD.dark_variant(),
}

DEFAULT_DEVICES: tuple[DeviceConfig, ...] = (CANVAS, CANVAS_DARK)


def get_preset(key: str) -> DeviceConfig:
    """Look up a builtin device config by key (case-insensitive)."""
    try:
        return PRESETS[key.lower()]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise KeyError(f"Unknown device preset '{key}' (known: {known})") from None
