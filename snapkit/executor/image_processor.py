"""Post-processing of captured images before they are stored or compared."""

from __future__ import annotations

import io

from PIL import Image

from snapkit.models.snapshot import CapturedArtifact

# Bilinear keeps single pixel borders visible while compressing far better
# than high quality resampling.
MEDIUM_INTERPOLATION = Image.Resampling.BILINEAR


def reduce(artifact: CapturedArtifact) -> CapturedArtifact:
    """Redraw an artifact at its point size, opaque, to shrink stored fixtures.

    Pixel dimensions are divided by the device scale and the alpha channel is
    flattened onto black and dropped. The scale is kept.
    """
    image = artifact.image
    scale = artifact.scale if artifact.scale > 0 else 1.0
    width, height = image.size
    new_size = (max(1, round(width / scale)), max(1, round(height / scale)))

    if image.mode != "RGBA":
        image = image.convert("RGBA")
    opaque = Image.new("RGBA", image.size, (0, 0, 0, 255))
    opaque.alpha_composite(image)
    flattened = opaque.convert("RGB")

    if flattened.size != new_size:
        flattened = flattened.resize(new_size, resample=MEDIUM_INTERPOLATION, reducing_gap=None)
    return CapturedArtifact(image=flattened, scale=artifact.scale)


def encode_png(image: Image.Image) -> bytes:
    """PNG bytes with no metadata, so identical pixels give identical files."""
    buf = io.BytesIO()
    image.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def decode_png(data: bytes, scale: float = 1.0) -> CapturedArtifact:
    image = Image.open(io.BytesIO(data))
    image.load()
    return CapturedArtifact(image=image, scale=scale)
