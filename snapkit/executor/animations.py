"""Process-wide animation switch.

Render backends consult ``ANIMATIONS.enabled`` when they set up a subject; the
runner turns animations off for the duration of a snapshot run.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Protocol

logger = logging.getLogger(__name__)


class AnimationSwitch(Protocol):
    enabled: bool


class AnimationState:
    def __init__(self, enabled: bool = True):
        self.enabled = enabled


ANIMATIONS = AnimationState()


@contextmanager
def animations_suspended(switch: AnimationSwitch = ANIMATIONS) -> Iterator[None]:
    """Disable animations, restoring the previous value on every exit path."""
    previous = switch.enabled
    switch.enabled = False
    logger.debug("Animations suspended (previously %s)", "on" if previous else "off")
    try:
        yield
    finally:
        switch.enabled = previous
