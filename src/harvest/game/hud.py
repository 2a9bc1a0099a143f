"""
HUD projection.

project_hud() turns a RenderFrame into the four strings the HUD shows.
HudPanel pushes them into whatever widgets the front end provides.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from harvest.game.session import RenderFrame

logger = logging.getLogger(__name__)

TextSetter = Callable[[str], None]


@dataclass(frozen=True)
class HudText:
    score: str
    time: str
    goal: str
    status: str


HUD_ELEMENTS = ("score", "time", "goal", "status")


def project_hud(frame: RenderFrame) -> HudText:
    """HUD strings for a frame. Time is shown in whole seconds, rounded up."""
    return HudText(
        score=str(frame.score),
        time=str(math.ceil(frame.time_left)),
        goal=f"{frame.score}/{frame.goal}",
        status=frame.status,
    )


class HudPanel:
    """
    Writes HUD text into named targets.

    A missing target is reported once and skipped afterwards; the rest of
    the HUD keeps updating.
    """

    def __init__(self, targets: Mapping[str, Optional[TextSetter]]) -> None:
        self._targets: dict[str, TextSetter] = {}
        self._last: dict[str, str] = {}

        for name in HUD_ELEMENTS:
            setter = targets.get(name)
            if setter is None:
                logger.error(f"HUD element '{name}' not found, it will not be updated")
                continue
            self._targets[name] = setter

    @property
    def missing(self) -> list[str]:
        return [name for name in HUD_ELEMENTS if name not in self._targets]

    def sync(self, hud: HudText) -> None:
        """Push changed values to their targets."""
        for name, setter in self._targets.items():
            value = getattr(hud, name)
            if self._last.get(name) == value:
                continue
            setter(value)
            self._last[name] = value
