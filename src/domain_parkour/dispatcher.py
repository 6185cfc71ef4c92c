"""
Template dispatch: maps a record's mode onto one of the page renderers.
"""

from datetime import datetime
from typing import Callable, Optional

from .enums import PageMode
from .models import ConfigurationRecord, Preset
from .templates import (
    generate_coming_soon_html,
    generate_landing_html,
    generate_parking_html,
)


Renderer = Callable[..., str]

RENDERERS: dict[PageMode, Renderer] = {
    PageMode.PARKING: generate_parking_html,
    PageMode.COMING_SOON: generate_coming_soon_html,
    PageMode.LANDING: generate_landing_html,
}


def select_renderer(mode: object) -> Renderer:
    """Renderer for a raw mode value; unknown modes render the parking page."""
    return RENDERERS[PageMode.from_value(mode)]


def dispatch(
    cfg: ConfigurationRecord,
    presets: tuple[Preset, ...] = (),
    preset_index: Optional[int] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Render the page for a resolved record.

    Args:
        cfg: Resolved configuration record
        presets: Local presets for the dev switcher
        preset_index: Selected preset
        now: Render instant (only the coming-soon countdown depends on it)
    """
    return RENDERERS[cfg.page_mode](cfg, presets, preset_index, now=now)
