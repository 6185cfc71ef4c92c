"""
HTML templates for the three page modes.

Every template is a pure function from a ConfigurationRecord to a string,
composed from section renderers that return "" when their data is absent.
"""

from .base import hex_to_rgb, render_base
from .coming_soon import generate_coming_soon_html
from .components import render_footer, render_social_links
from .landing import generate_landing_html
from .parking import generate_parking_html

__all__ = [
    "hex_to_rgb",
    "render_base",
    "render_footer",
    "render_social_links",
    "generate_parking_html",
    "generate_coming_soon_html",
    "generate_landing_html",
]
