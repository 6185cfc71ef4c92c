"""
Landing page: title block followed by a list of quick links.
"""

from datetime import datetime
from html import escape
from typing import Optional

from ..models import ConfigurationRecord, Link, Preset
from .base import render_base
from .components import render_footer, render_social_links


LANDING_STYLES = """
        a.link-card {
            transition: all 0.2s ease;
            border: 1px solid transparent;
            position: relative;
            overflow: hidden;
        }

        a.link-card::before {
            content: '';
            position: absolute;
            bottom: 0;
            left: 0;
            right: 0;
            height: 1px;
            background: var(--accent-color);
            opacity: 0;
            transition: opacity 0.2s ease;
        }

        a.link-card:hover::before {
            opacity: 0.5;
        }

        a.link-card:hover {
            border-color: rgba(var(--accent-color-rgb), 0.3);
            background: transparent !important;
        }

        .dark a.link-card:hover {
            background: rgba(255, 255, 255, 0.02) !important;
        }

        a.link-card:hover .arrow-icon {
            color: var(--accent-color);
            transform: translateX(3px);
        }

        a.link-card span {
            transition: color 0.2s ease;
        }

        a.link-card:hover span {
            color: var(--accent-color);
        }
"""


def render_links(links: tuple[Link, ...]) -> str:
    if not links:
        return ""

    cards = "".join(
        f"""
      <a href="{escape(link.url)}" target="_blank" rel="noopener noreferrer"
         class="link-card group relative flex items-center justify-between px-4 py-3 rounded-md dark:bg-transparent bg-transparent">
        <span class="text-sm font-medium dark:text-gray-300 text-gray-700">{escape(link.title)}</span>
        <svg class="arrow-icon w-3.5 h-3.5 dark:text-gray-600 text-gray-400 transition-all" fill="none" stroke="currentColor" viewBox="0 0 24 24">
          <path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M9 5l7 7-7 7"></path>
        </svg>
      </a>"""
        for link in links
    )
    return f"""
    <div id="links" class="flex flex-col gap-2 mt-12 max-w-xl mx-auto">
      {cards}
    </div>"""


def _optional_paragraph(text: Optional[str], classes: str) -> str:
    if not text:
        return ""
    return f"""
                <p class="{classes}">
                    {escape(text)}
                </p>"""


def render_landing_content(cfg: ConfigurationRecord) -> str:
    return f"""
    <!-- Main Container -->
    <div class="flex items-center justify-center min-h-screen px-6 py-20">
        <div class="w-full max-w-2xl mx-auto">
            <div class="text-center mb-16 fade-in">
                <h1 class="text-4xl sm:text-5xl md:text-6xl font-bold tracking-tight dark:text-white text-gray-900 mb-4 accent-underline">
                    {escape(cfg.domain_title)}
                </h1>
                {_optional_paragraph(cfg.title, "text-lg sm:text-xl dark:text-gray-400 text-gray-600 mt-6")}
                {_optional_paragraph(cfg.subtitle, "text-base dark:text-gray-500 text-gray-500 mt-3 max-w-xl mx-auto")}
                {_optional_paragraph(cfg.description, "text-sm dark:text-gray-600 text-gray-400 mt-3 max-w-lg mx-auto leading-relaxed")}
            </div>

            <div class="fade-in-delay-1">
                {render_links(cfg.links)}
            </div>

            <div class="fade-in-delay-2">
                {render_social_links(cfg.social_links)}
            </div>
            {render_footer(cfg.footer_text, cfg.domain_title, cfg.show_credit)}
        </div>
    </div>"""


def generate_landing_html(
    cfg: ConfigurationRecord,
    presets: tuple[Preset, ...] = (),
    preset_index: Optional[int] = None,
    now: Optional[datetime] = None,
) -> str:
    """Render the landing page document (now is unused)."""
    return render_base(
        title=cfg.domain_title,
        accent_color=cfg.accent_color,
        content=render_landing_content(cfg),
        additional_styles=LANDING_STYLES,
        presets=presets,
        preset_index=preset_index,
    )
