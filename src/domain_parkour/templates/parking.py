"""
Parking page: a domain-for-sale listing with price and contact button.
"""

from datetime import datetime
from html import escape
from typing import Optional

from ..models import ConfigurationRecord, Preset
from .base import js_value, render_base
from .components import render_footer, render_social_links


DEFAULT_FOOTER = "This domain is available for purchase"

STAT_DIVIDER = '<div class="hidden sm:block w-px bg-gray-800 dark:bg-gray-800"></div>'


def _stat(value: str, label: str) -> str:
    return f"""
                    <div class="text-center">
                        <div class="text-2xl sm:text-3xl font-bold dark:text-white text-black">{escape(value)}</div>
                        <div class="text-sm dark:text-gray-500 text-gray-500 mt-1">{label}</div>
                    </div>"""


def render_registration_badge(cfg: ConfigurationRecord) -> str:
    if not cfg.domain_registration:
        return ""
    return f"""
            <div id="registration-badge" class="flex justify-center mb-8">
                <div class="inline-flex items-center gap-2 px-3 py-1.5 rounded-full border dark:border-gray-800 border-gray-200 dark:bg-gray-900 bg-gray-50">
                    <div class="w-1.5 h-1.5 rounded-full bg-green-500 animate-pulse"></div>
                    <span class="text-xs font-medium dark:text-gray-400 text-gray-600">{escape(cfg.domain_registration)}</span>
                </div>
            </div>"""


def render_stats(cfg: ConfigurationRecord) -> str:
    """Age / extension / SEO tiles, shown only when age or extension is known."""
    if not (cfg.domain_age_years or cfg.domain_extension):
        return ""

    tiles = []
    if cfg.domain_age_years:
        tiles.append(_stat(cfg.domain_age_years, "Years Old"))
    if cfg.domain_extension:
        tiles.append(_stat(cfg.domain_extension, "Extension"))
    tiles.append(_stat("SEO", "Friendly"))

    return f"""
                <div id="domain-stats" class="flex flex-wrap justify-center gap-6 sm:gap-8 py-4">
                    {STAT_DIVIDER.join(tiles)}
                </div>"""


def render_sale_line(cfg: ConfigurationRecord) -> str:
    if not cfg.sale_price:
        return "This domain is for sale"
    return f"This domain is for sale for <strong>{escape(cfg.sale_price)}</strong>"


def render_contact_cta(cfg: ConfigurationRecord) -> str:
    if not cfg.contact_email:
        return ""
    # href is filled in by render_contact_script after load
    return """
                <div class="pt-6">
                    <a id="contact-link" href="#"
                       class="group inline-flex items-center justify-center gap-2 px-6 py-3 rounded-lg accent-bg text-white font-medium transition-all hover:scale-105 hover:shadow-lg">
                        <span>Reach Out</span>
                        <svg class="w-4 h-4 transition-transform group-hover:translate-x-1" fill="none" stroke="currentColor" viewBox="0 0 24 24">
                            <path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M17 8l4 4m0 0l-4 4m4-4H3"></path>
                        </svg>
                    </a>
                </div>"""


def render_contact_script(cfg: ConfigurationRecord) -> str:
    """
    Attach the mailto link client-side from two separate halves.

    The full address never appears in the markup, which keeps naive
    scrapers from harvesting it.
    """
    if not cfg.contact_email:
        return ""
    user, _, domain = cfg.contact_email.partition("@")
    return f"""
        // Email protection - inject mailto link via JavaScript
        window.addEventListener('load', function() {{
            const user = {js_value(user)};
            const domain = {js_value(domain)};
            const link = document.getElementById('contact-link');
            if (link) {{
                link.href = 'mailto:' + user + '@' + domain;
            }}
        }});
"""


def render_parking_content(cfg: ConfigurationRecord) -> str:
    description = ""
    if cfg.description:
        description = f'<span class="font-normal block mt-2 mb-4">{escape(cfg.description)}</span>'

    return f"""
    <!-- Main Container -->
    <div class="flex items-center justify-center min-h-screen px-6 py-24">
        <div class="max-w-4xl w-full">
            {render_registration_badge(cfg)}

            <div class="text-center space-y-8">
                <div class="space-y-4">
                    <h1 class="text-5xl sm:text-6xl md:text-7xl lg:text-8xl font-bold tracking-tight dark:text-white text-black">
                        {escape(cfg.domain_title)}
                    </h1>
                    <div class="h-1 w-20 mx-auto accent-gradient rounded-full"></div>
                </div>
                {render_stats(cfg)}

                <h2 class="text-2xl sm:text-3xl md:text-4xl font-semibold dark:text-gray-100 text-gray-900 max-w-3xl mx-auto">
                    {escape(cfg.title or "")}
                </h2>

                <p class="text-lg sm:text-xl md:text-2xl dark:text-gray-400 text-gray-600 max-w-2xl mx-auto">
                    {description}
                    {render_sale_line(cfg)}
                </p>
                {render_contact_cta(cfg)}
            </div>
            {render_social_links(cfg.social_links)}
            {render_footer(cfg.footer_text, DEFAULT_FOOTER, cfg.show_credit)}
        </div>
    </div>"""


def generate_parking_html(
    cfg: ConfigurationRecord,
    presets: tuple[Preset, ...] = (),
    preset_index: Optional[int] = None,
    now: Optional[datetime] = None,
) -> str:
    """Render the parking page document (now is unused)."""
    title = f"{cfg.domain_title} - {cfg.title}" if cfg.title else cfg.domain_title
    return render_base(
        title=title,
        accent_color=cfg.accent_color,
        content=render_parking_content(cfg),
        scripts=render_contact_script(cfg),
        presets=presets,
        preset_index=preset_index,
    )
