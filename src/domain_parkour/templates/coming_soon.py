"""
Coming-soon page: launch countdown, tagline and feature grid.
"""

from datetime import datetime
from html import escape
from typing import Optional

from ..countdown import LIVE_MESSAGE, Countdown, CountdownState
from ..models import ConfigurationRecord, Feature, Preset
from .base import js_value, render_base
from .components import render_footer, render_social_links


FOOTER_WITH_LAUNCH = "Stay tuned for our launch"
FOOTER_WITHOUT_LAUNCH = "Something exciting is coming"

COUNTDOWN_UNITS = (
    ("days", "Days"),
    ("hours", "Hours"),
    ("minutes", "Min"),
    ("seconds", "Sec"),
)

LIVE_MARKUP = f'<div class="text-2xl dark:text-white text-black font-bold">{escape(LIVE_MESSAGE)}</div>'


def render_countdown(state: Optional[CountdownState]) -> str:
    """Countdown boxes showing the state at render time; "" without a launch date."""
    if state is None:
        return ""
    if state.live:
        return f"""
    <div id="countdown" class="flex justify-center gap-3 sm:gap-6 mt-12">
      {LIVE_MARKUP}
    </div>"""

    digits = state.digits()
    boxes = "".join(
        f"""
      <div class="px-4 py-3 rounded-lg border dark:border-gray-800 border-gray-200 dark:bg-transparent bg-white">
        <div class="text-3xl sm:text-4xl font-bold dark:text-white text-gray-900" id="{unit}">{digits[unit]}</div>
        <div class="text-xs dark:text-gray-500 text-gray-500 mt-1 text-center">{label}</div>
      </div>"""
        for unit, label in COUNTDOWN_UNITS
    )
    return f"""
    <!-- Countdown Timer -->
    <div id="countdown" class="flex justify-center gap-3 sm:gap-6 mt-12">{boxes}
    </div>"""


def render_countdown_script(countdown: Optional[Countdown]) -> str:
    """Client-side timer; switches to the live message once and stops."""
    if countdown is None or countdown.is_live:
        return ""

    return f"""
        // Countdown Timer
        const launchDate = {countdown.target_ms};
        let countdownTimer = null;

        function updateCountdown() {{
            const distance = launchDate - new Date().getTime();

            if (distance < 0) {{
                document.getElementById('countdown').innerHTML = {js_value(LIVE_MARKUP)};
                clearInterval(countdownTimer);
                return;
            }}

            const days = Math.floor(distance / (1000 * 60 * 60 * 24));
            const hours = Math.floor((distance % (1000 * 60 * 60 * 24)) / (1000 * 60 * 60));
            const minutes = Math.floor((distance % (1000 * 60 * 60)) / (1000 * 60));
            const seconds = Math.floor((distance % (1000 * 60)) / 1000);

            document.getElementById('days').textContent = days.toString().padStart(2, '0');
            document.getElementById('hours').textContent = hours.toString().padStart(2, '0');
            document.getElementById('minutes').textContent = minutes.toString().padStart(2, '0');
            document.getElementById('seconds').textContent = seconds.toString().padStart(2, '0');
        }}

        countdownTimer = setInterval(updateCountdown, 1000);
        updateCountdown();
"""


def _feature_card(feature: Feature) -> str:
    description = ""
    if feature.description:
        description = f'<div class="text-xs dark:text-gray-500 text-gray-600">{escape(feature.description)}</div>'
    return f"""
      <div class="p-4 rounded-lg border dark:border-gray-800 border-gray-200 dark:bg-transparent bg-white text-left">
        <div class="text-sm font-semibold dark:text-white text-gray-900 mb-1">{escape(feature.title)}</div>
        {description}
      </div>"""


def render_features(features: tuple[Feature, ...]) -> str:
    if not features:
        return ""
    return f"""
    <div id="features" class="grid grid-cols-1 sm:grid-cols-2 md:grid-cols-3 gap-3 max-w-3xl mx-auto mt-12">
      {"".join(_feature_card(feature) for feature in features)}
    </div>"""


def render_coming_soon_content(
    cfg: ConfigurationRecord, state: Optional[CountdownState]
) -> str:
    tagline = ""
    if cfg.tagline:
        tagline = f"""
                <h2 class="text-xl sm:text-2xl font-semibold dark:text-gray-200 text-gray-800 mt-8 mb-4 fade-in-delay-1">
                    {escape(cfg.tagline)}
                </h2>"""

    description = ""
    if cfg.description:
        description = f"""
                <p class="text-sm dark:text-gray-500 text-gray-500 max-w-xl mx-auto mt-3 fade-in-delay-1">
                    {escape(cfg.description)}
                </p>"""

    default_footer = FOOTER_WITH_LAUNCH if cfg.launch_date else FOOTER_WITHOUT_LAUNCH

    return f"""
    <!-- Main Container -->
    <div class="flex items-center justify-center min-h-screen px-6 py-20">
        <div class="w-full max-w-3xl mx-auto">
            <div class="text-center">
                <div class="inline-flex items-center gap-2 px-3 py-1.5 rounded-full border dark:border-gray-800 border-gray-200 dark:bg-gray-900/50 bg-gray-50 mb-8 fade-in">
                    <div class="w-1.5 h-1.5 rounded-full bg-yellow-500 animate-pulse"></div>
                    <span class="text-xs font-medium dark:text-gray-400 text-gray-600">Coming Soon</span>
                </div>

                <div class="fade-in">
                    <h1 class="text-4xl sm:text-5xl md:text-6xl font-bold tracking-tight dark:text-white text-gray-900 mb-4 accent-underline">
                        {escape(cfg.domain_title)}
                    </h1>
                </div>
                {tagline}

                <p class="text-base sm:text-lg dark:text-gray-400 text-gray-600 max-w-2xl mx-auto fade-in-delay-1">
                    {escape(cfg.title or "")}
                </p>
                {description}

                <div class="fade-in-delay-2">
                    {render_countdown(state)}
                </div>

                <div class="fade-in-delay-2">
                    {render_social_links(cfg.social_links)}
                </div>

                <div class="fade-in-delay-3">
                    {render_features(cfg.features)}
                </div>
            </div>
            {render_footer(cfg.footer_text, default_footer, cfg.show_credit)}
        </div>
    </div>"""


def generate_coming_soon_html(
    cfg: ConfigurationRecord,
    presets: tuple[Preset, ...] = (),
    preset_index: Optional[int] = None,
    now: Optional[datetime] = None,
) -> str:
    """Render the coming-soon page document; now fixes the countdown's initial state."""
    countdown = Countdown.from_launch_date(cfg.launch_date)
    state = countdown.tick(now) if countdown else None

    return render_base(
        title=f"{cfg.domain_title} - Coming Soon",
        accent_color=cfg.accent_color,
        content=render_coming_soon_content(cfg, state),
        scripts=render_countdown_script(countdown),
        presets=presets,
        preset_index=preset_index,
    )
