"""
Page shell shared by every mode.

Wraps rendered body content with the document head, the accent color
theme variables, the persisted light/dark toggle and, when local presets
are available, the development preset switcher.
"""

import json
import re
from html import escape
from typing import Optional

from ..models import DEFAULT_ACCENT_COLOR, Preset


DEFAULT_ACCENT_RGB = (59, 130, 246)

HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# Characters that could end the custom property or the <style> block
CSS_UNSAFE_PATTERN = re.compile(r"[;{}<>\\\r\n]")

PRESET_QUERY_PARAM = "theme"
PRESET_COOKIE = "parkour_theme"
PRESET_STORAGE_KEY = "parkour-theme"


def hex_to_rgb(color: Optional[str]) -> tuple[int, int, int]:
    """Decompose #rgb or #rrggbb; anything else yields the default blue."""
    match = HEX_COLOR_PATTERN.match((color or "").strip())
    if not match:
        return DEFAULT_ACCENT_RGB
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def css_color(color: Optional[str]) -> str:
    """
    Accent color as written into --accent-color.

    Any CSS color value is kept as configured (bare hex digits get a "#");
    characters that could break out of the declaration are removed.
    """
    value = CSS_UNSAFE_PATTERN.sub("", color or "").strip()
    if not value:
        return DEFAULT_ACCENT_COLOR
    if HEX_COLOR_PATTERN.match(value) and not value.startswith("#"):
        value = f"#{value}"
    return value


def js_value(value) -> str:
    """Encode a value as a JavaScript literal safe inside a <script> block."""
    return json.dumps(value).replace("</", "<\\/")


BASE_STYLES = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", "Roboto", "Oxygen", "Ubuntu", "Cantarell", "Fira Sans", "Droid Sans", "Helvetica Neue", sans-serif;
            transition: background-color 0.3s ease, color 0.3s ease;
        }

        .bg-gradient {
            background: radial-gradient(ellipse 100% 60% at 80% 110%, color-mix(in srgb, var(--accent-color) 10%, transparent), transparent 80%),
                        radial-gradient(ellipse 100% 60% at 80% -10%, color-mix(in srgb, var(--accent-color) 10%, transparent), transparent 80%);
        }

        .dark .bg-gradient {
            background: radial-gradient(ellipse 100% 60% at 80% 110%, color-mix(in srgb, var(--accent-color) 20%, transparent), transparent 80%),
                        radial-gradient(ellipse 100% 60% at 80% -10%, color-mix(in srgb, var(--accent-color) 20%, transparent), transparent 80%);
        }

        .accent-gradient {
            background: linear-gradient(to right, var(--accent-color), color-mix(in srgb, var(--accent-color), #a855f7 50%));
        }

        .accent-underline::after {
            content: '';
            display: block;
            width: 3rem;
            height: 3px;
            margin: 1rem auto 0;
            border-radius: 9999px;
            background: rgba(var(--accent-color-rgb), 0.8);
        }

        .accent-bg {
            background-color: var(--accent-color);
        }

        .accent-bg:hover {
            background-color: color-mix(in srgb, var(--accent-color), black 10%);
        }

        .dark .accent-bg:hover {
            background-color: color-mix(in srgb, var(--accent-color), white 10%);
        }

        @keyframes fade-in {
            from { opacity: 0; transform: translateY(8px); }
            to { opacity: 1; transform: translateY(0); }
        }

        .fade-in { animation: fade-in 0.6s ease-out both; }
        .fade-in-delay-1 { animation: fade-in 0.6s ease-out 0.1s both; }
        .fade-in-delay-2 { animation: fade-in 0.6s ease-out 0.2s both; }
        .fade-in-delay-3 { animation: fade-in 0.6s ease-out 0.3s both; }
"""

THEME_TOGGLE = """
    <!-- Dark Mode Toggle -->
    <div class="fixed top-6 right-6 z-50">
        <button id="theme-toggle" class="p-2.5 rounded-lg border dark:border-gray-800 border-gray-200 dark:bg-gray-900 bg-gray-50 dark:hover:bg-gray-800 hover:bg-gray-100 transition-all duration-200">
            <svg id="theme-toggle-dark-icon" class="hidden w-5 h-5 dark:text-gray-400 text-gray-600" fill="currentColor" viewBox="0 0 20 20">
                <path d="M17.293 13.293A8 8 0 016.707 2.707a8.001 8.001 0 1010.586 10.586z"></path>
            </svg>
            <svg id="theme-toggle-light-icon" class="hidden w-5 h-5 dark:text-gray-400 text-gray-600" fill="currentColor" viewBox="0 0 20 20">
                <path d="M10 2a1 1 0 011 1v1a1 1 0 11-2 0V3a1 1 0 011-1zm4 8a4 4 0 11-8 0 4 4 0 018 0zm-.464 4.95l.707.707a1 1 0 001.414-1.414l-.707-.707a1 1 0 00-1.414 1.414zm2.12-10.607a1 1 0 010 1.414l-.706.707a1 1 0 11-1.414-1.414l.707-.707a1 1 0 011.414 0zM17 11a1 1 0 100-2h-1a1 1 0 100 2h1zm-7 4a1 1 0 011 1v1a1 1 0 11-2 0v-1a1 1 0 011-1zM5.05 6.464A1 1 0 106.465 5.05l-.708-.707a1 1 0 00-1.414 1.414l.707.707zm1.414 8.486l-.707.707a1 1 0 01-1.414-1.414l.707-.707a1 1 0 011.414 1.414zM4 11a1 1 0 100-2H3a1 1 0 000 2h1z" fill-rule="evenodd" clip-rule="evenodd"></path>
            </svg>
        </button>
    </div>"""

THEME_TOGGLE_SCRIPT = """
        // Dark mode toggle, persisted in localStorage, dark by default
        const themeToggleBtn = document.getElementById('theme-toggle');
        const themeToggleDarkIcon = document.getElementById('theme-toggle-dark-icon');
        const themeToggleLightIcon = document.getElementById('theme-toggle-light-icon');

        const currentTheme = localStorage.getItem('theme') || 'dark';

        if (currentTheme === 'dark') {
            document.documentElement.classList.add('dark');
            themeToggleLightIcon.classList.remove('hidden');
        } else {
            document.documentElement.classList.remove('dark');
            themeToggleDarkIcon.classList.remove('hidden');
        }

        themeToggleBtn.addEventListener('click', function() {
            themeToggleDarkIcon.classList.toggle('hidden');
            themeToggleLightIcon.classList.toggle('hidden');

            if (document.documentElement.classList.contains('dark')) {
                document.documentElement.classList.remove('dark');
                localStorage.setItem('theme', 'light');
            } else {
                document.documentElement.classList.add('dark');
                localStorage.setItem('theme', 'dark');
            }
        });
"""


def render_preset_switcher(
    presets: tuple[Preset, ...], selected: Optional[int]
) -> tuple[str, str]:
    """
    Markup and script for the development preset switcher.

    Returns ("", "") unless there is more than one preset to choose from.
    """
    if len(presets) < 2:
        return "", ""

    selected = selected or 0
    options = "".join(
        f'<option value="{index}"{" selected" if index == selected else ""}>'
        f"{escape(preset.name)}</option>"
        for index, preset in enumerate(presets)
    )
    markup = f"""
    <!-- Dev Preset Switcher -->
    <div class="fixed bottom-6 left-6 z-50">
        <select id="preset-switcher" aria-label="Preview preset"
                class="text-xs px-3 py-2 rounded-lg border dark:border-gray-800 border-gray-200 dark:bg-gray-900 bg-gray-50 dark:text-gray-300 text-gray-700">
            {options}
        </select>
    </div>"""

    script = f"""
        // Dev preset switcher: remember the choice and let the server re-resolve
        const presetSwitcher = document.getElementById('preset-switcher');
        presetSwitcher.addEventListener('change', function() {{
            const index = presetSwitcher.value;
            localStorage.setItem({js_value(PRESET_STORAGE_KEY)}, index);
            document.cookie = {js_value(PRESET_COOKIE + "=")} + index + '; path=/; SameSite=Lax';
            const url = new URL(window.location.href);
            url.searchParams.set({js_value(PRESET_QUERY_PARAM)}, index);
            window.location.href = url.toString();
        }});
"""
    return markup, script


def render_base(
    title: str,
    accent_color: str,
    content: str,
    scripts: str = "",
    additional_styles: str = "",
    presets: tuple[Preset, ...] = (),
    preset_index: Optional[int] = None,
) -> str:
    """
    Wrap page content in the shared document chrome.

    Args:
        title: Document title (escaped here)
        accent_color: CSS color; its RGB triple falls back to blue unless hex
        content: Body markup
        scripts: Page-specific script appended after the shared scripts
        additional_styles: Page-specific CSS
        presets: Local presets; a switcher is shown when there are several
        preset_index: Currently selected preset
    """
    accent = css_color(accent_color)
    rgb = hex_to_rgb(accent)

    switcher_markup, switcher_script = render_preset_switcher(presets, preset_index)

    return f"""<!DOCTYPE html>
<html lang="en" class="dark">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <script>
        tailwind.config = {{
            darkMode: 'class',
        }}
    </script>
    <style>
        :root {{
            --accent-color: {accent};
            --accent-color-rgb: {rgb[0]}, {rgb[1]}, {rgb[2]};
        }}
{BASE_STYLES}{additional_styles}
    </style>
</head>
<body class="min-h-screen transition-colors dark:bg-black bg-white">
    <div class="fixed inset-0 bg-gradient pointer-events-none"></div>
{THEME_TOGGLE}
{switcher_markup}
    {content}

    <script>
{THEME_TOGGLE_SCRIPT}{switcher_script}
        {scripts}
    </script>
</body>
</html>"""
