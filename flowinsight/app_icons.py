"""
Icon and color lookup for application names.

Used to color app badges in the flow list. Lookup order for a name:
exact key, whole-word match, category key, name hints, "unknown".
"""

from __future__ import annotations

import re
from types import MappingProxyType

from flowinsight.models import AppIconInfo


def _icon(icon: str, color: str, name: str) -> AppIconInfo:
    return AppIconInfo(icon=icon, color=color, name=name)


# Insertion order matters for the fuzzy pass: first whole-word hit wins.
APP_ICONS: MappingProxyType[str, AppIconInfo] = MappingProxyType({
    # Browsers
    "chrome": _icon("🌐", "#4285F4", "Chrome"),
    "firefox": _icon("🦊", "#FF7139", "Firefox"),
    "safari": _icon("🧭", "#006CFF", "Safari"),
    "edge": _icon("🌊", "#0078D4", "Edge"),
    "opera": _icon("🎭", "#FF1B2D", "Opera"),
    # Network tools
    "postman": _icon("📮", "#FF6C37", "Postman"),
    "insomnia": _icon("😴", "#4000BF", "Insomnia"),
    "curl": _icon("🌀", "#073551", "cURL"),
    "wget": _icon("⬇️", "#2E8B57", "Wget"),
    # Mobile
    "ios": _icon("📱", "#007AFF", "iOS App"),
    "android": _icon("🤖", "#3DDC84", "Android App"),
    # Communication
    "wechat": _icon("💬", "#07C160", "WeChat"),
    "slack": _icon("💬", "#4A154B", "Slack"),
    "discord": _icon("🎮", "#5865F2", "Discord"),
    "telegram": _icon("✈️", "#0088CC", "Telegram"),
    "whatsapp": _icon("💬", "#25D366", "WhatsApp"),
    # Media
    "spotify": _icon("🎵", "#1DB954", "Spotify"),
    "youtube": _icon("📺", "#FF0000", "YouTube"),
    "netflix": _icon("🎬", "#E50914", "Netflix"),
    "twitch": _icon("🎮", "#9146FF", "Twitch"),
    "bilibili": _icon("📺", "#00A1D6", "Bilibili"),
    # Cloud
    "aws": _icon("☁️", "#FF9900", "AWS"),
    "azure": _icon("☁️", "#0078D4", "Azure"),
    "github": _icon("🐙", "#181717", "GitHub"),
    # Defaults / categories
    "unknown": _icon("❓", "#666666", "Unknown"),
    "system": _icon("⚙️", "#666666", "System"),
    "network": _icon("🌐", "#007ACC", "Network"),
    "api": _icon("🔌", "#FF6B6B", "API"),
    "web": _icon("🌍", "#4CAF50", "Web"),
    "mobile": _icon("📱", "#2196F3", "Mobile"),
    "desktop": _icon("🖥️", "#9C27B0", "Desktop"),
    "terminal": _icon("💻", "#000000", "Terminal"),
    "infrastructure": _icon("📦", "#607D8B", "Infrastructure"),
    "analytics": _icon("📊", "#795548", "Analytics"),
})

_NAME_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("browser",), "web"),
    (("mobile", "iphone", "ipad"), "mobile"),
    (("rest", "graphql"), "api"),
    (("shell", "cmd", "console"), "terminal"),
)


def get_app_icon(app_name: str | None, app_category: str | None = None) -> AppIconInfo:
    """Find the icon/color for an app name, falling back to its category."""
    if not app_name:
        return APP_ICONS["unknown"]

    name = app_name.lower().strip()
    if name in APP_ICONS:
        return APP_ICONS[name]

    words = set(re.split(r"[^a-z0-9]+", name))
    for key, info in APP_ICONS.items():
        if key in words:
            return info

    if app_category:
        category = app_category.lower()
        if category in APP_ICONS:
            return APP_ICONS[category]

    for hints, key in _NAME_HINTS:
        if any(hint in name for hint in hints):
            return APP_ICONS[key]

    return APP_ICONS["unknown"]


def app_icon_from_user_agent(user_agent: str | None) -> AppIconInfo:
    """Guess a client icon straight from a User-Agent string."""
    if not user_agent:
        return APP_ICONS["unknown"]

    ua = user_agent.lower()

    if "edg" in ua:
        return APP_ICONS["edge"]
    if "opr/" in ua or "opera" in ua:
        return APP_ICONS["opera"]
    if "firefox" in ua:
        return APP_ICONS["firefox"]
    if "chrome" in ua:
        return APP_ICONS["chrome"]
    if "safari" in ua:
        return APP_ICONS["safari"]

    if "iphone" in ua or "ipad" in ua:
        return APP_ICONS["ios"]
    if "android" in ua:
        return APP_ICONS["android"]

    for tool in ("postman", "insomnia", "curl", "wget"):
        if tool in ua:
            return APP_ICONS[tool]

    return APP_ICONS["web"]
