"""
Static classification tables.

Everything here is built once at import time and never mutated:
- USER_AGENT_SIGNATURES: ordered client fingerprints checked before any domain rule
- APP_RULES: ordered domain rules (earlier rules shadow later ones)
- DOMAIN_SHAPE_FALLBACKS: infrastructure guesses from the domain alone
- CONTENT_TYPE_RULES / EXTENSION_TYPES / REQUEST_TYPES: resource-type lookup

Order is part of the contract for the tuples. Use tuples (not dicts) for
anything ordered so duplicate domains keep their position.
"""

from __future__ import annotations

from types import MappingProxyType

from flowinsight.models import AppInfo
from flowinsight.models import ClassificationRule
from flowinsight.models import RequestType
from flowinsight.models import RequestTypeInfo
from flowinsight.models import UserAgentSignature


def _rule(
    domains: tuple[str, ...],
    name: str,
    icon: str,
    category: str,
    user_agents: tuple[str, ...] | None = None,
    headers: dict[str, str] | None = None,
) -> ClassificationRule:
    return ClassificationRule(
        domains=domains,
        app=AppInfo(name=name, icon=icon, category=category),
        user_agents=user_agents,
        headers=tuple(headers.items()) if headers else None,
    )


def _ua(pattern: str, name: str, icon: str, category: str) -> UserAgentSignature:
    return UserAgentSignature(pattern=pattern, app=AppInfo(name=name, icon=icon, category=category))


# =============================================================================
# User-agent fast path
# =============================================================================

# Checked (lowercased, substring) before any domain rule: shared gateway
# domains serve many clients that only the user agent tells apart.
# Within a group, more specific fingerprints come first (WeCom embeds
# "MicroMessenger", Edge and Opera embed "Chrome", Chrome embeds "Safari").
USER_AGENT_SIGNATURES: tuple[UserAgentSignature, ...] = (
    # Messaging clients
    _ua("wxwork", "WeCom", "💼", "Communication"),
    _ua("micromessenger", "WeChat", "💬", "Communication"),
    _ua("dingtalk", "DingTalk", "💬", "Communication"),
    _ua("lark/", "Feishu/Lark", "🐦", "Communication"),
    _ua("feishu", "Feishu/Lark", "🐦", "Communication"),
    _ua("qq/", "QQ", "🐧", "Communication"),
    _ua("telegram", "Telegram", "✈️", "Communication"),
    _ua("slack/", "Slack", "💬", "Office"),
    _ua("discord/", "Discord", "🎮", "Communication"),
    _ua("whatsapp/", "WhatsApp", "💬", "Communication"),
    # Developer tools and HTTP libraries
    _ua("postmanruntime", "Postman", "📮", "Development"),
    _ua("insomnia/", "Insomnia", "😴", "Development"),
    _ua("curl/", "cURL", "🌀", "Development"),
    _ua("wget/", "Wget", "⬇️", "Development"),
    _ua("httpie/", "HTTPie", "🥧", "Development"),
    _ua("python-requests", "Python Requests", "🐍", "Development"),
    _ua("okhttp", "OkHttp", "🤖", "Development"),
    _ua("go-http-client", "Go HTTP Client", "🐹", "Development"),
    _ua("axios/", "Axios", "🟢", "Development"),
    # Browsers
    _ua("edg/", "Edge", "🌊", "Browser"),
    _ua("edge/", "Edge", "🌊", "Browser"),
    _ua("opr/", "Opera", "🎭", "Browser"),
    _ua("firefox/", "Firefox", "🦊", "Browser"),
    _ua("chrome/", "Chrome", "🌐", "Browser"),
    _ua("safari/", "Safari", "🧭", "Browser"),
)


# =============================================================================
# Domain rules
# =============================================================================

# NOTE: matching is substring-based in both directions, so very short keys
# (e.g. "x.com", "t.co") would swallow unrelated domains like dropbox.com.
APP_RULES: tuple[ClassificationRule, ...] = (
    # Browsers
    _rule(("google.com", "bing.com", "baidu.com", "duckduckgo.com"), "Web Browser", "🌐", "Browser",
          user_agents=("Chrome", "Firefox", "Safari", "Edge")),

    # Social
    _rule(("twitter.com", "twimg.com"), "Twitter/X", "🐦", "Social"),
    _rule(("facebook.com", "fb.com", "instagram.com"), "Meta Apps", "📘", "Social"),
    _rule(("linkedin.com",), "LinkedIn", "💼", "Social"),
    _rule(("tiktok.com", "bytedance.com"), "TikTok", "🎵", "Social"),
    _rule(("weibo.com", "sina.com.cn"), "Weibo", "🐦", "Social"),

    # Localized apps (Chinese market). weixin.qq.com must stay above qq.com.
    _rule(("weixin.qq.com", "wechat.com", "servicewechat.com"), "WeChat", "💬", "Communication"),
    _rule(("qq.com", "gtimg.cn", "qpic.cn"), "QQ", "🐧", "Communication"),
    _rule(("dingtalk.com",), "DingTalk", "💬", "Office"),
    _rule(("feishu.cn", "larksuite.com"), "Feishu/Lark", "🐦", "Office"),
    _rule(("douyin.com", "amemv.com", "douyinpic.com"), "Douyin", "🎵", "Video"),
    _rule(("xiaohongshu.com", "xhscdn.com"), "Xiaohongshu", "📕", "Social"),
    _rule(("zhihu.com", "zhimg.com"), "Zhihu", "❓", "Social"),
    _rule(("alipay.com", "alipayobjects.com"), "Alipay", "💳", "Finance"),
    _rule(("meituan.com", "meituan.net"), "Meituan", "🍜", "Shopping"),
    _rule(("pinduoduo.com", "yangkeduo.com"), "Pinduoduo", "🛒", "Shopping"),

    # Music (above Video: music.youtube.com must shadow youtube.com)
    _rule(("music.163.com", "netease.com"), "NetEase Music", "🎵", "Music"),
    _rule(("spotify.com", "scdn.co"), "Spotify", "🎵", "Music"),
    _rule(("music.apple.com", "itunes.apple.com"), "Apple Music", "🎵", "Music"),
    _rule(("music.youtube.com",), "YouTube Music", "🎵", "Music"),

    # Video
    _rule(("youtube.com", "youtu.be", "googlevideo.com"), "YouTube", "📺", "Video"),
    _rule(("netflix.com", "nflxvideo.net"), "Netflix", "📺", "Video"),
    _rule(("bilibili.com", "bilivideo.com"), "Bilibili", "📺", "Video"),
    _rule(("twitch.tv", "ttvnw.net"), "Twitch", "📺", "Video"),

    # Office
    _rule(("office.com", "outlook.com", "sharepoint.com", "onedrive.com"), "Microsoft Office", "📄", "Office"),
    _rule(("google.com", "googleapis.com", "googleusercontent.com"), "Google Workspace", "📄", "Office",
          user_agents=("Google",)),
    _rule(("slack.com", "slack-edge.com"), "Slack", "💬", "Office"),
    _rule(("zoom.us", "zoom.com"), "Zoom", "📹", "Office"),
    _rule(("teams.microsoft.com",), "Microsoft Teams", "💬", "Office"),

    # Development
    _rule(("github.com", "githubusercontent.com"), "GitHub", "🐙", "Development"),
    _rule(("gitlab.com",), "GitLab", "🦊", "Development"),
    _rule(("stackoverflow.com", "stackexchange.com"), "Stack Overflow", "📚", "Development"),
    _rule(("npmjs.com", "npm.im"), "NPM", "📦", "Development"),

    # Gaming
    _rule(("steampowered.com", "steamcommunity.com", "steamstatic.com"), "Steam", "🎮", "Gaming"),
    _rule(("epicgames.com", "unrealengine.com"), "Epic Games", "🎮", "Gaming"),
    _rule(("battle.net", "blizzard.com"), "Battle.net", "🎮", "Gaming"),

    # Shopping
    _rule(("amazon.com", "amazon.cn", "amazonaws.com"), "Amazon", "🛒", "Shopping"),
    _rule(("taobao.com", "tmall.com", "alibaba.com"), "Alibaba", "🛒", "Shopping"),
    _rule(("jd.com", "360buyimg.com"), "JD.com", "🛒", "Shopping"),

    # News
    _rule(("reddit.com", "redd.it"), "Reddit", "📰", "News"),
    _rule(("news.ycombinator.com",), "Hacker News", "📰", "News"),

    # Cloud
    _rule(("icloud.com", "apple.com"), "iCloud", "☁️", "Cloud"),
    _rule(("dropbox.com", "dropboxapi.com"), "Dropbox", "☁️", "Cloud"),

    # Communication
    _rule(("whatsapp.com", "whatsapp.net"), "WhatsApp", "💬", "Communication"),
    _rule(("telegram.org", "telegram.me"), "Telegram", "💬", "Communication"),
    _rule(("discord.com", "discordapp.com"), "Discord", "💬", "Communication"),

    # System services. apple.com/icloud.com are shadowed by iCloud above,
    # so only mzstatic.com reaches the macOS rule.
    _rule(("apple.com", "icloud.com", "mzstatic.com"), "macOS System", "🍎", "System",
          user_agents=("Darwin", "CFNetwork")),
    _rule(("microsoft.com", "windows.com", "msftconnecttest.com"), "Windows System", "🪟", "System",
          user_agents=("Windows",)),
)


# Checked in order against the normalized domain when no rule matched.
DOMAIN_SHAPE_FALLBACKS: tuple[tuple[tuple[str, ...], AppInfo], ...] = (
    (("cdn", "static", "assets", "img"), AppInfo(name="CDN/Static", icon="📦", category="Infrastructure")),
    (("api", "service"), AppInfo(name="API Service", icon="🔌", category="API")),
    (("analytics", "tracking", "metrics", "stats"), AppInfo(name="Analytics", icon="📊", category="Analytics")),
)


# =============================================================================
# Resource types
# =============================================================================

REQUEST_TYPES: MappingProxyType[str, RequestTypeInfo] = MappingProxyType({
    "fetch": RequestTypeInfo("fetch", "Fetch/XHR", "🔄", "#FF6B6B"),
    "document": RequestTypeInfo("document", "Doc", "📄", "#4ECDC4"),
    "stylesheet": RequestTypeInfo("stylesheet", "CSS", "🎨", "#1572B6"),
    "script-or-data": RequestTypeInfo("script-or-data", "JS", "⚡", "#F7DF1E"),
    "font": RequestTypeInfo("font", "Font", "🔤", "#9B59B6"),
    "image": RequestTypeInfo("image", "Img", "🖼️", "#E67E22"),
    "media": RequestTypeInfo("media", "Media", "🎵", "#E74C3C"),
    "wasm": RequestTypeInfo("wasm", "Wasm", "⚙️", "#654FF0"),
    "other": RequestTypeInfo("other", "Other", "📦", "#95A5A6"),
})

# (match mode, needles, type). "contains" is a substring test, "prefix" a
# startswith test, both against the lowercased content type.
CONTENT_TYPE_RULES: tuple[tuple[str, tuple[str, ...], RequestType], ...] = (
    ("contains", ("text/html", "application/xhtml+xml"), "document"),
    ("contains", ("text/css",), "stylesheet"),
    # JSON is grouped with scripts on purpose (same bucket as DevTools "JS")
    ("contains", ("javascript", "ecmascript", "typescript", "application/js", "json"), "script-or-data"),
    ("contains", ("font", "application/vnd.ms-fontobject"), "font"),
    ("prefix", ("image/",), "image"),
    ("prefix", ("audio/", "video/"), "media"),
    ("contains", ("wasm",), "wasm"),
    ("contains", ("application/xml", "text/xml"), "fetch"),
)


def _extensions(request_type: RequestType, *extensions: str) -> dict[str, RequestType]:
    return {ext: request_type for ext in extensions}


EXTENSION_TYPES: MappingProxyType[str, RequestType] = MappingProxyType({
    **_extensions("document", "html", "htm", "xhtml", "php", "asp", "aspx", "jsp", "do"),
    **_extensions("stylesheet", "css"),
    **_extensions(
        "script-or-data",
        "js", "mjs", "cjs", "ts", "jsx", "tsx", "json", "jsonp", "es6", "es",
        "coffee", "dart", "ls", "vue", "svelte",
    ),
    **_extensions("font", "woff", "woff2", "ttf", "otf", "eot"),
    **_extensions("image", "png", "jpg", "jpeg", "gif", "svg", "webp", "ico", "bmp"),
    **_extensions("media", "mp3", "mp4", "wav", "avi", "mov", "wmv", "flv", "webm", "ogg", "m4a"),
    **_extensions("wasm", "wasm"),
})

# Path fragments that mark an XHR-style endpoint when nothing else decided.
API_PATH_MARKERS: tuple[str, ...] = ("/api/", "/ajax/")
