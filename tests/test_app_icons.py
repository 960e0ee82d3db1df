from __future__ import annotations

from flowinsight.app_icons import APP_ICONS
from flowinsight.app_icons import app_icon_from_user_agent
from flowinsight.app_icons import get_app_icon


def test_exact_name() -> None:
    assert get_app_icon("Chrome").color == "#4285F4"
    assert get_app_icon("  GitHub ").name == "GitHub"


def test_whole_word_match() -> None:
    assert get_app_icon("Google Chrome") == APP_ICONS["chrome"]
    assert get_app_icon("Web Browser", "Browser") == APP_ICONS["web"]
    # "web" inside a longer word does not count
    assert get_app_icon("Cobweb Reader") == APP_ICONS["unknown"]


def test_category_fallback() -> None:
    assert get_app_icon("CDN/Static", "Infrastructure") == APP_ICONS["infrastructure"]
    assert get_app_icon("Some Tracker", "Analytics").icon == "📊"


def test_name_hints() -> None:
    assert get_app_icon("GraphQL Gateway") == APP_ICONS["api"]
    assert get_app_icon("Admin Console") == APP_ICONS["terminal"]


def test_unknown() -> None:
    assert get_app_icon(None) == APP_ICONS["unknown"]
    assert get_app_icon("") == APP_ICONS["unknown"]
    assert get_app_icon("Zzz", "Nope").name == "Unknown"


def test_from_user_agent() -> None:
    chrome = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    assert app_icon_from_user_agent(chrome) == APP_ICONS["chrome"]
    assert app_icon_from_user_agent(chrome + " Edg/120.0.0.0") == APP_ICONS["edge"]
    assert app_icon_from_user_agent("MyApp/1.0 (iPhone; iOS 17.0)") == APP_ICONS["ios"]
    assert app_icon_from_user_agent("curl/8.4.0") == APP_ICONS["curl"]
    assert app_icon_from_user_agent("SomethingElse/1.0") == APP_ICONS["web"]
    assert app_icon_from_user_agent(None) == APP_ICONS["unknown"]
