from anisource.core.exceptions import ProviderUnavailableError
from anisource.ui import ErrorHandler, THEME_STYLES, build_theme, get_console, setup_console


def test_every_theme_defines_the_same_styles():
    names = {frozenset(styles) for styles in THEME_STYLES.values()}

    assert len(names) == 1


def test_unknown_theme_falls_back_to_default():
    assert build_theme("neon").styles == build_theme("default").styles


def test_theme_derives_table_and_status_styles():
    styles = build_theme("dark").styles

    assert str(styles["table.header"]) == "bold bright_blue"
    assert str(styles["status.disabled"]) == "bright_black"


def test_setup_console_replaces_global_console():
    console = setup_console("light", width=100)

    assert get_console() is console
    assert console.width == 100


def test_error_panel_escapes_provider_text():
    console = setup_console(width=120)
    error = ProviderUnavailableError("HTTP 503 for [snk]", provider="consumet/[gogo]")

    with console.capture() as capture:
        ErrorHandler().handle_error(error)

    output = capture.get()
    assert "HTTP 503 for [snk]" in output
    assert "consumet/[gogo]" in output
