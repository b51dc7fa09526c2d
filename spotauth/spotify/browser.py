import webbrowser

from spotauth.core.logging_utils import log_info, log_step, log_warning


def launch_browser(url: str) -> bool:
    """
    Ask the OS to open `url` in the default browser.

    Never raises: if no browser can be started the URL is logged so the user
    can copy/paste it, and the flow keeps waiting for the callback.
    """
    log_step("Opening browser for Spotify authorization...")
    try:
        opened = webbrowser.open(url)
    except (webbrowser.Error, OSError) as e:
        log_warning(f"Could not open a browser ({e}).")
        opened = False

    if not opened:
        log_warning("No browser was opened automatically.")
    log_info(f"If your browser does not open, copy/paste this URL manually:\n{url}")
    return opened
