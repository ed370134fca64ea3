"""CLI constants."""

from .system import Application


class CLIHelp:
    """Help texts for the command line interface."""

    APP_NAME = Application.NAME
    APP_DESCRIPTION = f"{Application.DISPLAY_NAME}: cached, coalesced access to the Torn API."
    APP_STYLE = "rich"
    VERSION_TEXT = Application.DISPLAY_NAME + " v{version}"

    SNAPSHOT_HELP = "Fetch resources once and print the merged snapshot."
    WATCH_HELP = "Poll resources on an interval, reusing the shared cache."
    GYM_HELP = "Project gym gains for a training session."

    RESOURCE_OPTION_HELP = "Resource to fetch (repeatable). Defaults to the user snapshot."
    JSON_OPTION_HELP = "Output as JSON."
    INTERVAL_OPTION_HELP = "Seconds between polls."
    ITERATIONS_OPTION_HELP = "Number of polls before exiting (0 = forever)."


class CLIDefaults:
    """Default values for CLI options."""

    VERSION = Application.VERSION
    WATCH_INTERVAL = 10.0
    WATCH_ITERATIONS = 0


__all__ = ["CLIDefaults", "CLIHelp"]
