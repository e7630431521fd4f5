# src/eunit_runner/eunit_options.py
"""Option list handed to ``eunit:test/2``."""

from .config.config_types import EunitOptions
from .constants import DEFAULT_REPORTER
from .terms import Term, has_keyword


def compose_eunit_options(options: EunitOptions) -> list[Term]:
    """Build the engine options from the declared ones and the switches.

    ``verbose`` goes first when requested. Unless the project already picked
    a ``{report, _}`` reporter, the progress reporter is installed with
    ``no_tty`` so EUnit's own tty output does not duplicate it.
    """
    opts: list[Term] = list(options["eunit_opts"])

    if options["verbose"]:
        opts = ["verbose", *opts]

    if not has_keyword(opts, "report"):
        reporter_opts: list[Term] = []
        if options["color"]:
            reporter_opts.append("colored")
        if options["profile"]:
            reporter_opts.append("profile")
        opts = ["no_tty", ("report", (DEFAULT_REPORTER, reporter_opts)), *opts]

    return opts
