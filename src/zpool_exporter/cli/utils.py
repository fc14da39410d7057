import logging

import click

TRACE = 5

LOG_LEVELS = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}


class LogLevel(click.ParamType):
    name = "level"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        level = LOG_LEVELS.get(str(value).lower())
        if level is None:
            self.fail(
                "Unknown log level! %s, expected off, error, warn, info, debug, or trace!" % value,
                param,
                ctx,
            )
        return level


def configure_logging(level: int):
    logging.addLevelName(TRACE, "TRACE")
    logging.basicConfig(
        level=level,
        format="[%(asctime)s][%(name)s][%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d][%H:%M:%S",
        force=True,
    )
