"""
Console Sink
============

Local diagnostic output for user log calls.

Every call that enters the dispatcher is written here exactly once, so the
process's own output never depends on broker delivery.
"""

import logging
import sys
from typing import Optional

from ..schemas import LogCall, Severity, resolve_message


_LEVELS = {
    Severity.TRACE: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.ERROR: logging.ERROR,
}


class ConsoleSink:
    """
    Writes resolved log calls to the ``log2mqtt.console`` logger.

    A stderr handler with a plain ``asctime message`` format is installed
    when the logger has none, mirroring a bare process log. The logger then
    stops propagating, so an application that also configures the root
    logger sees each line once.
    """

    def __init__(
        self,
        logger_name: str = "log2mqtt.console",
        level: int = logging.DEBUG
    ):
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter('%(asctime)s %(message)s'))
            self.logger.addHandler(handler)
            self.logger.propagate = False

    def write(self, call: LogCall, message: Optional[str] = None) -> None:
        """
        Log one call locally.

        Args:
            call: The user call
            message: Already resolved message text (resolved here if omitted)
        """
        if message is None:
            message = resolve_message(call.template, call.arguments)
        self.logger.log(_LEVELS[call.severity], message)
