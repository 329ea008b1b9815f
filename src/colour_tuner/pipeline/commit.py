"""
Commit workflow - saves the current bounds on the server under a name.

A single explicit action, so it posts directly instead of going through the
dispatcher. Double submits are not deduplicated.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..params import NamedConfiguration, ParameterState
from ..remote import RemoteAuthority, RemoteError

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Configuration saved successfully."
FAILED_MESSAGE = "Failed to save configuration."


class InvalidColourName(ValueError):
    """The colour name can't be submitted."""


def validate_colour_name(name: Optional[str]) -> str:
    """Return the trimmed name, or raise InvalidColourName.

    A name must be non-blank and must not contain whitespace.
    """
    name = (name or "").strip()
    if not name:
        raise InvalidColourName("Please enter a name.")
    if any(ch.isspace() for ch in name):
        raise InvalidColourName("Name cannot contain spaces.")
    return name


class CommitWorkflow:
    """
    Validates a colour name and asks the server to persist the bounds.

    Usage:
        commit = CommitWorkflow(remote, state, acknowledge=print)
        await commit.submit("myColour")
    """

    def __init__(
        self,
        remote: RemoteAuthority,
        state: ParameterState,
        acknowledge: Optional[Callable[[str], None]] = None,
    ):
        self.remote = remote
        self.state = state
        self.acknowledge = acknowledge or (lambda message: logger.info(message))

    async def submit(self, name: Optional[str]) -> Optional[NamedConfiguration]:
        """Submit ``name``.

        Returns:
            The configuration that was saved, or None if the name was
            rejected or the server refused it. The operator is told either way.
        """
        try:
            name = validate_colour_name(name)
        except InvalidColourName as e:
            self.acknowledge(str(e))
            return None

        config = self.state.named(name)
        try:
            await self.remote.submit_colour(name)
        except RemoteError as e:
            logger.error(f"Submit error: {e}")
            self.acknowledge(FAILED_MESSAGE)
            return None

        logger.info(f"Saved {config.name}: lower={config.lower} upper={config.upper}")
        self.acknowledge(SAVED_MESSAGE)
        return config
