"""
_transform.py
=============
Common shape of every algorithm in the package.

A transform turns a character matrix into distances, splits or a network.
It declares what it consumes and produces as class attributes, takes one
typed configuration object, and refuses data it is not applicable to:

    transform = HammingDistance(HammingConfig(normalize=False))
    if transform.is_applicable(chars):
        distances = transform.apply(chars, progress=listener)
"""

import logging
from typing import Optional

from pydantic import BaseModel

from splitscore._config import resolve_config
from splitscore._exceptions import NotApplicableError


logger = logging.getLogger(__name__)


CHARACTERS = "characters"
DISTANCES = "distances"
SPLITS = "splits"
NETWORK = "network"


class Transform:
    """
    Base class of all transforms.

    Subclasses set ``output_kind``, ``description``, ``config_class`` and
    implement ``applicability(characters)`` and ``apply``.
    """

    input_kind = CHARACTERS
    output_kind = ""
    description = ""
    config_class = None

    def __init__(self, config: Optional[BaseModel] = None) -> None:
        self.config = resolve_config(config, self.config_class) if self.config_class else None

    @property
    def name(self) -> str:
        return type(self).__name__

    def applicability(self, characters) -> Optional[str]:
        """Reason the transform cannot run on ``characters``, or None."""
        return None

    def is_applicable(self, characters) -> bool:
        return self.applicability(characters) is None

    def check_applicable(self, characters) -> None:
        """
        Raises
        ------
        NotApplicableError
            If ``is_applicable(characters)`` is False.
        """
        reason = self.applicability(characters)
        if reason is not None:
            raise NotApplicableError(self.name, reason)

    def apply(self, characters, progress=None, backend: str = "best"):
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.name}({self.config!r})" if self.config is not None else f"{self.name}()"
