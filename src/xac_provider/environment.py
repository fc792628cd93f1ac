"""Environment providers used for option defaults and fallbacks."""

import os
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from dotenv import dotenv_values


logger = logging.getLogger(__name__)


class EnvironmentProvider(ABC):
    """Source of environment variables."""

    @abstractmethod
    def lookup(self, name: str) -> Optional[str]:
        """Return the raw value of a variable, or None if it is not set."""
        pass

    def get(self, name: str) -> Optional[str]:
        """Get a variable, treating an empty value as unset."""
        value = self.lookup(name)
        if value is None or value == "":
            return None
        return value


class OSEnvironment(EnvironmentProvider):
    """Reads the process environment at call time."""

    def lookup(self, name: str) -> Optional[str]:
        return os.environ.get(name)


class MappingEnvironment(EnvironmentProvider):
    """Environment backed by a fixed mapping."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def lookup(self, name: str) -> Optional[str]:
        return self._values.get(name)


class DotEnvEnvironment(EnvironmentProvider):
    """Environment loaded from a .env file.

    Variables missing from the file are looked up in ``fallback``, which
    defaults to the process environment.
    """

    def __init__(
        self,
        path: Union[str, Path] = ".env",
        fallback: Optional[EnvironmentProvider] = None
    ):
        self.path = Path(path)
        self.fallback = fallback if fallback is not None else OSEnvironment()
        self._values: Dict[str, Optional[str]] = {}

        if self.path.exists():
            self._values = dict(dotenv_values(self.path))
            logger.debug(f"Loaded {len(self._values)} variables from {self.path}")
        else:
            logger.debug(f"No env file found at {self.path}")

    def lookup(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        if value:
            return value
        return self.fallback.lookup(name)
