"""Base class for generated plugin fragments."""

from abc import ABC, abstractmethod
from enum import Enum

from wphmr.config import HmrOptions
from wphmr.origin import Origin


class FragmentName(str, Enum):
    """Fragments of the generated plugin, in output order."""

    HEADER = "header"
    DEV_DETECTOR = "dev_detector"
    PROBE = "probe"
    INJECTOR = "injector"
    POLICY = "policy"


class Fragment(ABC):
    """One independent block of the generated plugin.

    Fragments hold no state: ``render`` is a pure function of its arguments
    and returns ``None`` when the block is not part of the output.
    """

    name: FragmentName

    # PHP function the fragment defines, if any
    function_name: str | None = None

    @abstractmethod
    def render(self, origin: Origin, options: HmrOptions) -> str | None:
        """Return the fragment's PHP source, without a trailing newline."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name.value!r})"
