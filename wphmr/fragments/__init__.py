"""Fragments the generated plugin is assembled from."""

from .base import Fragment, FragmentName
from .detector import DevDetectorFragment
from .header import HeaderFragment
from .injector import InjectorFragment
from .policy import PolicyFragment
from .probe import ProbeFragment


def default_fragments() -> list[Fragment]:
    """All fragments in output order."""
    return [
        HeaderFragment(),
        DevDetectorFragment(),
        ProbeFragment(),
        InjectorFragment(),
        PolicyFragment(),
    ]


__all__ = [
    "Fragment",
    "FragmentName",
    "default_fragments",
    "DevDetectorFragment",
    "HeaderFragment",
    "InjectorFragment",
    "PolicyFragment",
    "ProbeFragment",
]
