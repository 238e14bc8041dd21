"""Sun-sign affinity table module."""

from .sign_affinity import (
    SignAffinityConfig,
    build_affinity_table,
    sign_affinity,
    element_relation,
    affinity_frame
)

__all__ = [
    "SignAffinityConfig",
    "build_affinity_table",
    "sign_affinity",
    "element_relation",
    "affinity_frame"
]
