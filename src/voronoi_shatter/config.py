# MIT License (see LICENSE)
"""
Per-object fragmentation settings.

A FragmentationConfig is static for a breakable object: it is read at the
start of every pass and never modified by the pipeline.
"""
from __future__ import annotations
from dataclasses import dataclass, field

from .types import CrossSection


@dataclass(frozen=True)
class FragmentationConfig:
    """
    Settings that control how an object shatters.

    Attributes:
        fragment_count: Number of Voronoi seeds (upper bound on fragments). >= 1.
        fragment_lifetime: Seconds before a fragment is destroyed. 0 destroys
                           them at the end of the next scene step.
        minimum_fragment_size: Minimum bounds diagonal of an accepted fragment.
        minimum_vertex_count: Minimum vertex count of an accepted fragment.
        cross_section: Material applied to faces exposed by a cut.
    """
    fragment_count: int = 8
    fragment_lifetime: float = 1.0
    minimum_fragment_size: float = 0.1
    minimum_vertex_count: int = 8
    cross_section: CrossSection = field(default_factory=CrossSection)

    def __post_init__(self) -> None:
        if self.fragment_count < 1:
            raise ValueError(f"fragment_count must be >= 1, got {self.fragment_count}")
        if self.fragment_lifetime < 0:
            raise ValueError(f"fragment_lifetime must be >= 0, got {self.fragment_lifetime}")
        if self.minimum_fragment_size < 0:
            raise ValueError(f"minimum_fragment_size must be >= 0, got {self.minimum_fragment_size}")
        if self.minimum_vertex_count < 0:
            raise ValueError(f"minimum_vertex_count must be >= 0, got {self.minimum_vertex_count}")
