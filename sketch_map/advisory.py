# sketch_map/advisory.py
from __future__ import annotations

"""
Boundary to an external style advisor.

An advisor looks at the encoded image and suggests either a filter label or a
strength in [0,1], each with a line of free-text guidance. How it decides is
not our concern. advise_config() folds its answers into a FilterConfig and
never lets an advisor failure reach the render path.
"""

import math
from dataclasses import dataclass
from typing import List, Protocol, Tuple

from .core_types import FilterConfig, FilterType, parse_filter_type
from .utils import debug_log, warn


@dataclass(frozen=True)
class FilterSuggestion:
    filter_label: str
    guidance: str = ""


@dataclass(frozen=True)
class StrengthSuggestion:
    strength: float
    guidance: str = ""


class StyleAdvisor(Protocol):
    def suggest_filter(self, image_bytes: bytes) -> FilterSuggestion: ...

    def suggest_strength(
        self, image_bytes: bytes, filter_type: FilterType
    ) -> StrengthSuggestion: ...


def advise_config(
    advisor: StyleAdvisor,
    image_bytes: bytes,
    base: FilterConfig,
    *,
    pick_filter: bool = True,
    pick_strength: bool = True,
    debug: bool = False,
) -> Tuple[FilterConfig, List[str]]:
    """
    Ask the advisor for a filter and/or strength.

    Returns (config, guidance_lines). Any part the advisor cannot answer
    (exception, unknown label, non-numeric strength) keeps the value from base.
    """
    config = base
    guidance: List[str] = []

    if pick_filter:
        try:
            suggestion = advisor.suggest_filter(image_bytes)
            config = config.with_changes(
                filter_type=parse_filter_type(suggestion.filter_label)
            )
            if suggestion.guidance:
                guidance.append(suggestion.guidance)
        except Exception as e:  # advisor is external; its failures are not ours
            warn(f"filter suggestion unavailable ({e}); keeping {config.filter_type}")

    if pick_strength:
        try:
            suggestion_s = advisor.suggest_strength(image_bytes, config.filter_type)
            strength = float(suggestion_s.strength)
            if math.isnan(strength):
                raise ValueError("strength is NaN")
            config = config.with_changes(intensity=strength)
            if suggestion_s.guidance:
                guidance.append(suggestion_s.guidance)
        except Exception as e:
            warn(f"strength suggestion unavailable ({e}); keeping {config.intensity:g}")

    if debug:
        debug_log(f"advised filter={config.filter_type} intensity={config.intensity:g}")
    return config, guidance


__all__ = ["FilterSuggestion", "StrengthSuggestion", "StyleAdvisor", "advise_config"]
