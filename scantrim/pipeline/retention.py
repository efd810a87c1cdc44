"""Page retention policy: which pages survive trimming."""

from collections import OrderedDict
from typing import Dict, List, Sequence

from ..config import RETENTION_RULES

BLANK_COVERAGE_THRESHOLD = 1.0  # percent


def should_keep_page(coverage: float, threshold: float = BLANK_COVERAGE_THRESHOLD) -> bool:
    """Keep a page image whose coverage is at least ``threshold`` percent."""
    return coverage >= threshold


def decide_page(decisions: Sequence[bool], rule: str = "all") -> bool:
    """Fold the per-image decisions of one page into a single keep/discard.
    
    Args:
        decisions: Per-image decisions in evaluation order
        rule: "all" (every image must pass), "any" (one passing image is enough)
            or "last" (the last evaluated image decides)
            
    Raises:
        ValueError: If decisions is empty or the rule is unknown
    """
    if not decisions:
        raise ValueError("Cannot decide a page without image decisions")
    if rule == "all":
        return all(decisions)
    if rule == "any":
        return any(decisions)
    if rule == "last":
        return decisions[-1]
    raise ValueError(f"Unknown retention rule: {rule}")


class RetentionPlan:
    """Accumulates image decisions per page for one document."""
    
    def __init__(self, rule: str = "all", threshold: float = BLANK_COVERAGE_THRESHOLD):
        if rule not in RETENTION_RULES:
            raise ValueError(f"Unknown retention rule: {rule}")
        self.rule = rule
        self.threshold = threshold
        self._decisions: "OrderedDict[int, List[bool]]" = OrderedDict()
    
    def record(self, page_number: int, coverage: float) -> bool:
        """Record one image's coverage for a page and return its decision."""
        keep = should_keep_page(coverage, self.threshold)
        self._decisions.setdefault(page_number, []).append(keep)
        return keep
    
    def as_map(self) -> Dict[int, bool]:
        """Page number -> final decision, for every page with at least one image."""
        return {
            page_number: decide_page(decisions, self.rule)
            for page_number, decisions in self._decisions.items()
        }
