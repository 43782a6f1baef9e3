"""Enum definitions and shared defaults for billing records."""

from enum import Enum

# Neutral gray used when an owner has no color of its own
DEFAULT_OWNER_COLOR = "#6B7280"


class UnattributedCostPolicy(str, Enum):
    """What to do with variable cost when no consumption was metered."""

    SPLIT_EQUALLY = "split_equally"  # Share it like fixed costs
    DROP = "drop"  # Report it, but charge nobody
