"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any formula or business rule that references a numeric constant should
import it from here instead of hardcoding.  This avoids drift between
apps that use the same value.
"""

# ── Malkhana numbering ──────────────────────────────────────────────
# Mother numbers are rendered as ``{year}-{sequence}`` with the sequence
# zero-padded to this many digits, e.g. ``2025-00042``.
MOTHER_NUMBER_PAD_WIDTH: int = 5

# ── Malkhana statistics ─────────────────────────────────────────────
# Trailing window (days) for the "recently added" dashboard counter.
# Overridable through ``settings.MALKHANA["RECENT_WINDOW_DAYS"]``.
DEFAULT_RECENT_WINDOW_DAYS: int = 30

# Attempts at allocating a Black Ink sequence before giving up with a
# conflict.  Overridable through ``settings.MALKHANA["NUMBERING_MAX_ATTEMPTS"]``.
DEFAULT_NUMBERING_MAX_ATTEMPTS: int = 3
