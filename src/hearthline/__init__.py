"""
Hearthline - moderated family messaging core

The path a family member's message takes from draft to delivery:
screened by a remote safety classifier (rate limited, circuit broken,
fail-open by default), then appended to a per-thread hash-linked
history whose tampering is detectable after the fact.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
