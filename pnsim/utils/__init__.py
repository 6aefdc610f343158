from __future__ import annotations
from .constants import Q, K_B, K_B_EV, EPS0, CM3_PER_M3

__all__ = ["Q", "K_B", "K_B_EV", "EPS0", "CM3_PER_M3"]
