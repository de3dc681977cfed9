"""Tmux control layer for projctl.

PUBLIC API:
  - TmuxClient: Typed wrapper bound to one isolated tmux server
"""

from .client import TmuxClient

__all__ = ["TmuxClient"]
