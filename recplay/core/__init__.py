"""
Core package for recplay.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from recplay.core.session import Session
  from recplay.core.script_loader import load_script, Script
  from recplay.core.player import run_script, Player
"""

__all__: list[str] = []
