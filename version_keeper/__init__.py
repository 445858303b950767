"""
Version Keeper - conflict and version-history tools for synced folders.

Features:
- Conflict file discovery across a synced folder tree
- Discard or promote conflicting copies
- Browse and restore historical versions kept in .stversions
- Storage accounting for the versions directory
- Age-based retention pruning
"""

__version__ = "1.0.0"
