"""techtree - topic graph engine for a gamified skill tech tree.

Unlock status, goal paths, layered layout and cluster boundary geometry over a
list of topics with prerequisite dependencies.
"""

__version__ = "0.1.0"
