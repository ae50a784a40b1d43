"""
ripplesim: 2D Spring-Mass Ripple Simulator

A grid of point masses coupled to their four neighbors by springs and
anchored to rest height, disturbed by eased "drops" at random cells.

Core concepts:
- Springs spread displacement to neighbors
- The ground spring pulls every cell back to rest
- Damping bleeds energy each step
- Drops pin a cell to a smoothly rising and falling height
- Only the middle of the grid is shown; the margin absorbs edge effects
"""

__version__ = "0.1.0"
