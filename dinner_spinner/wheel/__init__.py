"""
Wheel presentation.

Responsibilities:
- Lay out up to twelve equal sectors for the visible items.
- Find the sector backing a server-chosen winner.
- Compute the clockwise rotation that stops that sector under the pointer.
- Hold the winner back until the spin animation has finished.
"""
