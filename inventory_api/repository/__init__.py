"""Repository layer: DB access helpers.

Keep functions thin and focused, so services avoid SQL strings. Dynamic
statements are assembled in `statements`; `inventory_repo` executes them.
"""
from __future__ import annotations
