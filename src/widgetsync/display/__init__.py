"""Display subsystem for widget rendering.

Provides:
- Graphics primitives (colors, rings, text)
- render_view() for turning view models into images
- ImageDisplayRegistry, the default DisplayRegistry

Only the graphics primitives are re-exported here; import the renderer
and registry from their modules.
"""

from .graphics import Color, Colors, draw_progress_ring, draw_rect, draw_text

__all__ = [
    "Color",
    "Colors",
    "draw_progress_ring",
    "draw_rect",
    "draw_text",
]
