"""Arena outline for spatial reference."""

from OpenGL.GL import *
from config import swarm as config


class ArenaBorder:
    """Draws the wrap boundary and the inner edge-avoidance margin."""
    
    def __init__(self):
        self.margin = config.EDGES["margin"]
        self.color = config.COLORS["border"]
    
    def draw(self, half_width: float, half_height: float):
        """
        Draw the outline.
        
        Args:
            half_width: Half the viewport width (wrap threshold on x)
            half_height: Half the viewport height (wrap threshold on y)
        """
        w, h = half_width, half_height
        iw, ih = w - self.margin, h - self.margin
        r, g, b = self.color
        
        glBegin(GL_LINE_LOOP)
        glColor3f(r, g, b)
        glVertex2f(-w, -h); glVertex2f(w, -h)
        glVertex2f(w, h); glVertex2f(-w, h)
        glEnd()
        
        # Margin band, dimmer
        glBegin(GL_LINE_LOOP)
        glColor3f(r * 0.5, g * 0.5, b * 0.5)
        glVertex2f(-iw, -ih); glVertex2f(iw, -ih)
        glVertex2f(iw, ih); glVertex2f(-iw, ih)
        glEnd()
