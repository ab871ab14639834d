from . import ask, system

__all__ = ["ask", "system"]
