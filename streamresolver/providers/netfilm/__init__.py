from .netfilm import NetfilmProvider

__all__ = ["NetfilmProvider"]
