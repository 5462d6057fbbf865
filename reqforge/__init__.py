from .core import ReqForgeCore

__all__ = ["ReqForgeCore"]
