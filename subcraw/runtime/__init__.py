from .context import RuntimeContext

__all__ = ["RuntimeContext"]
