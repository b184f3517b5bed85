from .service import ReceivablesService

__all__ = ["ReceivablesService"]
