"""多 Provider 并发分发。"""

from panel_core.dispatch.dispatcher import dispatch_all

__all__ = ["dispatch_all"]
