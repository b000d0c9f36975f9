from vdk_publish.tui.renderers import PublishConsoleUI

__all__ = ["PublishConsoleUI"]
