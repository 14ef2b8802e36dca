from __future__ import annotations

import tkinter as tk

from controllers.clipboard import Clipboard_Unavailable


class Tk_Clipboard:
    """System clipboard through a Tk widget.

    Tk clipboard calls are synchronous; they are wrapped in coroutines so the
    clipboard manager can treat every backend alike.
    """

    def __init__(self, root: tk.Misc) -> None:
        self.root = root

    async def read_text(self) -> str:
        try:
            return self.root.clipboard_get()
        except tk.TclError as xcp:
            # Tk raises when the clipboard is empty or holds no text
            raise Clipboard_Unavailable(str(xcp)) from xcp

    async def write_text(self, text: str) -> None:
        try:
            self.root.clipboard_clear()
            self.root.clipboard_append(text)
        except tk.TclError as xcp:
            raise Clipboard_Unavailable(str(xcp)) from xcp
