"""
Qt signals for the snippet library.

The registry emits these after every change so that open editors can
refresh their snippet lists. Receivers query the registry for the current
state; the signals carry no payload.
"""

from PyQt6.QtCore import QObject, pyqtSignal


class SnippetSignals(QObject):
    """
    Qt signals for snippet registry state changes.

    Signals:
        saved_changed: Emitted when the saved namespace is modified or replaced
        recent_changed: Emitted when the recent namespace is modified or replaced
    """

    saved_changed = pyqtSignal()
    recent_changed = pyqtSignal()

    def __init__(self):
        super().__init__()


# Shared instance used by registries that are not given their own
snippet_signals = SnippetSignals()
