"""RumEventLinker: isolated event namespace for rumkit.

All rumkit subscribers register here. Separate from any other
pyventus usage in the host process.
"""

from __future__ import annotations

from pyventus.events import EventLinker


class RumEventLinker(EventLinker):
    """Isolated event namespace for rumkit."""

    pass
