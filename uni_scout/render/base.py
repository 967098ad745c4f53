# uni_scout/render/base.py
"""
Render primitive interface.

A renderer is an async context manager owning one session (browser or HTTP
client) for a whole domain run. ``render()`` opens a single page and is itself
an async context manager, so the page is released on every exit path,
including cancellation by a timeout.
"""
from __future__ import annotations

from typing import AsyncContextManager, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class RenderedPage(Protocol):
    """A loaded page as seen by the fetcher."""

    final_url: str
    status: int
    redirect_location: Optional[str]
    title: str

    async def text(self, selector: str) -> Optional[str]:
        """innerText of the first node matching *selector*, or None if absent."""
        ...

    async def links(self) -> List[str]:
        """Raw ``href`` values of all anchors on the page."""
        ...


@runtime_checkable
class Renderer(Protocol):
    def render(self, url: str, timeout_ms: int) -> AsyncContextManager[RenderedPage]:
        ...
