"""
Render Sinks - Where formatted telemetry text ends up
"""
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Optional


class RenderSink(ABC):
    """Presentation-side receiver of overlay text"""

    # Most recent text, for sinks that keep it
    latest_text: Optional[str] = None

    @abstractmethod
    def render(self, text: str) -> None:
        """Display the text; must not block"""
        pass


class MemoryRenderSink(RenderSink):
    """Keeps the latest text and a bounded history"""

    def __init__(self, history_size: int = 100):
        self.latest_text: Optional[str] = None
        self.history: Deque[str] = deque(maxlen=history_size)
        self.render_count = 0

    def render(self, text: str) -> None:
        self.latest_text = text
        self.history.append(text)
        self.render_count += 1
