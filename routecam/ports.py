"""Abstract edges of a capture cycle — where photos come from and where results go."""
from abc import ABC, abstractmethod


class CaptureSource(ABC):
    @abstractmethod
    async def capture(self) -> bytes:
        """Return the raw bytes of one still image. Raises CaptureError on failure."""
        ...


class ResultSink(ABC):
    @abstractmethod
    async def show(self, text: str) -> None:
        """Display one analysis or error string to the user."""
        ...
