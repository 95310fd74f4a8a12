"""AnalysisClient — abstract base for chat-completion analysis backends."""
from abc import ABC, abstractmethod

from routecam.prompt import ChatMessage


class AnalysisClient(ABC):
    model: str

    @abstractmethod
    async def analyze(self, messages: list[ChatMessage]) -> str:
        """Send the messages in one request and return the first answer's text.

        Returns MSG_NO_DESCRIPTION when the endpoint answers with nothing.
        Raises RemoteCallError on any network, auth or response-shape failure.
        """
        ...
