from abc import ABC, abstractmethod

from src.libs.result import Result


class Notifier(ABC):
    """Outbound message delivery port"""

    @abstractmethod
    async def send(self, to: str, subject: str, body: str) -> Result[None]:
        """Deliver a plain-text message; Error(DELIVERY_ERROR) on failure"""
        pass
