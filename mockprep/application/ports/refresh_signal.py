from abc import ABC, abstractmethod


class RefreshSignalPort(ABC):
    @abstractmethod
    def dispatch(self, user_id: str, reason: str) -> None:
        """Tell credit/quota consumers to reload. Must not raise."""
        raise NotImplementedError
