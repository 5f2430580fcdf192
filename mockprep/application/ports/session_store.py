from abc import ABC, abstractmethod
from typing import Callable

from mockprep.application.use_cases.booking_lifecycle import BookingLifecycle
from mockprep.domain.entities.session import SessionContext


class SessionStorePort(ABC):
    @abstractmethod
    def get_or_create(
        self,
        session: SessionContext,
        factory: Callable[[SessionContext], BookingLifecycle],
    ) -> BookingLifecycle:
        raise NotImplementedError

    @abstractmethod
    def discard(self, session: SessionContext) -> bool:
        raise NotImplementedError
