from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends

from mockprep.api.v1.schemas import WindowDaySchema
from mockprep.application.policies.time_slot_policy import booking_window
from mockprep.core.config import settings
from mockprep.wiring.dependencies import get_clock

router = APIRouter()


@router.get("/slots/window", response_model=list[WindowDaySchema])
def slot_window(clock: Callable[[], datetime] = Depends(get_clock)):
    return [WindowDaySchema.from_candidate(c) for c in booking_window(clock(), settings.BOOKING_WINDOW_DAYS)]
