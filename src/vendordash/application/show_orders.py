"""Application service: Show Orders use case (query)."""

from __future__ import annotations

from vendordash.application.dto import DayColumnDTO, OrderBoardDTO, OrderSummaryDTO
from vendordash.application.load_orders import LoadOrdersHandler
from vendordash.application.working_set import WorkingSet
from vendordash.domain.model.value_objects import DateWindow


class ShowOrdersHandler:

    def __init__(self, working_set: WorkingSet, load_orders: LoadOrdersHandler) -> None:
        self._working_set = working_set
        self._load_orders = load_orders

    async def handle(self, window: DateWindow) -> OrderBoardDTO:
        """Load *window* and lay its orders out by delivery day.

        If the load fails the board still shows whatever was loaded
        before, together with the error.
        """
        await self._load_orders.handle(window)
        columns = [
            DayColumnDTO(
                date=day.isoformat(),
                orders=[OrderSummaryDTO.of(o) for o in self._working_set.orders_on(day)],
            )
            for day in window.days()
        ]
        return OrderBoardDTO(columns=columns, error=self._working_set.error)
