from datetime import date

from fastapi import HTTPException, Query


class DatePeriod:
    """
    FastAPI dependency parsing an inclusive ``date_debut`` .. ``date_fin``
    query-string period.

    Usage in a router::

        @router.get("/events/logistics")
        async def get_logistics_dates(period: DatePeriod = Depends()):
            ...

    A period whose start falls after its end is rejected with 422 before
    the service layer is reached.  A single-day period is valid.
    """

    def __init__(
        self,
        date_debut: date = Query(..., description="First start date, inclusive."),
        date_fin: date = Query(..., description="Last start date, inclusive."),
    ) -> None:
        if date_debut > date_fin:
            raise HTTPException(status_code=422, detail="date_debut must not be after date_fin")
        self.date_debut = date_debut
        self.date_fin = date_fin
