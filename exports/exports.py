# exports/exports.py

import logging
from fastapi import APIRouter, HTTPException, Request, Depends
from fastapi.responses import Response

from analytics.aggregation import monthly_financials, mountain_summary
from auth.admin import get_current_admin
from bookings.bookings import booking_filters, fetch_bookings
from bookings.filters import filter_bookings
from exports import formatter
from models.filters import BookingFilters, ExportOptions

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin/exports",
    tags=["exports"],
    dependencies=[Depends(get_current_admin)],
)


def export_options(
    include_members: bool = True,
    include_payment_info: bool = True,
    include_contact_info: bool = True,
    include_medical_info: bool = False,
) -> ExportOptions:
    return ExportOptions(
        include_members=include_members,
        include_payment_info=include_payment_info,
        include_contact_info=include_contact_info,
        include_medical_info=include_medical_info,
    )


@router.get("/{kind}")
async def export_bookings(
    kind: str,
    request: Request,
    filters: BookingFilters = Depends(booking_filters),
    options: ExportOptions = Depends(export_options),
):
    """Download the filtered bookings as CSV."""
    if kind not in formatter.EXPORT_FILENAMES:
        raise HTTPException(status_code=404, detail=f"Unknown export '{kind}'.")

    bookings = filter_bookings(await fetch_bookings(request.app.store), filters)
    if kind == "basic":
        content = formatter.export_basic_summary(bookings, options)
    elif kind == "participants":
        content = formatter.export_participants(bookings, options)
    elif kind == "mountain-summary":
        content = formatter.export_mountain_summary(mountain_summary(bookings))
    else:
        content = formatter.export_financial_summary(monthly_financials(bookings))

    filename = formatter.export_filename(kind)
    logger.info(f"Exported {len(bookings)} bookings as {filename}")
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
