"""Timezone preference and conversion endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_timezone_store, verify_api_key
from api.models.requests import ConvertRequest, TimezoneModeUpdate, TimezoneZoneUpdate
from api.models.responses import (
    ErrorCodes,
    FormattedDateResponse,
    TimestampResponse,
    TimezoneOption,
    TimezonePreferenceResponse,
)
from models.events import TimezonePreference
from services.timezone import (
    TimezonePreferenceStore,
    date_to_utc_timestamp,
    format_date,
    format_date_for_input,
    format_time_for_input,
    get_timezone_label,
    get_timezone_offset,
    list_supported_timezones,
)

router = APIRouter(prefix="/v1/timezone", dependencies=[Depends(verify_api_key)])


def _preference_response(pref: TimezonePreference) -> TimezonePreferenceResponse:
    return TimezonePreferenceResponse(
        mode=pref.mode,
        zone=pref.zone,
        label=get_timezone_label(pref),
        offset=get_timezone_offset(pref),
    )


@router.get("", response_model=TimezonePreferenceResponse)
def get_preference(store: TimezonePreferenceStore = Depends(get_timezone_store)):
    return _preference_response(store.get_preference())


@router.put("/mode", response_model=TimezonePreferenceResponse)
def set_mode(
    body: TimezoneModeUpdate,
    store: TimezonePreferenceStore = Depends(get_timezone_store),
):
    return _preference_response(store.set_mode(body.mode))


@router.put("/zone", response_model=TimezonePreferenceResponse)
def set_zone(
    body: TimezoneZoneUpdate,
    store: TimezonePreferenceStore = Depends(get_timezone_store),
):
    try:
        return _preference_response(store.set_zone(body.zone))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Unsupported timezone",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [str(e)],
            },
        )


@router.get("/zones", response_model=list[TimezoneOption])
def supported_zones():
    return list_supported_timezones()


@router.post("/convert", response_model=TimestampResponse)
def convert_to_timestamp(
    body: ConvertRequest,
    store: TimezonePreferenceStore = Depends(get_timezone_store),
):
    """Civil date/time in the session's zone -> UTC epoch millis."""
    pref = store.get_preference()
    try:
        timestamp = date_to_utc_timestamp(pref, body.date, body.time)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Could not convert date",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": [str(e)],
            },
        )
    return TimestampResponse(timestamp=timestamp, zone=pref.zone)


@router.get("/format", response_model=FormattedDateResponse)
def format_timestamp(
    timestamp: int = Query(..., description="UTC epoch millis"),
    fmt: str | None = Query(None, description="Optional strftime pattern"),
    store: TimezonePreferenceStore = Depends(get_timezone_store),
):
    """Render a UTC instant in the session's zone."""
    pref = store.get_preference()
    try:
        return FormattedDateResponse(
            timestamp=timestamp,
            zone=pref.zone,
            formatted=format_date(pref, timestamp, fmt),
            date=format_date_for_input(pref, timestamp),
            time=format_time_for_input(pref, timestamp),
        )
    except (ValueError, OverflowError, OSError) as e:
        # Instants outside the range datetime can represent
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Timestamp out of range",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": [str(e)],
            },
        )
