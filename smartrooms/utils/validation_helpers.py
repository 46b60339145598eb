from datetime import timezone


def to_naive_utc(value):
    """Bookings are stored as naive UTC; convert offset-carrying datetimes."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_date_order(start_date, end_date):
    if start_date is None or end_date is None:
        return
    if not to_naive_utc(start_date) < to_naive_utc(end_date):
        raise ValueError("startDate must be before endDate")
