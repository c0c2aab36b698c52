"""Cache key naming shared by services that read through ``QueryCache``."""

ALL_ATTENDANCE = "attendance:all"
ALL_SCHEDULES = "schedules:all"


def attendance_key(user_id: str) -> str:
    return f"attendance:{user_id}"


def schedule_key(user_id: str) -> str:
    return f"schedule:{user_id}"
