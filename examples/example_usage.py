"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the time tracking rules live in the services.
"""

from datetime import datetime, timedelta

from ojt_tracker.common.datetime_utils import format_elapsed
from ojt_tracker.container import build_container


def main():
    container = build_container(backend="memory")
    attendance = container.attendance_service

    start = datetime.now().replace(hour=9, minute=5, second=0, microsecond=0)
    result = attendance.clock_in("intern-1", now=start)
    print(result.message)

    attendance.clock_out("intern-1", now=start + timedelta(hours=3))
    attendance.clock_in("intern-1", now=start + timedelta(hours=4))

    summary = attendance.get_summary("intern-1", now=start + timedelta(hours=5, minutes=30))
    print("today:", format_elapsed(summary.today_rendered_seconds))
    print("remaining hours:", summary.to_dict()["remaining_hours"])


if __name__ == "__main__":
    main()
