"""OJT Tracker package.

Attendance core of the intern operations portal: clock-in/clock-out time
tracking, rendered hours against a required-hours target, and a TTL query
cache. Organized by feature modules with a thin Flask controller layer over
service/repository layers.
"""
