"""
Scheduling domain - slot availability, booking windows and calendar views.

- time_calculator.py      Scheduled time parsing, durations, window overlap
- availability_service.py Business-hours slots and conflict checks
- calendar_service.py     Staff calendar events and day schedules
- router.py               /calendar and /admin/calendar endpoints
"""
