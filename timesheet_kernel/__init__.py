"""
Timesheet Kernel

The workflow and aggregation core of a time-tracking tool:
- Weekly timesheet status per user (draft -> pending -> approved/rejected -> reopened)
- Role-based editability of time entries
- Daily/weekly totals and customer/project groupings
- Project budget actuals (day-equivalents and cost)
"""

__version__ = "0.1.0"
