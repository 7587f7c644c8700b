"""Care Timesheet package.

Staff time-and-leave tracking organized by feature modules (cycles, records,
summaries, payroll, ...) with a thin Flask controller layer over service and
repository layers.
"""
