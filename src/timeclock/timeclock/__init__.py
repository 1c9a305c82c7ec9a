"""Timeclock package.

Employee time tracking and HR administration: clock in/out, automatic
clock-out of forgotten sessions, time-off requests against yearly
allocations, and payroll timesheets. Organized by feature modules with a
thin Flask controller layer over service/repository layers.
"""
