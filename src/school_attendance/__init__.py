"""School Attendance package.

This package is organized by feature modules (calendar, attendance, reports)
with SOLID service/repository layers around a pure aggregation core.
"""
