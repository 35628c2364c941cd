"""Shift Attendance package.

Organized by feature modules (shifts, attendance, presence, reports, ...)
with a thin Flask JSON controller layer over service/repository layers, plus
background sweeps for auto check-out and absence marking.
"""
