"""Attendance Bot package.

This package is organized by feature modules (attendance, roster, access,
reports, ...) with a thin Flask/Telegram controller layer on top of
service/repository layers.
"""
