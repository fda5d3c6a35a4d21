"""Fleet driver license tracker.

This package is organized by feature modules (users, drivers, licenses,
notifications, dashboard) with a thin Flask controller layer on top of
service/repository layers.
"""
