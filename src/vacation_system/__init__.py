"""Vacation System package.

Feature modules (calendars, users, vacations) with a thin Flask controller
layer on top of service/repository layers.
"""
