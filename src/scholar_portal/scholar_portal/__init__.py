"""Scholar Portal package.

This package is organized by feature modules (credentials, payroll, activities, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
