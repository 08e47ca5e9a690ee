"""Billing System package.

Feature modules (attendance, invoices, merge) keep the business rules in
plain services and pure functions; Flask controllers and the MySQL
repository are thin layers around them.
"""
