"""
Article screening for literature reviews.

A reviewer logs in, steps through the articles assigned to them, records an
include/exclude decision with a reason, and checks a running summary. All
decisions are persisted by a spreadsheet-backed screening API.
"""

__version__ = "0.1.0"
