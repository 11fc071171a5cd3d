"""
Bookings Domain

The booking ledger: public booking creation, one-time customer ratings, and
the staff-facing listings, deletion and export.
"""
