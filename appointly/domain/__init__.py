"""Domain packages: scheduling, bookings, users"""
