"""
Scheduling Domain

Weekly availability schedule (days, hours, slot duration, overbooking rules),
the pure slot generator that renders it into bookable slots, and the optional
AI schedule suggestion.
"""
