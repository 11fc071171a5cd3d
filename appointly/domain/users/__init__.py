"""
Users Domain

Staff accounts (owner, manager, leader, employee). Only owners manage them.
"""
