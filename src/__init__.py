"""
Weekly Event Scheduler source packages
"""
