"""
Configuration for the Weekly Event Scheduler
"""
