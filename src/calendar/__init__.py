"""
Calendar backends: Google Calendar and an in-memory stand-in
"""
