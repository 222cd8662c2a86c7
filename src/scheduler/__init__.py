"""
Scheduling core: templates, week window, holidays, retention and the weekly run
"""
