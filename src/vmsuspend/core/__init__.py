"""
Core logic: settings, vmrun launcher, auto-start and power monitoring.
"""
