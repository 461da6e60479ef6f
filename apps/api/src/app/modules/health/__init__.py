"""
Health module - System health snapshots, request metrics and the periodic
health monitor.
"""
