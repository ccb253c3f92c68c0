"""
Utilities - Datetime periods, error handling and team/project joins
"""
