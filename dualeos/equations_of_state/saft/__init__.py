"""
SAFT family of equations of state
"""
