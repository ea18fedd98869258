"""
Cubic equations of state
"""
