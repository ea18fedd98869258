"""
Unit and regression tests of the dualeos package
"""
