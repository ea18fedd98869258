"""
General tools for numerical routines and worker pools
"""
