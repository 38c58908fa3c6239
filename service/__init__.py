# service/__init__.py
"""HTTP JSON surface for the matching engine and CV tailoring"""
