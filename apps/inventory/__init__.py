"""
Inventory app for the grocery product catalog.
"""
