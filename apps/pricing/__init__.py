"""
Pricing app for grocery POS checkout.

Senior Citizen (RA 9994) and PWD (RA 10754) VAT exemption and discount,
plus VAT extraction helpers for VAT-inclusive shelf prices.
"""
