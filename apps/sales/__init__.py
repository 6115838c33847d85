"""
Sales app for grocery checkout.

Transactions priced with the Senior Citizen / PWD discount engine,
refunds and voids, and receipts.
"""
