"""
RentPay Payments Backend

Thin HTTP backend that links merchant accounts and forwards rent payments
to the GETTRX payment processor.
"""

__version__ = "0.1.0"
