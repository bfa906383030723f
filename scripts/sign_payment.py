#!/usr/bin/env python3
"""
Print the checkout callback signature for an order/payment pair, for testing
/api/verify-payment locally without the Razorpay widget.
Run from the project root: python -m scripts.sign_payment order_xxx pay_xxx
"""
import os
import sys

# project root on PYTHONPATH
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storefront.services.gateway.client import get_gateway_client


def main():
    if len(sys.argv) != 3:
        print("usage: sign_payment.py <razorpay_order_id> <razorpay_payment_id>")
        sys.exit(2)
    gateway = get_gateway_client()
    if not gateway.key_secret:
        print("RAZORPAY_KEY_SECRET is not set in .env, cannot sign.")
        sys.exit(1)
    order_id, payment_id = sys.argv[1], sys.argv[2]
    print(gateway.compute_signature(order_id, payment_id))


if __name__ == "__main__":
    main()
