"""
Tests for payments app.

- test_account_resolver.py / test_settlement_calculator.py: payout inputs
- test_payout_service.py / test_tasks.py: booking payouts
- test_refund_service.py: refund requests and approvals
- test_order_service.py: split checkout orders
- test_views.py: API endpoint tests

Usage:
    pytest payments/tests/
    pytest payments/tests/test_refund_service.py
"""
