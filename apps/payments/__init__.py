"""
Payments App - Payment Lifecycle Management

This app records payments for orders and drives them through their lifecycle.

Key Features:
- Payment creation with full input validation
- Status state machine (pending -> processing -> completed -> refunded)
- One-time refunds of completed payments
- Receipts generated on demand
- Currency table with conversion and formatting
- Store-wide payment statistics

Architecture:
- Models: Payment
- Services: payment management, status management, refund processing, statistics
- Currency: static table, conversion and formatting helpers
- Views: RESTful API with a ViewSet plus currency endpoints
- Exceptions: Domain exception hierarchy
"""
