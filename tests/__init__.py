"""
EduWallet Test Suite

- test_money.py: amount parsing and storage format
- test_aggregation.py: totals, group-by, windows, transaction merge, goal progress
- test_alerts.py: large-expense and budget evaluation, notification decision stage
- test_reports.py: weekly report composition and analytics summaries
- test_email.py: email dispatcher, templates and the relay handler
- test_record_store.py: Firestore record store against a mocked client
- test_api.py: HTTP routes with an in-memory store
- test_scheduler.py: weekly report job

Run all tests:
    pytest tests/
"""
