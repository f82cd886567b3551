"""
Cross-app test suite for the farm visit backend.

Test Organization:
- integration/ - end-to-end API scenarios (submission, dashboard, export)
- App-specific tests remain in their respective app directories (e.g., accounts/tests.py, visits/tests/)
"""
