"""Test suite for the Job Ready application wizard.

This package contains tests for:
- Step and field validation (including conditional fields)
- Wizard navigation and submission status transitions
- Intake date generation
- Submission client response handling
- Notification email construction and dispatch
- The submission endpoint end to end
"""
