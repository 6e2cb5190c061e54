"""
AWS Lambda functions for the ActivityDash application.

Modules:
    api_handler: REST API endpoints for the dashboard
"""

# Lambda entry points are imported directly from their modules
