"""
Campaign Service

Advertising campaign management microservice providing:
- Campaign CRUD with a running/stopped flag
- Per-country payouts with budget, auto-stop and budget alerts
- Country directory (seeded once)
- Best-effort lifecycle notifications to integration_service

Port: 3000
"""

__version__ = "1.0.0"
__service__ = "campaign_service"
