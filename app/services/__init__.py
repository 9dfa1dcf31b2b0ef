"""
Services layer - Business logic goes here.
Keep services focused on specific domains (reports, users, community, etc.)

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Services raise app.core.exceptions errors; routes never build error responses
- Each service takes its session (and mailer, where needed) in the constructor
"""
