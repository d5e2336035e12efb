"""
liftlog Application Package

This package contains the workout tracking service:
- api: FastAPI application, routes and schemas
- auth: Supabase Auth token verification
- billing: Stripe checkout sessions and payment webhooks
- db: Record store clients (Supabase and in-memory)
- policy: Plan quota and role visibility rules
- services: Reporting helpers built on the record store
- tests: Test suites
"""
