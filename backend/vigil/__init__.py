"""
Vigil billing backend.

Stripe billing-portal and webhook endpoints backed by the Supabase
``user_subscriptions`` table. All routers are aggregated in api.py.

Collaborators are created once in the application lifespan and passed in
explicitly:
    from vigil.services.supabase import DBConnection
    db = DBConnection()
    client = await db.client
"""
