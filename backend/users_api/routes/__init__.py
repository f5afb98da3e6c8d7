# Routes package init
"""
Users API — API Routes Package
================================

Route Inventory:
    - users.py:   GET    {prefix}                    (list users)
                  GET    {prefix}/{id}               (get one user)
                  POST   {prefix}                    (create user)
                  PUT    {prefix}/{id}               (replace user fields)
                  DELETE {prefix}/{id}               (delete user)
                  PATCH  {prefix}/{id}/name|email|password
    - health.py:  GET    /health                     (service health check)

    {prefix} is settings.api_prefix, /api/v1/users by default.

Design Principle:
    Routes are THIN: unpack the request, call UserService, render the Outcome.
"""
