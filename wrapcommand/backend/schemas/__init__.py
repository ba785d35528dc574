"""
Pydantic Schemas.

- base.py: response envelope, error detail, pagination
- organization.py: tenant create/update/response
- product.py: catalog products and pricing
- vehicle.py: dimension rows, sqft lookup and match results
- quote.py: estimates, dashboard quotes, public embed submissions
"""
