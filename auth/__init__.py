"""
auth — User authentication module.

Provides:
  • Password hashing (bcrypt, configurable work factor)
  • Session token issuance & verification (HS256 JWT)
  • Bearer header parsing and the ``AuthGateway`` used by protected routes
  • Signup / signin / me flows and API routes
"""
