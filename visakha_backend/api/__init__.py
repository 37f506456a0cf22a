"""
API Package — FastAPI Routers • Models • Session Tokens
=======================================================

Mission
-------
This package defines the admin dashboard's HTTP interface: the feedback inbox,
login, team management, knowledge curation, statistics and generic
collection CRUD.

Contents
--------
- fast_api
    Public router:
      • Feedback conversations: list (paginated), detail, resolved toggle
      • Markdown export of every conversation with feedback

- auth
    Auth gateway:
      • Google ID token verification (`verify_external_identity`)
      • Bearer token guards (`get_current_user`, `require_super_admin`)
      • /auth/google and /auth/dev-login

- admin_api
    Super-admin router under /admin:
      • moderators, feedback/negative, knowledge (+ sync, search), stats,
        db/{collection}

- models
    Pydantic data contracts, camelCase on the wire.

- utils
    JWT helpers:
      • create_access_token(payload) — issues signed JWTs with exp
      • verify_token(token) — validates JWTs and extracts {email, role}

- markdown_export
    Renders conversations into the Markdown export document.

- dependencies
    Accessors for the services stored on `app.state`.
"""
