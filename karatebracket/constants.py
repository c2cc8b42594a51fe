"""Session and role constants shared across blueprints."""

# Session keys, set by the external sign-in flow
SESSION_USER_ID = "user_id"
SESSION_IS_ADMIN = "is_admin"

# Role stored on 'users' documents that grants administration
ROLE_ADMIN = "admin"
