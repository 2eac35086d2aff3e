# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - Password sign-in and session tokens
# - JWT validation via auth.get_user()

"""
Supabase Auth calls used here:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Exchange email/password for an access token
- auth.get_user(jwt=...) - Resolve an access token to the user it belongs to
- auth.sign_out() - Logout

The resolved user id is the primary key of the user's row in the profiles table
(see app/modules/profiles/models.py). Browser sessions carry the access token
in an http-only cookie named by settings.auth_cookie_name; API clients send it
as a Bearer token.
"""
