#!/usr/bin/env python3
"""
Firebase Admin SDK ile kullanıcıya `role` custom claim'i atar ve `roles/{uid}` kaydını yazar.
(`addUserRoleByEmail` callable'ı ile aynı işlem, shell'den.)
"""
import sys

from firebase_admin import auth

from app.core.clients import get_clients
from app.services.roles import add_user_role_by_email


def set_role_claim(user_email: str, role: str) -> bool:
    """Kullanıcıya role claim'i ekler."""
    clients = get_clients()
    try:
        add_user_role_by_email(clients.auth, clients.db, user_email, role)
        user = clients.auth.get_user_by_email(user_email)
        print(f"✅ Role '{role}' set for {user.uid} - {user.email}")
        print(f"✅ Custom claims: {user.custom_claims}")
        return True
    except auth.UserNotFoundError:
        print(f"❌ User not found: {user_email}")
        return False
    except Exception as e:
        print(f"❌ Error setting role claim: {e}")
        return False


def main(argv) -> int:
    if len(argv) != 3:
        print("Usage: python set_role_claim.py <user_email> <role>")
        print("Example: python set_role_claim.py admin@example.com admin")
        return 1

    user_email, role = argv[1], argv[2]
    print(f"Setting role '{role}' for: {user_email}")
    if set_role_claim(user_email, role):
        print("🎉 Role claim set successfully!")
        print("The user will need to sign out and sign in again for the changes to take effect.")
        return 0
    print("💥 Failed to set role claim")
    return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
