# app/services/roles.py
"""
Role management: the `role` custom claim on the Auth account, mirrored in `roles/{uid}`.

Every operation mutates the claim first and writes the role record second. The steps are
not atomic and nothing is rolled back: if the record write fails the claim stays set.
`app.services.roles_sync` repairs such drift from the claims side.
"""
import logging

from firebase_admin import firestore

from app.services.users import ROLES

logger = logging.getLogger("storefront.roles")


def _role_claims(role: str) -> dict:
    return {"role": role}


def create_user_with_role(auth, db, email: str, password: str, role: str):
    """
    1. Hesabı doğrulanmış e-posta ile oluşturur.
    2. `role` custom claim'ini atar.
    3. `roles/{uid}` kaydını yazar.
    """
    user = auth.create_user(email=email, email_verified=True, password=password)
    auth.set_custom_user_claims(user.uid, _role_claims(role))
    result = db.collection(ROLES).document(user.uid).set({
        "email": email,
        "role": role,
        "createdTimestamp": firestore.SERVER_TIMESTAMP,
    })
    logger.info("Account %s created with role %s", user.uid, role)
    return result


def delete_user_with_role(auth, uid: str):
    # roles/{uid} is removed by the account-deleted trigger, not here
    auth.delete_user(uid)
    logger.info("Account %s deleted", uid)


def edit_user_role(auth, db, uid: str, role: str):
    """Raises NotFound when the account has no role record yet (update, not merge)."""
    auth.set_custom_user_claims(uid, _role_claims(role))
    return db.collection(ROLES).document(uid).update({"role": role})


def add_user_role_by_email(auth, db, email: str, role: str):
    user = auth.get_user_by_email(email)
    auth.set_custom_user_claims(user.uid, _role_claims(role))
    result = db.collection(ROLES).document(user.uid).set({
        "email": email,
        "role": role,
        "createdTimestamp": firestore.SERVER_TIMESTAMP,
    }, merge=True)
    logger.info("Role %s assigned to %s (%s)", role, email, user.uid)
    return result
