# app/services/users.py
"""
Account lifecycle reactions.

Mirrors Firebase Auth accounts into `users/{uid}` profile documents and removes the
profile together with the `roles/{uid}` record when the account goes away.
"""
import logging

from firebase_admin import firestore

logger = logging.getLogger("storefront.users")

USERS = "users"
ROLES = "roles"


def create_user_doc(db, uid: str):
    """Profil dokümanını yalnızca oluşturulma zamanı ile açar."""
    result = db.collection(USERS).document(uid).set({
        "createdTimestamp": firestore.SERVER_TIMESTAMP,
    })
    logger.info("Profile created for %s", uid)
    return result


def delete_user_doc(db, uid: str):
    """
    Profile and role record are deleted in one batch: both go away together or
    neither does.
    """
    batch = db.batch()
    batch.delete(db.collection(USERS).document(uid))
    batch.delete(db.collection(ROLES).document(uid))
    results = batch.commit()
    logger.info("Profile and role record deleted for %s", uid)
    return results


def update_email_verified(db, uid: str):
    # merge=True: creates the profile if the account-created trigger has not run yet
    return db.collection(USERS).document(uid).set({
        "emailVerified": True,
        "emailVerifiedTimestamp": firestore.SERVER_TIMESTAMP,
    }, merge=True)
