# app/services/roles_sync.py
from __future__ import annotations

import logging

from firebase_admin import firestore

from app.services.users import ROLES

logger = logging.getLogger("storefront.roles_sync")


def sync_role_records_once(auth, db) -> int:
    """
    Role claim'lerini `roles` koleksiyonu ile eşitler.
    Claim her zaman önce yazıldığı için kaynak olarak claim esas alınır.
    Dönüş: oluşturulan/güncellenen kayıt sayısı.
    """
    changed = 0
    for user in auth.list_users().iterate_all():
        role = (user.custom_claims or {}).get("role")
        if not role:
            continue
        ref = db.collection(ROLES).document(user.uid)
        snap = ref.get()
        if not snap.exists:
            ref.set({
                "email": user.email,
                "role": role,
                "createdTimestamp": firestore.SERVER_TIMESTAMP,
            })
            logger.warning("Missing role record recreated for %s", user.uid)
            changed += 1
            continue
        if (snap.to_dict() or {}).get("role") != role:
            ref.update({"role": role})
            logger.warning("Role record of %s realigned to claim %r", user.uid, role)
            changed += 1
    return changed
