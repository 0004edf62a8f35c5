"""
Grant the admin role to a user, looked up by email.

Usage: python scripts/promote_admin.py someone@example.com
"""

import json
import os
import sys
from pathlib import Path

import firebase_admin
from firebase_admin import auth, credentials, firestore

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from arenaclash.core.constants import ROLE_ADMIN, USERS_COLLECTION  # noqa: E402


def initialize_firebase():
    """Initializes the Firebase Admin SDK."""
    cred = None
    cred_path = project_root / "firebase_credentials.json"
    if cred_path.exists():
        cred = credentials.Certificate(str(cred_path))
    else:
        cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
        if cred_json:
            try:
                cred = credentials.Certificate(json.loads(cred_json))
            except (json.JSONDecodeError, ValueError) as e:
                print(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")
                return False

    if not cred:
        print("Could not find Firebase credentials in file or environment variable.")
        return False

    if not firebase_admin._apps:
        firebase_admin.initialize_app(cred)
    return True


def promote(email):
    """Set role=admin on the user's profile document."""
    try:
        user = auth.get_user_by_email(email)
    except auth.UserNotFoundError:
        print(f"No Auth user with email {email}.")
        return False

    db = firestore.client()
    user_ref = db.collection(USERS_COLLECTION).document(user.uid)
    if not user_ref.get().exists:
        print(f"{email} has never logged in, so there is no profile to promote.")
        return False

    user_ref.update({"role": ROLE_ADMIN})
    print(f"{email} ({user.uid}) is now an admin.")
    return True


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    if not initialize_firebase():
        sys.exit(1)
    sys.exit(0 if promote(sys.argv[1]) else 1)
