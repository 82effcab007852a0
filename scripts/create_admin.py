"""
Create an ADMIN account, or promote an existing user to ADMIN.
Signup never creates admins, so the first one is bootstrapped here.

Run: python -m scripts.create_admin admin@example.com 'S3curePass!' [initial_points]
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mockhire.core.security import hash_password, normalize_email
from mockhire.db.models.user import User, UserRole
from mockhire.db.session import SessionLocal, atomic
from mockhire.services import ledger_service
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_admin(email: str, password: str = None, initial_points: int = 0) -> bool:
    """Create or promote ``email`` to ADMIN, optionally granting starting points."""
    email = normalize_email(email)
    db = SessionLocal()
    try:
        with atomic(db):
            user = db.query(User).filter(User.email == email).first()

            if not user:
                if not password:
                    logger.error(f"User {email} not found and no password provided. Cannot create user.")
                    return False

                logger.info(f"Creating new admin: {email}")
                user = User(
                    email=email,
                    full_name="Administrator",
                    password_hash=hash_password(password),
                    role=UserRole.ADMIN,
                )
                db.add(user)
                db.flush()
            else:
                logger.info(f"Promoting existing user to ADMIN: {email} (ID: {user.id})")
                user.role = UserRole.ADMIN

            if initial_points > 0:
                ledger_service.earn(db, user.id, initial_points, "Initial admin grant")

        logger.info(f"User {email} is ADMIN (ID: {user.id})")
        return True
    except Exception as e:
        logger.error(f"Error creating admin: {e}", exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.create_admin EMAIL [PASSWORD] [INITIAL_POINTS]")
        sys.exit(2)

    email = sys.argv[1]
    password = sys.argv[2] if len(sys.argv) > 2 else None
    initial_points = int(sys.argv[3]) if len(sys.argv) > 3 else 0

    if create_admin(email, password, initial_points):
        print(f"\n[SUCCESS] {email} is now an admin")
    else:
        print(f"\n[ERROR] Failed to set up admin {email}")
        sys.exit(1)
