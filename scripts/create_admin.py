from app.database import SessionLocal
from app.core.security import hash_password
from app.models import User, UserRole

import sys


def ensure_admin(email: str, password: str, username: str = "Admin"):
    db = SessionLocal()
    try:
        u = db.query(User).filter(User.email == email).first()
        if not u:
            u = User(
                email=email,
                username=username,
                password_hash=hash_password(password),
                role=UserRole.ADMIN,
            )
            db.add(u)
            db.commit()
            db.refresh(u)
            print(f"[OK] Created admin user id={u.id} email={email}")
        elif u.role != UserRole.ADMIN:
            u.role = UserRole.ADMIN
            db.commit()
            print(f"[OK] Promoted existing user to admin: {email}")
        else:
            print(f"[OK] Already admin: {email}")
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python scripts/create_admin.py <email> <password> [username]")
        sys.exit(1)
    email = sys.argv[1]
    password = sys.argv[2]
    username = sys.argv[3] if len(sys.argv) > 3 else "Admin"
    ensure_admin(email, password, username)
