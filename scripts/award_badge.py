from app.database import SessionLocal
from app.models import Badge, User

import sys


def award_badge(email: str, badge_name: str, description: str | None = None):
    db = SessionLocal()
    try:
        u = db.query(User).filter(User.email == email).first()
        if not u:
            print(f"[ERR] No user with email={email}")
            sys.exit(1)
        badge = db.query(Badge).filter(Badge.name == badge_name).first()
        if not badge:
            badge = Badge(name=badge_name, description=description)
            db.add(badge)
            db.flush()
            print(f"[OK] Created badge id={badge.id} name={badge_name}")
        if badge in u.badges:
            print(f"[OK] {email} already has badge {badge_name}")
        else:
            u.badges.append(badge)
            print(f"[OK] Awarded {badge_name} to {email}")
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python scripts/award_badge.py <email> <badge_name> [description]")
        sys.exit(1)
    award_badge(sys.argv[1], sys.argv[2], sys.argv[3] if len(sys.argv) > 3 else None)
