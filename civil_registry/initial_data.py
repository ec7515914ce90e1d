from sqlalchemy.orm import Session
from civil_registry.core.database import Base, SessionLocal, engine
from civil_registry.models.user import User, UserRole
from civil_registry.core.security import get_password_hash
from civil_registry.core.config import settings
from civil_registry import models  # noqa: F401

def init_db() -> None:
    """Initialize database with tables and the first admin account"""

    # Create all tables
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()

    try:
        existing_admin = db.query(User).filter(User.role == UserRole.ADMIN.value).first()

        if not existing_admin:
            admin_user = User(
                email=settings.FIRST_SUPERUSER_EMAIL.strip().lower(),
                hashed_password=get_password_hash(settings.FIRST_SUPERUSER_PASSWORD),
                full_name="System Administrator",
                role=UserRole.ADMIN.value,
                is_active=True,
            )

            db.add(admin_user)
            db.commit()
            db.refresh(admin_user)

            print(f"✅ Initial admin created:")
            print(f"   Email: {admin_user.email}")
            print(f"   ⚠️  IMPORTANT: Change this password after first login!")

        else:
            print("✅ Admin already exists in the database")

    except Exception as e:
        print(f"❌ Error creating initial admin: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    print("🚀 Initializing database...")
    init_db()
    print("🎉 Database initialization completed!")
