from postcraft.db.session import engine
from postcraft.db.base import Base
from postcraft.models import *  # noqa: F401,F403  register all models

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("✅ All tables created successfully!")
