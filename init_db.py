from app import app
from models import db

def init_db(drop=False):
    with app.app_context():
        if drop:
            print("Dropping all tables...")
            db.drop_all()
        print("Creating all tables...")
        db.create_all()

        # Mark the schema as current so flask-migrate starts from here
        from flask_migrate import stamp
        stamp()
        print("Database initialized and stamped.")

if __name__ == "__main__":
    import sys
    init_db(drop='--drop' in sys.argv)
