"""Create a user account from the command line.

    python create_user.py trainer@example.com "Strong@Pass1" trainer "Tina Trainer"
"""
import sys

from mealplanner import create_app
from mealplanner.extensions import db
from mealplanner.models.user import User

ROLES = ("admin", "trainer", "customer")


def main(argv):
    if len(argv) != 4 or argv[2] not in ROLES:
        print(__doc__)
        print(f"role must be one of: {', '.join(ROLES)}")
        return 1

    email, password, role, name = argv
    app = create_app()

    with app.app_context():
        existing_user = User.query.filter_by(email=email.lower()).first()
        if existing_user:
            print(f"User with email '{email}' already exists.")
            return 1

        user = User(email=email.lower(), name=name, role=role, status="active")
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        print(f"{role.capitalize()} created successfully!")
        print(f"Email: {user.email}")
        print(f"Id: {user.id}")
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
