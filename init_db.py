"""
Database initialization script.
Run this script to create the database and the catalog tables.
"""

import mysql.connector
from sqlalchemy.engine import make_url

from app import create_app
from common.database import db

# --- Catalog models ---
from models.category import Category
from models.subcategory import Subcategory, product_subcategory
from models.product import Product
from models.image import Image
from models.pdf import Pdf


def create_database(db_uri):
    """Create the MySQL database if it doesn't exist."""
    url = make_url(db_uri)
    if not url.drivername.startswith('mysql'):
        print(f"Skipping database creation for '{url.drivername}'.")
        return

    try:
        conn = mysql.connector.connect(
            host=url.host,
            port=url.port or 3306,
            user=url.username,
            password=url.password
        )

        cursor = conn.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{url.database}`")
        print(f"Database '{url.database}' created or already exists.")

        cursor.close()
        conn.close()
    except mysql.connector.Error as err:
        print(f"Error: {err}")


def init_database():
    """Initialize the database with all catalog tables."""
    app = create_app()
    with app.app_context():
        print("Initializing Database:")
        print("=====================")

        create_database(app.config['SQLALCHEMY_DATABASE_URI'])

        print("\nCreating tables...")
        db.create_all()
        for table in (Category.__table__, Subcategory.__table__, product_subcategory,
                      Product.__table__, Image.__table__, Pdf.__table__):
            print(f"✓ {table.name}")

        print("\nDatabase initialization completed successfully!")


if __name__ == "__main__":
    init_database()
