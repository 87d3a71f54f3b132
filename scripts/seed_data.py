#!/usr/bin/env python3
"""
Database Seed Script

Populates the catalog with sample authors, books and a demo user for
development.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates sample authors, genre tags and books
4. Creates a demo user that can log in with the shared password
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.orm import Session

from library_api.config import get_settings
from library_api.database import SessionLocal, create_tables, drop_tables
from library_api.models import Author, Book, Genre, User


def create_authors(db: Session) -> dict[str, Author]:
    """Create sample authors."""
    print("Creating authors...")
    authors_data = [
        {"name": "Robert Martin", "born": 1952},
        {"name": "Martin Fowler", "born": 1963},
        {"name": "Fyodor Dostoevsky", "born": 1821},
        {"name": "Joshua Kerievsky", "born": None},
        {"name": "Sandi Metz", "born": None},
    ]

    authors = {}
    for data in authors_data:
        author = Author(**data)
        db.add(author)
        authors[data["name"]] = author

    db.commit()
    print(f"Created {len(authors)} authors.")
    return authors


def create_genres(db: Session) -> dict[str, Genre]:
    """Create the genre tags used by the sample books."""
    print("Creating genres...")
    names = ["refactoring", "agile", "patterns", "design", "classic", "crime", "revolution"]

    genres = {}
    for name in names:
        genre = Genre(name=name)
        db.add(genre)
        genres[name] = genre

    db.commit()
    print(f"Created {len(genres)} genres.")
    return genres


def create_books(
    db: Session,
    authors: dict[str, Author],
    genres: dict[str, Genre],
) -> list[Book]:
    """Create sample books linked to the authors and genres above."""
    print("Creating books...")

    books_data = [
        {
            "title": "Clean Code",
            "published": 2008,
            "author": "Robert Martin",
            "genres": ["refactoring"],
        },
        {
            "title": "Agile software development",
            "published": 2002,
            "author": "Robert Martin",
            "genres": ["agile", "patterns", "design"],
        },
        {
            "title": "Refactoring, edition 2",
            "published": 2018,
            "author": "Martin Fowler",
            "genres": ["refactoring"],
        },
        {
            "title": "Refactoring to patterns",
            "published": 2008,
            "author": "Joshua Kerievsky",
            "genres": ["refactoring", "patterns"],
        },
        {
            "title": "Practical Object-Oriented Design, An Agile Primer Using Ruby",
            "published": 2012,
            "author": "Sandi Metz",
            "genres": ["refactoring", "design"],
        },
        {
            "title": "Crime and punishment",
            "published": 1866,
            "author": "Fyodor Dostoevsky",
            "genres": ["classic", "crime"],
        },
        {
            "title": "The Demon",
            "published": 1872,
            "author": "Fyodor Dostoevsky",
            "genres": ["classic", "revolution"],
        },
    ]

    books = []
    for data in books_data:
        book = Book(
            title=data["title"],
            published=data["published"],
            author=authors[data["author"]],
            genres=[genres[name] for name in data["genres"]],
        )
        db.add(book)
        books.append(book)

    db.commit()
    print(f"Created {len(books)} books.")
    return books


def create_users(db: Session) -> list[User]:
    """Create a demo user."""
    print("Creating users...")
    user = User(username="mluukkai", favorite_genre="refactoring")
    db.add(user)
    db.commit()
    print("Created 1 user.")
    return [user]


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, drops and recreates every table before seeding.
    """
    settings = get_settings()

    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    if clear_existing:
        print("Dropping existing tables...")
        drop_tables()

    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        authors = create_authors(db)
        genres = create_genres(db)
        books = create_books(db, authors, genres)
        users = create_users(db)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(authors)}")
        print(f"  - Genres: {len(genres)}")
        print(f"  - Books: {len(books)}")
        print(f"  - Users: {len(users)} (log in with the shared password)")
        print(f"\nGraphQL endpoint at http://localhost:{settings.port}/graphql")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
