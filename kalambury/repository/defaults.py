"""
Default phrase pool - Seeded into an empty phrase store.

Five categories with ten phrases each.
"""

from __future__ import annotations


DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("animals", "Animals"),
    ("jobs", "Jobs & Professions"),
    ("sports", "Sports"),
    ("movies", "Movies & TV Shows"),
    ("food", "Food & Drinks"),
]

DEFAULT_PHRASES: dict[str, list[str]] = {
    "animals": [
        "Dog", "Cat", "Elephant", "Giraffe", "Lion",
        "Tiger", "Zebra", "Monkey", "Penguin", "Bear",
    ],
    "jobs": [
        "Doctor", "Teacher", "Firefighter", "Police Officer", "Chef",
        "Pilot", "Engineer", "Artist", "Musician", "Lawyer",
    ],
    "sports": [
        "Football", "Basketball", "Tennis", "Swimming", "Volleyball",
        "Baseball", "Golf", "Hockey", "Skiing", "Rugby",
    ],
    "movies": [
        "Star Wars", "Game of Thrones", "The Simpsons", "Friends", "Harry Potter",
        "Marvel", "Batman", "Breaking Bad", "Stranger Things", "The Office",
    ],
    "food": [
        "Pizza", "Hamburger", "Sushi", "Pasta", "Chocolate",
        "Coffee", "Ice Cream", "Taco", "Pancake", "Sandwich",
    ],
}
